# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Exception hierarchy and FastAPI exception handlers.

Every failure raised by the service layer is a CustomHTTPException subclass,
so the error kind survives up to the HTTP layer, which only renders it.
"""

import logging
from typing import Any, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

__all__ = [
    "CustomHTTPException",
    "NotFoundException",
    "ProjectNotFoundException",
    "UserNotFoundException",
    "CollaboratorNotFoundException",
    "BudgetNotFoundException",
    "ExpenseNotFoundException",
    "MilestoneNotFoundException",
    "TaskNotFoundException",
    "FileNotFoundException",
    "UnauthorizedOperationException",
    "ConflictException",
    "ValidationException",
    "NotConnectedException",
    "InvalidStateException",
    "StorageIOException",
    "RequestValidationError",
    "http_exception_handler",
    "validation_exception_handler",
    "python_exception_handler",
]


class CustomHTTPException(HTTPException):
    """HTTP exception carrying an optional application error code."""

    def __init__(
        self,
        status_code: int,
        detail: Any = None,
        error_code: Optional[int] = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code


class NotFoundException(CustomHTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ProjectNotFoundException(NotFoundException):
    pass


class UserNotFoundException(NotFoundException):
    pass


class CollaboratorNotFoundException(NotFoundException):
    pass


class BudgetNotFoundException(NotFoundException):
    pass


class ExpenseNotFoundException(NotFoundException):
    pass


class MilestoneNotFoundException(NotFoundException):
    pass


class TaskNotFoundException(NotFoundException):
    pass


class FileNotFoundException(NotFoundException):
    pass


class UnauthorizedOperationException(CustomHTTPException):
    """Caller is authenticated but lacks the required role on the project."""

    def __init__(self, detail: str = "Operation not permitted"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictException(CustomHTTPException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ValidationException(CustomHTTPException):
    def __init__(self, detail: str = "Invalid input data"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotConnectedException(CustomHTTPException):
    """Collaborator candidate is not one of the owner's connections."""

    def __init__(self, detail: str = "Users are not connected"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class InvalidStateException(CustomHTTPException):
    def __init__(self, detail: str = "Invalid state"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail
        )


class StorageIOException(CustomHTTPException):
    def __init__(self, detail: str = "Storage operation failed"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Render HTTP exceptions as JSON"""
    content = {"detail": exc.detail}
    error_code = getattr(exc, "error_code", None)
    if error_code is not None:
        content["error_code"] = error_code
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors with the offending fields"""
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": "Request validation failed", "errors": errors},
    )


async def python_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected errors"""
    logger.exception(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )
