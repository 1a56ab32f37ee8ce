# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import json

import pytest
from fastapi import HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from project_service.core.exceptions import (
    BudgetNotFoundException,
    ConflictException,
    CustomHTTPException,
    InvalidStateException,
    NotConnectedException,
    NotFoundException,
    StorageIOException,
    UnauthorizedOperationException,
    ValidationException,
    http_exception_handler,
    python_exception_handler,
    validation_exception_handler,
)


@pytest.mark.unit
class TestCustomExceptions:
    """Test custom exception classes"""

    @pytest.mark.parametrize(
        "exc_class,expected_status",
        [
            (NotFoundException, status.HTTP_404_NOT_FOUND),
            (UnauthorizedOperationException, status.HTTP_403_FORBIDDEN),
            (ConflictException, status.HTTP_409_CONFLICT),
            (ValidationException, status.HTTP_400_BAD_REQUEST),
            (NotConnectedException, status.HTTP_403_FORBIDDEN),
            (InvalidStateException, status.HTTP_500_INTERNAL_SERVER_ERROR),
            (StorageIOException, status.HTTP_502_BAD_GATEWAY),
        ],
    )
    def test_status_codes(self, exc_class, expected_status):
        """Test each error kind maps to its HTTP status"""
        exc = exc_class(detail="boom")

        assert exc.status_code == expected_status
        assert exc.detail == "boom"
        assert isinstance(exc, HTTPException)

    def test_entity_not_found_is_not_found(self):
        """Test entity specific not-found exceptions keep the 404 kind"""
        exc = BudgetNotFoundException("Budget not found")

        assert isinstance(exc, NotFoundException)
        assert exc.status_code == status.HTTP_404_NOT_FOUND

    def test_custom_http_exception_with_error_code(self):
        """Test CustomHTTPException with custom error code"""
        exc = CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal error",
            error_code=5001,
        )

        assert exc.error_code == 5001

    def test_custom_http_exception_without_error_code(self):
        """Test CustomHTTPException without custom error code"""
        exc = CustomHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Bad request"
        )

        assert exc.error_code is None


@pytest.mark.asyncio
@pytest.mark.unit
class TestExceptionHandlers:
    """Test exception handler functions"""

    async def test_http_exception_handler(self):
        """Test HTTP exception handler returns correct JSON response"""
        exc = NotFoundException(detail="Project not found")

        response = await http_exception_handler(request=None, exc=exc)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = json.loads(response.body)
        assert body == {"detail": "Project not found"}

    async def test_http_exception_handler_with_custom_error_code(self):
        """Test HTTP exception handler with custom error code"""
        exc = CustomHTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error",
            error_code=5001,
        )

        response = await http_exception_handler(request=None, exc=exc)

        body = json.loads(response.body)
        assert body["detail"] == "Server error"
        assert body["error_code"] == 5001

    async def test_validation_exception_handler(self):
        """Test validation exception handler lists the offending fields"""

        class ExpenseModel(BaseModel):
            amount: float

        with pytest.raises(ValidationError) as exc_info:
            ExpenseModel(amount="lots")
        exc = RequestValidationError(errors=exc_info.value.errors())

        response = await validation_exception_handler(request=None, exc=exc)

        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = json.loads(response.body)
        assert body["detail"] == "Request validation failed"
        assert body["errors"][0]["loc"] == ["amount"]

    async def test_python_exception_handler(self):
        """Test Python exception handler for general exceptions"""
        response = await python_exception_handler(
            request=None, exc=Exception("Something went wrong")
        )

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert json.loads(response.body) == {"detail": "Internal server error"}
