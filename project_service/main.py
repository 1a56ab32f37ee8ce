# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from project_service.api.api import api_router
from project_service.core.config import settings
from project_service.core.exceptions import (
    CustomHTTPException,
    RequestValidationError,
    http_exception_handler,
    python_exception_handler,
    validation_exception_handler,
)
from project_service.core.logging import set_request_id, setup_logging
from project_service.db.base import Base
from project_service.db.session import engine
from project_service.models import *  # noqa: F401,F403

# Initialize logging at module level for use in lifespan
setup_logging(settings.LOG_LEVEL)
_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.
    Creates the database tables on startup when DB_AUTO_CREATE is enabled.
    """
    _logger.info(f"Starting {settings.PROJECT_NAME} {settings.VERSION}")
    if settings.DB_AUTO_CREATE:
        _logger.info("Creating database tables...")
        Base.metadata.create_all(bind=engine)
        _logger.info("Database tables ready")
    yield
    _logger.info("Shutting down, disposing database engine")
    engine.dispose()


def create_app() -> FastAPI:
    enable_docs = settings.ENABLE_API_DOCS
    openapi_url = f"{settings.API_PREFIX}/openapi.json" if enable_docs else None
    docs_url = f"{settings.API_PREFIX}/docs" if enable_docs else None
    redoc_url = f"{settings.API_PREFIX}/redoc" if enable_docs else None

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Project collaboration service API",
        version=settings.VERSION,
        openapi_url=openapi_url,
        docs_url=docs_url,
        redoc_url=redoc_url,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        # Reuse the caller's request id when one is supplied
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        set_request_id(request_id)

        start_time = time.time()
        client_ip = request.client.host if request.client else "Unknown"
        _logger.info(
            f"request : {request.method} {request.url.path} {request.query_params} {client_ip}"
        )
        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            _logger.info(
                f"response: {request.method} {request.url.path} {response.status_code} {process_time:.2f}ms"
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            set_request_id(None)

    # Setup CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register exception handlers
    app.add_exception_handler(CustomHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, python_exception_handler)

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app


app = create_app()
