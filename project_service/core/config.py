# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Any, List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Project configuration
    PROJECT_NAME: str = "Project Service"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"
    # API docs toggle (from env ENABLE_API_DOCS, default True)
    ENABLE_API_DOCS: bool = True

    # Environment configuration
    ENVIRONMENT: str = "development"  # development or production

    # Database configuration
    DATABASE_URL: str = "sqlite:///./project_service.db"

    # Create tables on startup when migrations are not managed externally
    DB_AUTO_CREATE: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    # JWT configuration
    SECRET_KEY: str = "secret-key"
    ALGORITHM: str = "HS256"
    # Audience is only verified when configured
    JWT_AUDIENCE: Optional[str] = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # User service (connections directory) configuration
    USER_SERVICE_URL: str = "http://localhost:8091/api/v1"
    USER_SERVICE_TIMEOUT_SECONDS: float = 10.0

    # Object storage configuration (S3 or S3-compatible, bucket must be versioned)
    S3_BUCKET_NAME: str = "project-files"
    S3_ENDPOINT_URL: Optional[str] = None
    S3_REGION: str = "us-east-1"
    S3_ACCESS_KEY_ID: Optional[str] = None
    S3_SECRET_ACCESS_KEY: Optional[str] = None
    S3_PRESIGNED_URL_EXPIRE_MINUTES: int = 15

    # Upload limits
    MAX_UPLOAD_SIZE_BYTES: int = 50 * 1024 * 1024  # 50 MiB
    ALLOWED_UPLOAD_CONTENT_TYPES: List[str] = [
        "audio/mpeg",  # mp3
        "audio/wav",
        "audio/x-wav",  # wav
        "application/pdf",
    ]

    # Delete stored file versions before removing a project's rows
    DELETE_FILES_ON_PROJECT_DELETE: bool = True

    @field_validator(
        "S3_ENDPOINT_URL",
        "S3_ACCESS_KEY_ID",
        "S3_SECRET_ACCESS_KEY",
        "JWT_AUDIENCE",
        mode="before",
    )
    @classmethod
    def empty_str_to_none(cls, v: Any) -> Optional[str]:
        """Convert empty strings to None so boto3 falls back to its defaults."""
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Global configuration instance
settings = Settings()
