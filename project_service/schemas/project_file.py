# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from project_service.schemas.user import UserSummary


class ProjectFileResponse(BaseModel):
    id: UUID
    project_id: UUID
    original_filename: str
    content_type: str
    file_size: int
    upload_timestamp: datetime
    description: Optional[str] = None
    uploaded_by: UserSummary
    storage_key: str
    storage_version_id: str

    class Config:
        from_attributes = True


class FileDownloadResponse(BaseModel):
    url: str = Field(..., description="Time-limited signed download URL")
    filename: str = Field(..., description="Original filename")
