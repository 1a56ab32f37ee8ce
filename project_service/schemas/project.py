# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project schemas for API request/response validation.
"""
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from project_service.schemas.user import UserSummary


class ProjectBase(BaseModel):
    """Base model for project data."""

    title: str = Field(..., min_length=1, max_length=255, description="Project title")
    description: Optional[str] = Field(None, description="Project description")


class ProjectCreate(ProjectBase):
    """Request model for creating a project."""

    pass


class ProjectUpdate(BaseModel):
    """Request model for updating a project. Omitted fields are left untouched."""

    title: Optional[str] = Field(
        None, min_length=1, max_length=255, description="Project title"
    )
    description: Optional[str] = Field(None, description="Project description")


class ProjectResponse(ProjectBase):
    """Response model for a project."""

    id: UUID = Field(..., description="Project ID")
    owner: UserSummary = Field(..., description="Project owner")
    collaborators: List[UserSummary] = Field(
        default_factory=list, description="Project collaborators"
    )

    class Config:
        from_attributes = True
