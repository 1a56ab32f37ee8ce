# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from project_service.models.task import TaskStatus
from project_service.schemas.user import UserSummary


class TaskCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None
    status: TaskStatus = Field(..., description="Task status")
    assigned_user_id: Optional[UUID] = Field(
        None, description="Project member to assign the task to"
    )


class TaskUpdate(BaseModel):
    """
    Partial task update.

    For due_date and assigned_user_id an omitted field leaves the task
    unchanged while an explicit null clears it (``assigned_user_id: null``
    unassigns the task).
    """

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None
    status: Optional[TaskStatus] = None
    assigned_user_id: Optional[UUID] = None


class TaskResponse(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    created_at: datetime
    due_date: Optional[datetime] = None
    status: TaskStatus
    assigned_user: Optional[UserSummary] = None

    class Config:
        from_attributes = True
