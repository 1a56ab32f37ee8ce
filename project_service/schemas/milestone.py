# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class MilestoneCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None


class MilestoneUpdate(BaseModel):
    """
    Partial milestone update.

    due_date distinguishes omission from an explicit null: an omitted
    due_date leaves the stored value alone, ``"due_date": null`` clears it.
    """

    title: Optional[str] = Field(None, min_length=3, max_length=255)
    description: Optional[str] = Field(None, max_length=5000)
    due_date: Optional[datetime] = None


class MilestoneResponse(BaseModel):
    id: UUID
    project_id: UUID
    title: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None

    class Config:
        from_attributes = True
