# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PageResponse(BaseModel, Generic[T]):
    """Response model for a page of items"""

    total: int = Field(..., description="Total number of items")
    page: int = Field(..., description="Current page (1-based)")
    limit: int = Field(..., description="Page size")
    items: List[T] = Field(default_factory=list, description="Items on this page")
