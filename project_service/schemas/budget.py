# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Budget and expense schemas.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from project_service.utils.time_util import to_naive_utc, utcnow


def _not_in_future(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and to_naive_utc(value) > utcnow():
        raise ValueError("Expense date cannot be in the future")
    return value


class BudgetCreate(BaseModel):
    currency: str = Field(..., min_length=1, max_length=16, description="Currency code")
    total_amount: float = Field(..., gt=0, description="Total budget amount")


class BudgetUpdate(BaseModel):
    """Partial budget update. Omitted fields are left untouched."""

    currency: Optional[str] = Field(None, min_length=1, max_length=16)
    total_amount: Optional[float] = Field(None, gt=0)


class ExpenseCreate(BaseModel):
    amount: float = Field(..., gt=0, description="Expense amount")
    date: Optional[datetime] = Field(
        None, description="Expense date, defaults to now"
    )
    comment: str = Field(..., min_length=1, description="Expense comment")

    @field_validator("date")
    @classmethod
    def date_not_in_future(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _not_in_future(v)


class ExpenseUpdate(BaseModel):
    """Partial expense update. Each field is independently optional."""

    amount: Optional[float] = Field(None, gt=0)
    date: Optional[datetime] = None
    comment: Optional[str] = Field(None, min_length=1)

    @field_validator("date")
    @classmethod
    def date_not_in_future(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _not_in_future(v)


class ExpenseResponse(BaseModel):
    id: UUID
    budget_id: UUID
    amount: float
    date: datetime
    comment: Optional[str] = None

    class Config:
        from_attributes = True


class BudgetResponse(BaseModel):
    project_id: UUID = Field(..., description="Project ID (also the budget ID)")
    currency: str
    total_amount: float
    spent_amount: float
    remaining_amount: float
    expenses: List[ExpenseResponse] = Field(default_factory=list)


class RemainingBudgetResponse(BaseModel):
    total_amount: float
    spent_amount: float
    remaining_amount: float
    currency: str
