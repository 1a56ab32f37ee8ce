# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Budget and expense models.

The budget shares its primary key with the project it belongs to, so the
database itself allows at most one budget per project. The spent amount is
never stored; it is summed from the expenses on every read.
"""
import uuid

from sqlalchemy import Column, DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from project_service.db.base import Base
from project_service.utils.time_util import utcnow


class ProjectBudget(Base):
    __tablename__ = "project_budgets"

    project_id = Column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
        comment="Owning project ID, also the budget ID",
    )
    currency = Column(String(16), nullable=False, comment="Currency code")
    total_amount = Column(Float, nullable=False, comment="Total budget amount")

    project = relationship("Project", back_populates="budget")
    expenses = relationship(
        "BudgetExpense",
        back_populates="budget",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def id(self):
        return self.project_id


class BudgetExpense(Base):
    __tablename__ = "budget_expenses"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, comment="Primary key")
    budget_id = Column(
        Uuid,
        ForeignKey("project_budgets.project_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Budget (project) ID",
    )
    amount = Column(Float, nullable=False, comment="Expense amount")
    date = Column(DateTime, nullable=False, default=utcnow, comment="Expense date (UTC)")
    comment = Column(Text, nullable=True, comment="Free text comment")

    budget = relationship("ProjectBudget", back_populates="expenses")
