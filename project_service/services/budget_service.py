# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Budget service: one budget per project plus its expenses.

Creating, updating and deleting the budget is owner-only. Any project member
may read the budget and log, edit or remove expenses. The spent amount is the
sum of the budget's expenses, computed on every read; spending more than the
total is allowed and shows up as a negative remaining amount.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from project_service.core.exceptions import (
    BudgetNotFoundException,
    ConflictException,
    ExpenseNotFoundException,
    ValidationException,
)
from project_service.models.budget import BudgetExpense, ProjectBudget
from project_service.schemas.budget import (
    BudgetCreate,
    BudgetResponse,
    BudgetUpdate,
    ExpenseCreate,
    ExpenseResponse,
    ExpenseUpdate,
    RemainingBudgetResponse,
)
from project_service.schemas.common import PageResponse
from project_service.services import membership
from project_service.services.helpers import commit_or_conflict, paginate
from project_service.utils.time_util import to_naive_utc, utcnow

logger = logging.getLogger(__name__)


class BudgetService:
    """
    Budget service class
    """

    def calculate_spent_amount(self, db: Session, budget_id: uuid.UUID) -> float:
        """Sum of the budget's expenses, 0 when there are none."""
        spent = (
            db.query(func.coalesce(func.sum(BudgetExpense.amount), 0.0))
            .filter(BudgetExpense.budget_id == budget_id)
            .scalar()
        )
        return float(spent or 0.0)

    def create_budget(
        self,
        db: Session,
        project_id: uuid.UUID,
        budget_data: BudgetCreate,
        user_id: uuid.UUID,
    ) -> BudgetResponse:
        """
        Create the project's budget. Owner only.

        Raises:
            ConflictException: If the project already has a budget
            ValidationException: If total_amount is not positive
        """
        logger.info(f"User {user_id} attempting to create budget for project {project_id}")
        membership.verify_owner(
            db, project_id, user_id, "Only the project owner can create a budget."
        )
        self._check_positive(budget_data.total_amount, "Total amount")

        if db.get(ProjectBudget, project_id) is not None:
            raise ConflictException(
                f"Budget already exists for project ID: {project_id}"
            )

        budget = ProjectBudget(
            project_id=project_id,
            currency=budget_data.currency,
            total_amount=budget_data.total_amount,
        )
        db.add(budget)
        commit_or_conflict(db, f"Budget already exists for project ID: {project_id}")
        db.refresh(budget)

        logger.info(f"Budget created for project {project_id} by user {user_id}")
        return self._to_response(budget, 0.0)

    def get_budget(
        self, db: Session, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> BudgetResponse:
        logger.info(f"User {user_id} attempting to get budget for project {project_id}")
        membership.verify_member(db, project_id, user_id)
        budget = self._get_budget_or_404(db, project_id)
        spent = self.calculate_spent_amount(db, budget.project_id)
        return self._to_response(budget, spent)

    def update_budget(
        self,
        db: Session,
        project_id: uuid.UUID,
        update_data: BudgetUpdate,
        user_id: uuid.UUID,
    ) -> BudgetResponse:
        """
        Partially update currency and/or total amount. Owner only.

        Nothing is written when the patch matches the stored values.
        """
        logger.info(f"User {user_id} attempting to update budget for project {project_id}")
        membership.verify_owner(
            db, project_id, user_id, "Only the project owner can update the budget."
        )
        budget = self._get_budget_or_404(db, project_id)

        updated = False
        if update_data.currency is not None and update_data.currency != budget.currency:
            budget.currency = update_data.currency
            updated = True
        if (
            update_data.total_amount is not None
            and update_data.total_amount != budget.total_amount
        ):
            self._check_positive(update_data.total_amount, "Total amount")
            budget.total_amount = update_data.total_amount
            updated = True

        if updated:
            db.commit()
            db.refresh(budget)
            logger.info(f"Budget updated for project {project_id} by user {user_id}")
        else:
            logger.info(
                f"No changes detected for budget {project_id} during update by user {user_id}"
            )

        spent = self.calculate_spent_amount(db, budget.project_id)
        return self._to_response(budget, spent)

    def delete_budget(
        self, db: Session, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> None:
        """Remove the budget and its expenses. Owner only."""
        logger.info(f"User {user_id} attempting to delete budget for project {project_id}")
        membership.verify_owner(
            db, project_id, user_id, "Only the project owner can delete a budget."
        )
        budget = self._get_budget_or_404(db, project_id)

        db.delete(budget)
        db.commit()
        logger.info(f"Budget for project {project_id} deleted by user {user_id}")

    def get_remaining_budget(
        self, db: Session, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> RemainingBudgetResponse:
        membership.verify_member(db, project_id, user_id)
        budget = self._get_budget_or_404(db, project_id)
        spent = self.calculate_spent_amount(db, budget.project_id)
        remaining = RemainingBudgetResponse(
            total_amount=budget.total_amount,
            spent_amount=spent,
            remaining_amount=budget.total_amount - spent,
            currency=budget.currency,
        )
        logger.info(
            f"Remaining budget for project {project_id} retrieved by user {user_id}: "
            f"Total={remaining.total_amount}, Spent={remaining.spent_amount}, "
            f"Remaining={remaining.remaining_amount}, Currency={remaining.currency}"
        )
        return remaining

    def add_expense(
        self,
        db: Session,
        project_id: uuid.UUID,
        expense_data: ExpenseCreate,
        user_id: uuid.UUID,
    ) -> ExpenseResponse:
        """
        Log an expense against the project's budget. Any member may do this.

        Raises:
            ValidationException: If the amount is not positive or the date is
                in the future
        """
        membership.verify_member(db, project_id, user_id)
        budget = self._get_budget_or_404(db, project_id)

        self._check_positive(expense_data.amount, "Amount")
        expense_date = to_naive_utc(expense_data.date) or utcnow()
        self._check_not_future(expense_date)

        expense = BudgetExpense(
            budget_id=budget.project_id,
            amount=expense_data.amount,
            date=expense_date,
            comment=expense_data.comment,
        )
        db.add(expense)
        db.commit()
        db.refresh(expense)

        logger.info(
            f"Expense {expense.id} added to budget for project {project_id} by user {user_id}"
        )
        return ExpenseResponse.model_validate(expense)

    def get_expense(
        self,
        db: Session,
        project_id: uuid.UUID,
        expense_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ExpenseResponse:
        membership.verify_member(db, project_id, user_id)
        self._get_budget_or_404(db, project_id)
        expense = self._get_expense_or_404(db, project_id, expense_id)
        return ExpenseResponse.model_validate(expense)

    def list_expenses(
        self,
        db: Session,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 50,
    ) -> PageResponse[ExpenseResponse]:
        membership.verify_member(db, project_id, user_id)
        self._get_budget_or_404(db, project_id)
        query = (
            db.query(BudgetExpense)
            .filter(BudgetExpense.budget_id == project_id)
            .order_by(BudgetExpense.date.asc(), BudgetExpense.id.asc())
        )
        total, expenses = paginate(query, page, limit)
        return PageResponse[ExpenseResponse](
            total=total,
            page=page,
            limit=limit,
            items=[ExpenseResponse.model_validate(e) for e in expenses],
        )

    def update_expense(
        self,
        db: Session,
        project_id: uuid.UUID,
        expense_id: uuid.UUID,
        update_data: ExpenseUpdate,
        user_id: uuid.UUID,
    ) -> ExpenseResponse:
        """Partially update an expense; fields are independently optional."""
        membership.verify_member(db, project_id, user_id)
        self._get_budget_or_404(db, project_id)
        expense = self._get_expense_or_404(db, project_id, expense_id)

        updated = False
        if update_data.amount is not None and update_data.amount != expense.amount:
            self._check_positive(update_data.amount, "Amount")
            expense.amount = update_data.amount
            updated = True
        new_date = to_naive_utc(update_data.date)
        if new_date is not None and new_date != expense.date:
            self._check_not_future(new_date)
            expense.date = new_date
            updated = True
        if update_data.comment is not None and update_data.comment != expense.comment:
            expense.comment = update_data.comment
            updated = True

        if updated:
            db.commit()
            db.refresh(expense)
            logger.info(
                f"Expense {expense_id} updated for project {project_id} by user {user_id}"
            )
        else:
            logger.info(
                f"No changes detected for expense {expense_id} during update by user {user_id}"
            )
        return ExpenseResponse.model_validate(expense)

    def remove_expense(
        self,
        db: Session,
        project_id: uuid.UUID,
        expense_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> None:
        membership.verify_member(db, project_id, user_id)
        self._get_budget_or_404(db, project_id)
        expense = self._get_expense_or_404(db, project_id, expense_id)
        db.delete(expense)
        db.commit()
        logger.info(
            f"Expense {expense_id} removed from budget of project {project_id} by user {user_id}"
        )

    def _get_budget_or_404(self, db: Session, project_id: uuid.UUID) -> ProjectBudget:
        budget = db.get(ProjectBudget, project_id)
        if budget is None:
            logger.warning(f"Budget not found for project ID: {project_id}")
            raise BudgetNotFoundException(
                f"Budget not found for project ID: {project_id}"
            )
        return budget

    def _get_expense_or_404(
        self, db: Session, project_id: uuid.UUID, expense_id: uuid.UUID
    ) -> BudgetExpense:
        expense = (
            db.query(BudgetExpense)
            .filter(
                BudgetExpense.id == expense_id,
                BudgetExpense.budget_id == project_id,
            )
            .first()
        )
        if expense is None:
            logger.warning(
                f"Expense with ID {expense_id} not found for budget {project_id}"
            )
            raise ExpenseNotFoundException(
                f"Expense with ID {expense_id} not found for budget {project_id}"
            )
        return expense

    @staticmethod
    def _check_positive(value: Optional[float], name: str) -> None:
        if value is None or value <= 0:
            raise ValidationException(f"{name} must be positive")

    @staticmethod
    def _check_not_future(value) -> None:
        if value > utcnow():
            raise ValidationException("Expense date cannot be in the future")

    @staticmethod
    def _to_response(budget: ProjectBudget, spent: float) -> BudgetResponse:
        return BudgetResponse(
            project_id=budget.project_id,
            currency=budget.currency,
            total_amount=budget.total_amount,
            spent_amount=spent,
            remaining_amount=budget.total_amount - spent,
            expenses=[ExpenseResponse.model_validate(e) for e in budget.expenses],
        )


budget_service = BudgetService()
