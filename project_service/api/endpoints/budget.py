# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Budget and expense endpoints, nested under a project.
"""
import uuid

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from project_service.api.dependencies import get_db
from project_service.core.security import TokenClaims, get_current_claims
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
from project_service.services.budget_service import budget_service

router = APIRouter()


@router.post("", response_model=BudgetResponse, status_code=status.HTTP_201_CREATED)
def create_budget(
    budget_create: BudgetCreate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """Create the project's budget. Only the owner can do this."""
    return budget_service.create_budget(
        db=db, project_id=project_id, budget_data=budget_create, user_id=claims.subject_id
    )


@router.get("", response_model=BudgetResponse)
def get_budget(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return budget_service.get_budget(db=db, project_id=project_id, user_id=claims.subject_id)


@router.put("", response_model=BudgetResponse)
def update_budget(
    budget_update: BudgetUpdate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return budget_service.update_budget(
        db=db, project_id=project_id, update_data=budget_update, user_id=claims.subject_id
    )


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    budget_service.delete_budget(db=db, project_id=project_id, user_id=claims.subject_id)


@router.get("/remaining", response_model=RemainingBudgetResponse)
def get_remaining_budget(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """Total, spent and remaining amounts of the project's budget."""
    return budget_service.get_remaining_budget(
        db=db, project_id=project_id, user_id=claims.subject_id
    )


@router.post(
    "/expenses", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED
)
def add_expense(
    expense_create: ExpenseCreate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """Log an expense. Any project member can do this."""
    return budget_service.add_expense(
        db=db, project_id=project_id, expense_data=expense_create, user_id=claims.subject_id
    )


@router.get("/expenses", response_model=PageResponse[ExpenseResponse])
def list_expenses(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return budget_service.list_expenses(
        db=db, project_id=project_id, user_id=claims.subject_id, page=page, limit=limit
    )


@router.get("/expenses/{expense_id}", response_model=ExpenseResponse)
def get_expense(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    expense_id: uuid.UUID = Path(..., description="Expense ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return budget_service.get_expense(
        db=db, project_id=project_id, expense_id=expense_id, user_id=claims.subject_id
    )


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_update: ExpenseUpdate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    expense_id: uuid.UUID = Path(..., description="Expense ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return budget_service.update_expense(
        db=db,
        project_id=project_id,
        expense_id=expense_id,
        update_data=expense_update,
        user_id=claims.subject_id,
    )


@router.delete("/expenses/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_expense(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    expense_id: uuid.UUID = Path(..., description="Expense ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    budget_service.remove_expense(
        db=db, project_id=project_id, expense_id=expense_id, user_id=claims.subject_id
    )
