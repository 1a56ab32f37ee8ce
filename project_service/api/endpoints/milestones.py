# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from project_service.api.dependencies import get_db
from project_service.core.security import TokenClaims, get_current_claims
from project_service.schemas.common import PageResponse
from project_service.schemas.milestone import (
    MilestoneCreate,
    MilestoneResponse,
    MilestoneUpdate,
)
from project_service.services import milestone_service

router = APIRouter()


@router.post("", response_model=MilestoneResponse, status_code=status.HTTP_201_CREATED)
def create_milestone(
    milestone_create: MilestoneCreate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return milestone_service.create_milestone(
        db=db,
        project_id=project_id,
        milestone_data=milestone_create,
        user_id=claims.subject_id,
    )


@router.get("", response_model=PageResponse[MilestoneResponse])
def list_milestones(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """List milestones ordered by due date."""
    return milestone_service.list_milestones(
        db=db, project_id=project_id, user_id=claims.subject_id, page=page, limit=limit
    )


@router.get("/{milestone_id}", response_model=MilestoneResponse)
def get_milestone(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    milestone_id: uuid.UUID = Path(..., description="Milestone ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return milestone_service.get_milestone(
        db=db, project_id=project_id, milestone_id=milestone_id, user_id=claims.subject_id
    )


@router.put("/{milestone_id}", response_model=MilestoneResponse)
def update_milestone(
    milestone_update: MilestoneUpdate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    milestone_id: uuid.UUID = Path(..., description="Milestone ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Partially update a milestone.
    Send "due_date": null to clear the due date; omit it to keep it.
    """
    return milestone_service.update_milestone(
        db=db,
        project_id=project_id,
        milestone_id=milestone_id,
        update_data=milestone_update,
        user_id=claims.subject_id,
    )


@router.delete("/{milestone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_milestone(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    milestone_id: uuid.UUID = Path(..., description="Milestone ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    milestone_service.delete_milestone(
        db=db, project_id=project_id, milestone_id=milestone_id, user_id=claims.subject_id
    )
