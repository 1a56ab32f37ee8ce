# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from project_service.api.dependencies import get_db
from project_service.core.security import TokenClaims, get_current_claims
from project_service.schemas.common import PageResponse
from project_service.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from project_service.services.task_service import task_service

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_create: TaskCreate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return task_service.create_task(
        db=db, project_id=project_id, task_data=task_create, user_id=claims.subject_id
    )


@router.get("", response_model=PageResponse[TaskResponse])
def list_tasks(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return task_service.list_tasks(
        db=db, project_id=project_id, user_id=claims.subject_id, page=page, limit=limit
    )


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    task_id: uuid.UUID = Path(..., description="Task ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return task_service.get_task(
        db=db, project_id=project_id, task_id=task_id, user_id=claims.subject_id
    )


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_update: TaskUpdate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    task_id: uuid.UUID = Path(..., description="Task ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Partially update a task.
    Send "assigned_user_id": null to unassign; omit it to keep the assignee.
    """
    return task_service.update_task(
        db=db,
        project_id=project_id,
        task_id=task_id,
        update_data=task_update,
        user_id=claims.subject_id,
    )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    task_id: uuid.UUID = Path(..., description="Task ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    task_service.delete_task(
        db=db, project_id=project_id, task_id=task_id, user_id=claims.subject_id
    )


@router.put("/{task_id}/assign/{user_id}", response_model=TaskResponse)
def assign_user(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    task_id: uuid.UUID = Path(..., description="Task ID"),
    user_id: uuid.UUID = Path(..., description="Project member to assign"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return task_service.assign_user(
        db=db,
        project_id=project_id,
        task_id=task_id,
        assignee_id=user_id,
        user_id=claims.subject_id,
    )


@router.delete("/{task_id}/assign", response_model=TaskResponse)
def unassign_user(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    task_id: uuid.UUID = Path(..., description="Task ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return task_service.unassign_user(
        db=db, project_id=project_id, task_id=task_id, user_id=claims.subject_id
    )
