# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project API endpoints for managing projects and their collaborators.
"""
import uuid

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from sqlalchemy.orm import Session

from project_service.api.dependencies import get_db
from project_service.core.security import TokenClaims, get_current_claims
from project_service.schemas.common import PageResponse
from project_service.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from project_service.schemas.user import UserSummary
from project_service.services import project_service

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
def create_project_endpoint(
    project_create: ProjectCreate,
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Create a new project.
    The caller becomes the project owner.
    """
    try:
        return project_service.create_project(
            db=db, project_data=project_create, owner_claims=claims
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create project: {str(e)}",
        )


@router.get("/owned", response_model=PageResponse[ProjectResponse])
def list_owned_projects_endpoint(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """List projects owned by the caller, sorted by title."""
    return project_service.list_owned_projects(
        db=db, owner_id=claims.subject_id, page=page, limit=limit
    )


@router.get("/collaborating", response_model=PageResponse[ProjectResponse])
def list_collaborating_projects_endpoint(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """List projects the caller collaborates on, sorted by title."""
    return project_service.list_collaborating_projects(
        db=db, collaborator_id=claims.subject_id, page=page, limit=limit
    )


@router.get("/{project_id}", response_model=ProjectResponse)
def get_project_endpoint(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return project_service.get_project(
        db=db, project_id=project_id, user_id=claims.subject_id
    )


@router.get("/{project_id}/owner", response_model=UserSummary)
def get_project_owner_endpoint(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return project_service.get_project_owner(db=db, project_id=project_id)


@router.get("/{project_id}/collaborators", response_model=PageResponse[UserSummary])
def list_collaborators_endpoint(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Items per page"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    return project_service.list_collaborators(
        db=db, project_id=project_id, page=page, limit=limit
    )


@router.put("/{project_id}", response_model=ProjectResponse)
def update_project_endpoint(
    project_update: ProjectUpdate,
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Update a project. Only the owner can update it.
    """
    return project_service.update_project(
        db=db,
        project_id=project_id,
        update_data=project_update,
        user_id=claims.subject_id,
    )


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_project_endpoint(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Delete a project with its tasks, milestones, budget and files.
    Only the owner can delete it.
    """
    project_service.delete_project(
        db=db, project_id=project_id, user_id=claims.subject_id
    )


@router.post(
    "/{project_id}/collaborators/{user_id}",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_collaborator_endpoint(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    user_id: uuid.UUID = Path(..., description="User to add as collaborator"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    """
    Add a collaborator. The candidate must be one of the owner's connections.
    """
    return project_service.add_collaborator(
        db=db,
        project_id=project_id,
        collaborator_id=user_id,
        owner_id=claims.subject_id,
        bearer_token=claims.bearer,
    )


@router.delete(
    "/{project_id}/collaborators/{user_id}", status_code=status.HTTP_204_NO_CONTENT
)
def remove_collaborator_endpoint(
    project_id: uuid.UUID = Path(..., description="Project ID"),
    user_id: uuid.UUID = Path(..., description="Collaborator to remove"),
    claims: TokenClaims = Depends(get_current_claims),
    db: Session = Depends(get_db),
):
    project_service.remove_collaborator(
        db=db,
        project_id=project_id,
        collaborator_id=user_id,
        owner_id=claims.subject_id,
    )
