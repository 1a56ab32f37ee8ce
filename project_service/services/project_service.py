# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project service for managing projects and their collaborators.

Owner-only operations: update, delete, add/remove collaborator.
Read access to a single project requires membership; owner and
collaborator listings are public.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import delete, insert, update
from sqlalchemy.orm import Session

from project_service.core.config import settings
from project_service.core.exceptions import (
    CollaboratorNotFoundException,
    ConflictException,
    InvalidStateException,
    NotConnectedException,
    UnauthorizedOperationException,
    ValidationException,
)
from project_service.core.security import TokenClaims
from project_service.models.project import Project, project_collaborators
from project_service.models.project_file import ProjectFile
from project_service.models.task import ProjectTask
from project_service.schemas.common import PageResponse
from project_service.schemas.project import (
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from project_service.schemas.user import UserSummary
from project_service.services import membership
from project_service.services.connections_client import (
    UserConnectionsClient,
    get_connections_client,
)
from project_service.services.helpers import (
    commit_or_conflict,
    execute_or_conflict,
    paginate,
    slice_page,
)
from project_service.services.storage import (
    ObjectStorage,
    StorageError,
    get_storage_backend,
)
from project_service.services.user_service import IdentityResolver, user_service

logger = logging.getLogger(__name__)


def create_project(
    db: Session,
    project_data: ProjectCreate,
    owner_claims: TokenClaims,
    identity_resolver: IdentityResolver = user_service,
) -> ProjectResponse:
    """
    Create a new project owned by the caller.

    The owner's user row is materialized from the token claims the first
    time the caller is seen.
    """
    owner = identity_resolver.resolve_or_create(db, owner_claims)

    new_project = Project(
        title=project_data.title,
        description=project_data.description,
        owner=owner,
    )
    db.add(new_project)
    db.commit()
    db.refresh(new_project)

    logger.info(f"Project {new_project.id} created by user {owner.id}")
    return ProjectResponse.model_validate(new_project)


def get_project(
    db: Session, project_id: uuid.UUID, user_id: uuid.UUID
) -> ProjectResponse:
    """
    Get a project with its owner and collaborators.

    Raises:
        ProjectNotFoundException: If the project does not exist
        UnauthorizedOperationException: If the caller is not a member
    """
    project = membership.get_project_or_404(db, project_id)
    if project.owner_id != user_id and not membership.is_collaborator(
        db, project_id, user_id
    ):
        logger.error(f"User {user_id} attempted to access project {project_id}")
        raise UnauthorizedOperationException(
            "User is not authorized to access this project."
        )
    return ProjectResponse.model_validate(project)


def list_owned_projects(
    db: Session, owner_id: uuid.UUID, page: int = 1, limit: int = 10
) -> PageResponse[ProjectResponse]:
    query = (
        db.query(Project)
        .filter(Project.owner_id == owner_id)
        .order_by(Project.title.asc(), Project.id.asc())
    )
    total, projects = paginate(query, page, limit)
    return PageResponse[ProjectResponse](
        total=total,
        page=page,
        limit=limit,
        items=[ProjectResponse.model_validate(p) for p in projects],
    )


def list_collaborating_projects(
    db: Session, collaborator_id: uuid.UUID, page: int = 1, limit: int = 10
) -> PageResponse[ProjectResponse]:
    query = (
        db.query(Project)
        .join(project_collaborators, project_collaborators.c.project_id == Project.id)
        .filter(project_collaborators.c.user_id == collaborator_id)
        .order_by(Project.title.asc(), Project.id.asc())
    )
    total, projects = paginate(query, page, limit)
    return PageResponse[ProjectResponse](
        total=total,
        page=page,
        limit=limit,
        items=[ProjectResponse.model_validate(p) for p in projects],
    )


def get_project_owner(db: Session, project_id: uuid.UUID) -> UserSummary:
    """Owner identity is public; no membership check."""
    project = membership.get_project_or_404(db, project_id)
    return UserSummary.model_validate(project.owner)


def list_collaborators(
    db: Session, project_id: uuid.UUID, page: int = 1, limit: int = 10
) -> PageResponse[UserSummary]:
    """
    Page through a project's collaborators.

    The whole collaborator set is loaded and sliced in memory; collaborator
    sets are expected to stay small.
    """
    project = membership.get_project_or_404(db, project_id)
    collaborators = sorted(
        project.collaborators, key=lambda u: (u.username or "", str(u.id))
    )
    return PageResponse[UserSummary](
        total=len(collaborators),
        page=page,
        limit=limit,
        items=[
            UserSummary.model_validate(u)
            for u in slice_page(collaborators, page, limit)
        ],
    )


def update_project(
    db: Session,
    project_id: uuid.UUID,
    update_data: ProjectUpdate,
    user_id: uuid.UUID,
) -> ProjectResponse:
    """
    Update a project. Owner only; omitted or null fields are left untouched.
    """
    project = membership.verify_owner(db, project_id, user_id)

    update_dict = update_data.model_dump(exclude_unset=True)
    for field, value in update_dict.items():
        if value is not None and hasattr(project, field):
            setattr(project, field, value)

    db.commit()
    db.refresh(project)
    logger.info(f"Project {project_id} updated by user {user_id}")
    return ProjectResponse.model_validate(project)


def delete_project(
    db: Session,
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    storage: Optional[ObjectStorage] = None,
) -> None:
    """
    Delete a project together with its tasks, milestones, budget, expenses
    and file metadata. User rows are never deleted.

    When DELETE_FILES_ON_PROJECT_DELETE is enabled, every stored file version
    is removed from object storage first; a storage failure aborts before any
    row is deleted.

    Raises:
        InvalidStateException: If a stored file version could not be deleted
    """
    project = membership.verify_owner(db, project_id, user_id)

    if settings.DELETE_FILES_ON_PROJECT_DELETE:
        files = db.query(ProjectFile).filter(ProjectFile.project_id == project_id).all()
        if files:
            storage = storage or get_storage_backend()
            for project_file in files:
                try:
                    storage.delete_version(
                        project_file.storage_key, project_file.storage_version_id
                    )
                except StorageError as e:
                    logger.error(
                        f"Failed to delete stored file {project_file.storage_key} "
                        f"(version {project_file.storage_version_id}) while deleting "
                        f"project {project_id}: {e.message}"
                    )
                    raise InvalidStateException(
                        "Project deletion failed: stored files could not be removed."
                    )

    db.delete(project)
    db.commit()
    logger.info(f"Project {project_id} deleted by user {user_id}")


def add_collaborator(
    db: Session,
    project_id: uuid.UUID,
    collaborator_id: uuid.UUID,
    owner_id: uuid.UUID,
    bearer_token: str,
    connections_client: Optional[UserConnectionsClient] = None,
) -> ProjectResponse:
    """
    Add a collaborator to a project.

    The candidate must be one of the owner's confirmed connections according
    to the user service.

    Raises:
        UnauthorizedOperationException: If the caller is not the owner
        ConflictException: If the candidate already collaborates
        ValidationException: If the candidate is the owner
        NotConnectedException: If the candidate is not connected to the owner
    """
    project = membership.verify_owner(
        db, project_id, owner_id, "Only the project owner can add collaborators."
    )

    if membership.is_collaborator(db, project_id, collaborator_id):
        raise ConflictException("User is already a collaborator on this project.")
    if project.owner_id == collaborator_id:
        raise ValidationException(
            "Owner cannot be added as a collaborator to their own project."
        )

    client = connections_client or get_connections_client()
    connections = client.list_connections(bearer_token)
    summary = next((c for c in connections if c.id == collaborator_id), None)
    if summary is None:
        logger.warning(
            f"User {collaborator_id} is not a connection of owner {owner_id}"
        )
        raise NotConnectedException(
            "Collaborator must be one of the owner's connections."
        )

    collaborator = user_service.get_or_create_from_summary(db, summary)
    conflict_detail = "User is already a collaborator on this project."
    execute_or_conflict(
        db,
        insert(project_collaborators).values(
            project_id=project_id, user_id=collaborator.id
        ),
        conflict_detail,
    )
    commit_or_conflict(db, conflict_detail)
    db.refresh(project)

    logger.info(f"User {collaborator_id} added as collaborator to project {project_id}")
    return ProjectResponse.model_validate(project)


def remove_collaborator(
    db: Session,
    project_id: uuid.UUID,
    collaborator_id: uuid.UUID,
    owner_id: uuid.UUID,
) -> None:
    """
    Remove a collaborator and unassign them from all of the project's tasks.

    Anything the collaborator created (milestones, expenses, files) stays.

    Raises:
        UnauthorizedOperationException: If the caller is not the owner
        CollaboratorNotFoundException: If the user is not a collaborator
    """
    project = membership.verify_owner(
        db, project_id, owner_id, "Only the project owner can remove collaborators."
    )

    if not membership.is_collaborator(db, project_id, collaborator_id):
        raise CollaboratorNotFoundException("Collaborator not found on this project.")

    db.execute(
        delete(project_collaborators).where(
            project_collaborators.c.project_id == project_id,
            project_collaborators.c.user_id == collaborator_id,
        )
    )
    result = db.execute(
        update(ProjectTask)
        .where(
            ProjectTask.project_id == project_id,
            ProjectTask.assigned_user_id == collaborator_id,
        )
        .values(assigned_user_id=None)
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    db.expire(project)

    logger.info(
        f"User {collaborator_id} removed from project {project_id}; "
        f"unassigned from {result.rowcount} task(s)"
    )
