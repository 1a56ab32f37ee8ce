# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project membership rules.

Membership is derived state: a user is a member of a project when they are
its owner or one of its collaborators. It is recomputed from the project on
every call; there is no separate permission store.
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from project_service.core.exceptions import (
    ProjectNotFoundException,
    UnauthorizedOperationException,
)
from project_service.models.project import Project, project_collaborators

logger = logging.getLogger(__name__)


def get_project_or_404(db: Session, project_id: uuid.UUID) -> Project:
    project = db.get(Project, project_id)
    if project is None:
        logger.warning(f"Project not found with ID: {project_id}")
        raise ProjectNotFoundException(f"Project not found with ID: {project_id}")
    return project


def is_collaborator(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    stmt = select(project_collaborators.c.user_id).where(
        project_collaborators.c.project_id == project_id,
        project_collaborators.c.user_id == user_id,
    )
    return db.execute(stmt).first() is not None


def is_owner(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    """
    Check whether user_id owns the project.

    Raises:
        ProjectNotFoundException: If the project does not exist
    """
    project = get_project_or_404(db, project_id)
    return project.owner_id == user_id


def is_member(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    project = get_project_or_404(db, project_id)
    if project.owner_id == user_id:
        return True
    return is_collaborator(db, project_id, user_id)


def verify_member(db: Session, project_id: uuid.UUID, user_id: uuid.UUID) -> None:
    """
    Guard called before every read or write on a project's sub-resources.

    Raises:
        ProjectNotFoundException: If the project does not exist
        UnauthorizedOperationException: If user_id is neither owner nor collaborator
    """
    if not is_member(db, project_id, user_id):
        logger.error(f"User {user_id} is not a member of project {project_id}")
        raise UnauthorizedOperationException(
            "User is not a member of this project."
        )


def verify_owner(
    db: Session,
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    detail: str = "User is not the owner of this project.",
) -> Project:
    """
    Guard for owner-only mutations. Returns the project on success.
    """
    project = get_project_or_404(db, project_id)
    if project.owner_id != user_id:
        logger.error(f"User {user_id} is not owner of project {project_id}")
        raise UnauthorizedOperationException(detail)
    return project
