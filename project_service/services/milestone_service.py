# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Milestone service. Every operation requires project membership.
"""
import logging
import uuid

from sqlalchemy.orm import Session

from project_service.core.exceptions import (
    MilestoneNotFoundException,
    UnauthorizedOperationException,
)
from project_service.models.milestone import ProjectMilestone
from project_service.schemas.common import PageResponse
from project_service.schemas.milestone import (
    MilestoneCreate,
    MilestoneResponse,
    MilestoneUpdate,
)
from project_service.services import membership
from project_service.services.helpers import paginate
from project_service.utils.time_util import to_naive_utc

logger = logging.getLogger(__name__)


def _get_milestone_in_project(
    db: Session, project_id: uuid.UUID, milestone_id: uuid.UUID
) -> ProjectMilestone:
    """
    Load a milestone and check it belongs to project_id.

    Raises:
        MilestoneNotFoundException: If the milestone does not exist
        UnauthorizedOperationException: If it belongs to another project
    """
    milestone = db.get(ProjectMilestone, milestone_id)
    if milestone is None:
        logger.warning(f"Milestone not found with ID: {milestone_id}")
        raise MilestoneNotFoundException(f"Milestone not found with ID: {milestone_id}")
    if milestone.project_id != project_id:
        logger.error(
            f"Milestone {milestone_id} does not belong to project {project_id}"
        )
        raise UnauthorizedOperationException(
            "Milestone does not belong to the specified project."
        )
    return milestone


def create_milestone(
    db: Session,
    project_id: uuid.UUID,
    milestone_data: MilestoneCreate,
    user_id: uuid.UUID,
) -> MilestoneResponse:
    logger.info(f"User {user_id} creating milestone in project {project_id}")
    membership.verify_member(db, project_id, user_id)

    milestone = ProjectMilestone(
        project_id=project_id,
        title=milestone_data.title,
        description=milestone_data.description,
        due_date=to_naive_utc(milestone_data.due_date),
    )
    db.add(milestone)
    db.commit()
    db.refresh(milestone)

    logger.info(f"Milestone {milestone.id} created in project {project_id}")
    return MilestoneResponse.model_validate(milestone)


def get_milestone(
    db: Session,
    project_id: uuid.UUID,
    milestone_id: uuid.UUID,
    user_id: uuid.UUID,
) -> MilestoneResponse:
    membership.verify_member(db, project_id, user_id)
    milestone = _get_milestone_in_project(db, project_id, milestone_id)
    return MilestoneResponse.model_validate(milestone)


def list_milestones(
    db: Session,
    project_id: uuid.UUID,
    user_id: uuid.UUID,
    page: int = 1,
    limit: int = 20,
) -> PageResponse[MilestoneResponse]:
    """List a project's milestones ordered by due date, undated ones last."""
    membership.verify_member(db, project_id, user_id)
    query = (
        db.query(ProjectMilestone)
        .filter(ProjectMilestone.project_id == project_id)
        .order_by(
            ProjectMilestone.due_date.is_(None),
            ProjectMilestone.due_date.asc(),
            ProjectMilestone.id.asc(),
        )
    )
    total, milestones = paginate(query, page, limit)
    return PageResponse[MilestoneResponse](
        total=total,
        page=page,
        limit=limit,
        items=[MilestoneResponse.model_validate(m) for m in milestones],
    )


def update_milestone(
    db: Session,
    project_id: uuid.UUID,
    milestone_id: uuid.UUID,
    update_data: MilestoneUpdate,
    user_id: uuid.UUID,
) -> MilestoneResponse:
    """
    Partially update a milestone.

    title and description are only changed when a non-null value is given.
    due_date is cleared by an explicit null and left alone when omitted.
    """
    logger.info(f"User {user_id} updating milestone {milestone_id} in project {project_id}")
    membership.verify_member(db, project_id, user_id)
    milestone = _get_milestone_in_project(db, project_id, milestone_id)

    patch = update_data.model_dump(exclude_unset=True)
    if patch.get("title") is not None:
        milestone.title = patch["title"]
    if patch.get("description") is not None:
        milestone.description = patch["description"]
    if "due_date" in patch:
        milestone.due_date = to_naive_utc(patch["due_date"])

    db.commit()
    db.refresh(milestone)
    logger.info(f"Milestone {milestone_id} updated")
    return MilestoneResponse.model_validate(milestone)


def delete_milestone(
    db: Session,
    project_id: uuid.UUID,
    milestone_id: uuid.UUID,
    user_id: uuid.UUID,
) -> None:
    logger.info(f"User {user_id} deleting milestone {milestone_id} in project {project_id}")
    membership.verify_member(db, project_id, user_id)
    milestone = _get_milestone_in_project(db, project_id, milestone_id)
    db.delete(milestone)
    db.commit()
    logger.info(f"Milestone {milestone_id} deleted")
