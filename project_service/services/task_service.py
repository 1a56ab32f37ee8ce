# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Task board service.

All operations require the caller to be a project member. An assignee must
independently be a member of the same project and must already be known to
the identity cache.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from project_service.core.exceptions import (
    TaskNotFoundException,
    UnauthorizedOperationException,
)
from project_service.models.task import ProjectTask
from project_service.models.user import User
from project_service.schemas.common import PageResponse
from project_service.schemas.task import TaskCreate, TaskResponse, TaskUpdate
from project_service.services import membership
from project_service.services.helpers import paginate
from project_service.services.user_service import user_service
from project_service.utils.time_util import to_naive_utc

logger = logging.getLogger(__name__)


class TaskService:
    """
    Task service class
    """

    def create_task(
        self,
        db: Session,
        project_id: uuid.UUID,
        task_data: TaskCreate,
        user_id: uuid.UUID,
    ) -> TaskResponse:
        logger.info(f"User {user_id} creating task in project {project_id}")
        membership.verify_member(db, project_id, user_id)

        assignee = None
        if task_data.assigned_user_id is not None:
            assignee = self._resolve_assignee(db, project_id, task_data.assigned_user_id)

        task = ProjectTask(
            project_id=project_id,
            title=task_data.title,
            description=task_data.description,
            due_date=to_naive_utc(task_data.due_date),
            status=task_data.status,
            assigned_user=assignee,
        )
        db.add(task)
        db.commit()
        db.refresh(task)

        logger.info(f"Task {task.id} created in project {project_id}")
        return TaskResponse.model_validate(task)

    def get_task(
        self,
        db: Session,
        project_id: uuid.UUID,
        task_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> TaskResponse:
        membership.verify_member(db, project_id, user_id)
        task = self._get_task_in_project(db, project_id, task_id)
        return TaskResponse.model_validate(task)

    def list_tasks(
        self,
        db: Session,
        project_id: uuid.UUID,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 50,
    ) -> PageResponse[TaskResponse]:
        membership.verify_member(db, project_id, user_id)
        query = (
            db.query(ProjectTask)
            .filter(ProjectTask.project_id == project_id)
            .order_by(ProjectTask.created_at.asc(), ProjectTask.id.asc())
        )
        total, tasks = paginate(query, page, limit)
        return PageResponse[TaskResponse](
            total=total,
            page=page,
            limit=limit,
            items=[TaskResponse.model_validate(t) for t in tasks],
        )

    def update_task(
        self,
        db: Session,
        project_id: uuid.UUID,
        task_id: uuid.UUID,
        update_data: TaskUpdate,
        user_id: uuid.UUID,
    ) -> TaskResponse:
        """
        Partially update a task.

        Only fields present in the request body are considered. title and
        status ignore an explicit null; due_date and assigned_user_id are
        cleared by one.
        """
        logger.info(f"User {user_id} updating task {task_id} in project {project_id}")
        membership.verify_member(db, project_id, user_id)
        task = self._get_task_in_project(db, project_id, task_id)

        patch = update_data.model_dump(exclude_unset=True)
        if patch.get("title") is not None:
            task.title = patch["title"]
        if patch.get("description") is not None:
            task.description = patch["description"]
        if "due_date" in patch:
            task.due_date = to_naive_utc(patch["due_date"])
        if patch.get("status") is not None:
            task.status = patch["status"]
        if "assigned_user_id" in patch:
            new_assignee_id = patch["assigned_user_id"]
            if new_assignee_id is None:
                task.assigned_user = None
            elif new_assignee_id != task.assigned_user_id:
                task.assigned_user = self._resolve_assignee(
                    db, project_id, new_assignee_id
                )

        db.commit()
        db.refresh(task)
        logger.info(f"Task {task_id} updated")
        return TaskResponse.model_validate(task)

    def delete_task(
        self,
        db: Session,
        project_id: uuid.UUID,
        task_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> None:
        logger.info(f"User {user_id} deleting task {task_id} in project {project_id}")
        membership.verify_member(db, project_id, user_id)
        task = self._get_task_in_project(db, project_id, task_id)
        db.delete(task)
        db.commit()
        logger.info(f"Task {task_id} deleted")

    def assign_user(
        self,
        db: Session,
        project_id: uuid.UUID,
        task_id: uuid.UUID,
        assignee_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> TaskResponse:
        """
        Assign a project member to a task.

        Raises:
            UnauthorizedOperationException: If the caller or the assignee is
                not a member, or the task belongs to another project
            UserNotFoundException: If the assignee is unknown
        """
        logger.info(
            f"User {user_id} assigning user {assignee_id} to task {task_id} in project {project_id}"
        )
        membership.verify_member(db, project_id, user_id)
        task = self._get_task_in_project(db, project_id, task_id)
        task.assigned_user = self._resolve_assignee(db, project_id, assignee_id)
        db.commit()
        db.refresh(task)
        return TaskResponse.model_validate(task)

    def unassign_user(
        self,
        db: Session,
        project_id: uuid.UUID,
        task_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> TaskResponse:
        """Clear the task's assignee. Succeeds whether or not one was set."""
        membership.verify_member(db, project_id, user_id)
        task = self._get_task_in_project(db, project_id, task_id)
        if task.assigned_user_id is not None:
            logger.info(f"Unassigning user {task.assigned_user_id} from task {task_id}")
            task.assigned_user = None
            db.commit()
            db.refresh(task)
        return TaskResponse.model_validate(task)

    def _resolve_assignee(
        self, db: Session, project_id: uuid.UUID, assignee_id: uuid.UUID
    ) -> User:
        membership.verify_member(db, project_id, assignee_id)
        return user_service.find_user_by_id(db, assignee_id)

    def _get_task_in_project(
        self, db: Session, project_id: uuid.UUID, task_id: uuid.UUID
    ) -> ProjectTask:
        task: Optional[ProjectTask] = db.get(ProjectTask, task_id)
        if task is None:
            logger.warning(f"Task not found with ID: {task_id}")
            raise TaskNotFoundException(f"Task not found with ID: {task_id}")
        if task.project_id != project_id:
            logger.error(f"Task {task_id} does not belong to project {project_id}")
            raise UnauthorizedOperationException(
                "Task does not belong to the specified project."
            )
        return task


task_service = TaskService()
