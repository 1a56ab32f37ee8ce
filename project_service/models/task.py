# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project task model.

A task may be assigned to a single project member. The assignee foreign key
is nulled (not cascaded) when the user row goes away, and the service layer
clears it when a collaborator is removed from the project.
"""
import enum
import uuid

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from project_service.db.base import Base
from project_service.utils.time_util import utcnow


class TaskStatus(str, enum.Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class ProjectTask(Base):
    __tablename__ = "project_tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, comment="Primary key")
    project_id = Column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Project ID",
    )
    title = Column(String(255), nullable=False, comment="Task title")
    description = Column(Text, nullable=True, comment="Task description")
    created_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        comment="Creation timestamp, immutable",
    )
    due_date = Column(DateTime, nullable=True, comment="Optional due date")
    status = Column(
        Enum(TaskStatus, name="task_status"),
        nullable=False,
        default=TaskStatus.TODO,
        comment="Task status",
    )
    assigned_user_id = Column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="Assigned project member",
    )

    project = relationship("Project", back_populates="tasks")
    assigned_user = relationship("User", back_populates="assigned_tasks")
