# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project aggregate root.

A project has exactly one owner and a set of collaborators. Owner and
collaboration are two independent relations: ownership is a foreign key on
the project row, collaboration is the project_collaborators join table whose
composite primary key rejects duplicate memberships at the storage level.
Tasks, milestones, the budget and file metadata are owned children and are
deleted together with the project.
"""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import relationship

from project_service.db.base import Base
from project_service.utils.time_util import utcnow

project_collaborators = Table(
    "project_collaborators",
    Base.metadata,
    Column(
        "project_id",
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    comment="Project collaborator memberships",
)


class Project(Base):
    """Project owned by a single user and shared with collaborators."""

    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, comment="Primary key")
    title = Column(String(255), nullable=False, comment="Project title")
    description = Column(Text, nullable=True, default=None, comment="Description")
    owner_id = Column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
        comment="Project owner user ID",
    )
    created_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        comment="Creation timestamp",
    )
    updated_at = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="Last update timestamp",
    )

    owner = relationship("User", back_populates="owned_projects")
    collaborators = relationship(
        "User",
        secondary=project_collaborators,
        back_populates="collaborating_projects",
    )
    tasks = relationship(
        "ProjectTask",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    milestones = relationship(
        "ProjectMilestone",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    budget = relationship(
        "ProjectBudget",
        back_populates="project",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    files = relationship(
        "ProjectFile",
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
