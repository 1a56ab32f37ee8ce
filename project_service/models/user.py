# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
User identity model.

Users are a lazily materialized copy of identities issued by the external
identity provider. The primary key is the provider's subject id, never a
locally generated value. Rows are created on first reference and are not
re-synced afterwards.
"""
from sqlalchemy import Column, String, Uuid
from sqlalchemy.orm import relationship

from project_service.db.base import Base


class User(Base):
    """Minimal user record referenced by projects, tasks and files."""

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, comment="External subject id")
    username = Column(String(255), nullable=False, unique=True, comment="Username")
    first_name = Column(String(255), nullable=True, comment="Given name")
    last_name = Column(String(255), nullable=True, comment="Family name")
    location = Column(String(255), nullable=True, comment="Location")

    # Back-references only; deleting a user never cascades into projects
    owned_projects = relationship("Project", back_populates="owner")
    collaborating_projects = relationship(
        "Project",
        secondary="project_collaborators",
        back_populates="collaborators",
    )
    assigned_tasks = relationship("ProjectTask", back_populates="assigned_user")

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
