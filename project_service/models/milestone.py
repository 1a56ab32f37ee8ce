# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from project_service.db.base import Base


class ProjectMilestone(Base):
    __tablename__ = "project_milestones"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, comment="Primary key")
    project_id = Column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Project ID",
    )
    title = Column(String(255), nullable=False, comment="Milestone title")
    description = Column(Text, nullable=True, comment="Milestone description")
    due_date = Column(DateTime, nullable=True, comment="Optional due date")

    project = relationship("Project", back_populates="milestones")
