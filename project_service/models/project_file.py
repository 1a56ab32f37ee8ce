# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Project file metadata model.

One row per stored object version. Uploading a file with a name that already
exists in the project reuses the storage key but gets a new storage version
id and a new row; previous rows are never overwritten. The current version
of a filename is the row with the latest upload_timestamp (highest id on a tie).
"""
import uuid

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import relationship

from project_service.db.base import Base
from project_service.utils.time_util import utcnow


class ProjectFile(Base):
    __tablename__ = "project_files"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, comment="Primary key")
    project_id = Column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        comment="Project ID",
    )
    uploaded_by_id = Column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        comment="Uploader user ID",
    )
    original_filename = Column(String(255), nullable=False, comment="Sanitized filename")
    storage_key = Column(String(1024), nullable=False, comment="Object storage key")
    storage_version_id = Column(
        String(1024), nullable=False, comment="Object storage version id"
    )
    content_type = Column(String(255), nullable=False, comment="MIME type")
    file_size = Column(BigInteger, nullable=False, comment="Size in bytes")
    upload_timestamp = Column(
        DateTime,
        nullable=False,
        default=utcnow,
        comment="Server-side upload time",
    )
    description = Column(Text, nullable=True, comment="Optional description")

    project = relationship("Project", back_populates="files")
    uploaded_by = relationship("User")

    __table_args__ = (
        Index("ix_project_files_project_filename", "project_id", "original_filename"),
    )
