# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
File version store.

Bytes live in object storage; this service owns the metadata rows. Every
upload creates a new row, even when the filename already exists in the
project: the storage key is reused and the object store hands out a new
version id.
"""
import io
import logging
import uuid
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session, aliased

from project_service.core.config import settings
from project_service.core.exceptions import (
    FileNotFoundException,
    InvalidStateException,
    StorageIOException,
    ValidationException,
)
from project_service.models.project_file import ProjectFile
from project_service.schemas.project_file import (
    FileDownloadResponse,
    ProjectFileResponse,
)
from project_service.services import membership
from project_service.services.storage import (
    ObjectStorage,
    StorageError,
    generate_storage_key,
    get_storage_backend,
    sanitize_filename,
)
from project_service.services.user_service import user_service

logger = logging.getLogger(__name__)


class FileService:
    """
    Project file service backed by an ObjectStorage implementation.
    """

    def __init__(self, storage: Optional[ObjectStorage] = None):
        self._storage = storage

    @property
    def storage(self) -> ObjectStorage:
        if self._storage is None:
            self._storage = get_storage_backend()
        return self._storage

    def validate_file(
        self, filename: str, content_type: Optional[str], file_size: int
    ) -> str:
        """
        Check an upload against the size and content type limits.

        Returns:
            The sanitized filename

        Raises:
            ValidationException: If the file is empty, too large, of a
                disallowed type or has no usable name
        """
        if file_size <= 0:
            raise ValidationException("File cannot be empty")
        if file_size > settings.MAX_UPLOAD_SIZE_BYTES:
            max_mb = settings.MAX_UPLOAD_SIZE_BYTES / (1024 * 1024)
            raise ValidationException(f"File size exceeds maximum limit ({max_mb:.0f} MB)")
        if content_type not in settings.ALLOWED_UPLOAD_CONTENT_TYPES:
            raise ValidationException(
                f"File type {content_type} is not allowed. Allowed types: "
                f"{', '.join(settings.ALLOWED_UPLOAD_CONTENT_TYPES)}"
            )
        safe_name = sanitize_filename(filename)
        if not safe_name:
            raise ValidationException("Invalid filename")
        return safe_name

    def upload_file(
        self,
        db: Session,
        project_id: uuid.UUID,
        uploader_id: uuid.UUID,
        file_content: bytes,
        filename: str,
        content_type: Optional[str],
        description: Optional[str] = None,
    ) -> ProjectFileResponse:
        """
        Store a new file version and record its metadata.

        Raises:
            ValidationException: If the file fails validation
            StorageIOException: If storage fails or returns no version id
        """
        logger.info(f"User {uploader_id} uploading file '{filename}' to project {project_id}")
        membership.verify_member(db, project_id, uploader_id)
        uploader = user_service.find_user_by_id(db, uploader_id)

        file_size = len(file_content or b"")
        safe_name = self.validate_file(filename, content_type, file_size)
        storage_key = generate_storage_key(project_id, safe_name)

        try:
            version_id = self.storage.put(
                storage_key,
                io.BytesIO(file_content),
                content_type,
                file_size,
                {
                    "project-id": str(project_id),
                    "uploader-id": str(uploader_id),
                    "original-filename": safe_name,
                },
            )
        except StorageError as e:
            logger.error(f"Failed to upload file to storage with key {storage_key}: {e.message}")
            raise StorageIOException(f"Failed to upload file: {e.message}")

        if not version_id:
            logger.error(f"Storage returned no version id for key {storage_key}")
            raise StorageIOException(
                "Failed to upload file: storage did not return a version id"
            )

        project_file = ProjectFile(
            project_id=project_id,
            uploaded_by=uploader,
            original_filename=safe_name,
            storage_key=storage_key,
            storage_version_id=version_id,
            content_type=content_type,
            file_size=file_size,
            description=description,
        )
        db.add(project_file)
        db.commit()
        db.refresh(project_file)

        logger.info(
            f"File {project_file.id} stored as {storage_key} version {version_id} "
            f"in project {project_id}"
        )
        return ProjectFileResponse.model_validate(project_file)

    def list_latest_files(
        self, db: Session, project_id: uuid.UUID, user_id: uuid.UUID
    ) -> List[ProjectFileResponse]:
        """Latest version of every distinct filename in the project, by filename."""
        membership.verify_member(db, project_id, user_id)

        ranked = (
            select(
                ProjectFile.id.label("id"),
                func.row_number()
                .over(
                    partition_by=ProjectFile.original_filename,
                    order_by=(
                        ProjectFile.upload_timestamp.desc(),
                        ProjectFile.id.desc(),
                    ),
                )
                .label("rn"),
            )
            .where(ProjectFile.project_id == project_id)
            .subquery()
        )
        latest = aliased(ProjectFile)
        files = (
            db.query(latest)
            .join(ranked, ranked.c.id == latest.id)
            .filter(ranked.c.rn == 1)
            .order_by(latest.original_filename.asc())
            .all()
        )
        return [ProjectFileResponse.model_validate(f) for f in files]

    def list_file_versions(
        self,
        db: Session,
        project_id: uuid.UUID,
        filename: str,
        user_id: uuid.UUID,
    ) -> List[ProjectFileResponse]:
        """Every stored version of a filename, newest first."""
        membership.verify_member(db, project_id, user_id)
        safe_name = sanitize_filename(filename)
        files = (
            db.query(ProjectFile)
            .filter(
                ProjectFile.project_id == project_id,
                ProjectFile.original_filename == safe_name,
            )
            .order_by(ProjectFile.upload_timestamp.desc(), ProjectFile.id.desc())
            .all()
        )
        return [ProjectFileResponse.model_validate(f) for f in files]

    def get_file_metadata(
        self,
        db: Session,
        project_id: uuid.UUID,
        file_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> ProjectFileResponse:
        membership.verify_member(db, project_id, user_id)
        project_file = self._get_file_in_project(db, project_id, file_id)
        return ProjectFileResponse.model_validate(project_file)

    def generate_download_url(
        self,
        db: Session,
        project_id: uuid.UUID,
        file_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> FileDownloadResponse:
        """
        Create a time-limited URL for the exact stored version of a file.

        Raises:
            InvalidStateException: If the metadata lacks a key or version id
            StorageIOException: If the URL cannot be signed
        """
        membership.verify_member(db, project_id, user_id)
        project_file = self._get_file_in_project(db, project_id, file_id)

        if not project_file.storage_key or not project_file.storage_version_id:
            logger.error(f"File {file_id} is missing its storage key or version id")
            raise InvalidStateException(
                "File metadata is missing storage key or version id."
            )

        try:
            url = self.storage.presign_download(
                project_file.storage_key,
                project_file.storage_version_id,
                settings.S3_PRESIGNED_URL_EXPIRE_MINUTES * 60,
            )
        except StorageError as e:
            logger.error(f"Failed to generate download url for file {file_id}: {e.message}")
            raise StorageIOException("Failed to generate download URL")

        logger.info(f"Download url generated for file {file_id} by user {user_id}")
        return FileDownloadResponse(url=url, filename=project_file.original_filename)

    def delete_file(
        self,
        db: Session,
        project_id: uuid.UUID,
        file_id: uuid.UUID,
        user_id: uuid.UUID,
    ) -> None:
        """
        Delete one stored version and then its metadata row.

        Raises:
            InvalidStateException: If storage deletion fails; the metadata
                row is kept in that case
        """
        logger.info(f"User {user_id} deleting file {file_id} in project {project_id}")
        membership.verify_member(db, project_id, user_id)
        project_file = self._get_file_in_project(db, project_id, file_id)

        try:
            self.storage.delete_version(
                project_file.storage_key, project_file.storage_version_id
            )
        except StorageError as e:
            logger.error(
                f"Failed to delete file {project_file.storage_key} version "
                f"{project_file.storage_version_id} from storage: {e.message}"
            )
            raise InvalidStateException("Deletion failed!")

        db.delete(project_file)
        db.commit()
        logger.info(f"File {file_id} deleted from project {project_id}")

    def _get_file_in_project(
        self, db: Session, project_id: uuid.UUID, file_id: uuid.UUID
    ) -> ProjectFile:
        project_file = db.get(ProjectFile, file_id)
        if project_file is None or project_file.project_id != project_id:
            logger.warning(f"File {file_id} not found in project {project_id}")
            raise FileNotFoundException(
                f"File with ID {file_id} not found in project {project_id}"
            )
        return project_file


file_service = FileService()
