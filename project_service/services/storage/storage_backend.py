# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Object storage abstract interface for project files.

The file service stores only metadata; the bytes live in a versioned object
store behind this interface. Every put of an existing key creates a new
object version, which is how file history is kept.
"""

import logging
import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import BinaryIO, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ObjectVersion:
    """One stored version of an object."""

    key: str
    version_id: str
    size: int
    last_modified: Optional[datetime] = None
    is_latest: bool = False


class ObjectStorage(ABC):
    """
    Abstract base class for object storage backends.

    Implementations must target a versioned bucket: put() has to return the
    version id of the object it created.
    """

    @abstractmethod
    def put(
        self,
        key: str,
        stream: BinaryIO,
        content_type: str,
        size: int,
        metadata: Dict[str, str],
    ) -> Optional[str]:
        """
        Store an object.

        Args:
            key: Storage key
            stream: Readable binary stream with the content
            content_type: MIME type
            size: Content length in bytes
            metadata: User metadata stored with the object

        Returns:
            Version id of the created object, or None if the backend did not
            report one (for example an unversioned bucket)

        Raises:
            StorageError: If the upload fails
        """

    @abstractmethod
    def presign_download(self, key: str, version_id: str, expires: int) -> str:
        """
        Create a time-limited URL for downloading one specific version.

        Args:
            key: Storage key
            version_id: Version to bind the URL to
            expires: URL lifetime in seconds

        Raises:
            StorageError: If the URL cannot be generated
        """

    @abstractmethod
    def delete_version(self, key: str, version_id: Optional[str]) -> None:
        """
        Delete one version of an object.

        An empty or missing version_id deletes the key without a version,
        which leaves a delete marker on a versioned bucket.

        Raises:
            StorageError: If the delete fails
        """

    @abstractmethod
    def list_versions(self, key: str) -> List[ObjectVersion]:
        """
        List all stored versions of exactly this key (delete markers excluded).
        """

    @property
    @abstractmethod
    def backend_type(self) -> str:
        """
        Get the backend type identifier (e.g., "s3").
        """


class StorageError(Exception):
    """Exception raised when storage operations fail."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.message = message
        self.key = key
        super().__init__(self.message)


_UNSAFE_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Reduce a client supplied filename to a safe basename.

    Directory components, parent references and control characters are
    removed. Returns an empty string when nothing usable remains.
    """
    if not filename:
        return ""
    name = filename.replace("\\", "/").split("/")[-1]
    name = _UNSAFE_CHARS.sub("", name).strip()
    if name in ("", ".", ".."):
        return ""
    return name


def generate_storage_key(project_id: uuid.UUID, filename: str) -> str:
    """
    Build the storage key of a project file.

    The key is deterministic per project and filename, so re-uploading the
    same filename stores a new version under the same key.

    Returns:
        Storage key in format: projects/{project_id}/files/{filename}
    """
    return f"projects/{project_id}/files/{filename}"
