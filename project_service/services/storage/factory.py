# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Optional

from project_service.services.storage.storage_backend import ObjectStorage

_storage_backend: Optional[ObjectStorage] = None


def get_storage_backend() -> ObjectStorage:
    """Return the process-wide object storage backend, creating it lazily."""
    global _storage_backend
    if _storage_backend is None:
        from project_service.services.storage.s3_storage import S3StorageBackend

        _storage_backend = S3StorageBackend()
    return _storage_backend
