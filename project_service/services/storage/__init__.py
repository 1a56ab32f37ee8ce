# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from project_service.services.storage.factory import get_storage_backend
from project_service.services.storage.storage_backend import (
    ObjectStorage,
    ObjectVersion,
    StorageError,
    generate_storage_key,
    sanitize_filename,
)

__all__ = [
    "ObjectStorage",
    "ObjectVersion",
    "StorageError",
    "generate_storage_key",
    "get_storage_backend",
    "sanitize_filename",
]
