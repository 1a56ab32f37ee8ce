# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
S3 object storage backend.

Works against AWS S3 or any S3-compatible endpoint (MinIO). The bucket must
have versioning enabled so every put returns a VersionId.
"""

import logging
from typing import Any, BinaryIO, Dict, List, Optional

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from project_service.core.config import settings
from project_service.services.storage.storage_backend import (
    ObjectStorage,
    ObjectVersion,
    StorageError,
)

logger = logging.getLogger(__name__)


class S3StorageBackend(ObjectStorage):
    BACKEND_TYPE = "s3"

    def __init__(self, bucket: Optional[str] = None, client: Any = None):
        """
        Initialize S3 storage backend.

        Args:
            bucket: Bucket name (default: from settings)
            client: Pre-built boto3 S3 client (default: built from settings)
        """
        self.bucket = bucket or settings.S3_BUCKET_NAME
        self._client = client or boto3.client(
            "s3",
            endpoint_url=settings.S3_ENDPOINT_URL,
            aws_access_key_id=settings.S3_ACCESS_KEY_ID,
            aws_secret_access_key=settings.S3_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
            region_name=settings.S3_REGION,
        )

    @property
    def backend_type(self) -> str:
        return self.BACKEND_TYPE

    def put(
        self,
        key: str,
        stream: BinaryIO,
        content_type: str,
        size: int,
        metadata: Dict[str, str],
    ) -> Optional[str]:
        try:
            response = self._client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=stream,
                ContentType=content_type,
                ContentLength=size,
                Metadata=metadata,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 put_object failed for key {key}: {e}")
            raise StorageError(f"Failed to upload object: {e}", key)

        version_id = response.get("VersionId")
        logger.info(f"Object uploaded to S3 with key {key}. VersionId: {version_id}")
        return version_id

    def presign_download(self, key: str, version_id: str, expires: int) -> str:
        try:
            url = self._client.generate_presigned_url(
                ClientMethod="get_object",
                Params={"Bucket": self.bucket, "Key": key, "VersionId": version_id},
                ExpiresIn=expires,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 generate_presigned_url error for key {key}: {e}")
            raise StorageError(f"Failed to generate download URL: {e}", key)

        logger.info(f"Generated presigned URL for key {key}, versionId {version_id}")
        return url

    def delete_version(self, key: str, version_id: Optional[str]) -> None:
        params = {"Bucket": self.bucket, "Key": key}
        if not version_id or version_id.lower() == "null":
            logger.warning(
                f"Deleting object {key} without a versionId. This creates a delete "
                f"marker if versioning is enabled, or deletes the object if not."
            )
        else:
            params["VersionId"] = version_id

        try:
            self._client.delete_object(**params)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 delete_object failed for key {key}: {e}")
            raise StorageError(f"Failed to delete object: {e}", key)

        logger.info(f"Deleted version {version_id} of object {key} from S3.")

    def list_versions(self, key: str) -> List[ObjectVersion]:
        versions: List[ObjectVersion] = []
        try:
            paginator = self._client.get_paginator("list_object_versions")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=key):
                for item in page.get("Versions", []):
                    if item.get("Key") != key:
                        continue
                    versions.append(
                        ObjectVersion(
                            key=item["Key"],
                            version_id=item.get("VersionId", ""),
                            size=item.get("Size", 0),
                            last_modified=item.get("LastModified"),
                            is_latest=item.get("IsLatest", False),
                        )
                    )
                for marker in page.get("DeleteMarkers", []):
                    if marker.get("Key") == key:
                        logger.info(
                            f"Delete marker found for key {key}: versionId {marker.get('VersionId')}"
                        )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error listing object versions for key {key}: {e}")
            raise StorageError(f"Failed to list versions: {e}", key)
        return versions
