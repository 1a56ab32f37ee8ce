# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
HTTP client for the user service connections directory.

Only used when adding a collaborator: the candidate must be one of the
owner's confirmed connections. The call is made with the owner's own bearer
token, so the user service resolves "me" from it.
"""

import logging
from typing import List, Optional

import requests
from fastapi import status
from pydantic import ValidationError

from project_service.core.config import settings
from project_service.core.exceptions import CustomHTTPException
from project_service.schemas.user import UserSummary

logger = logging.getLogger(__name__)

CONNECTIONS_PATH = "/interactions/me/connections/all"


class ConnectionsServiceError(CustomHTTPException):
    """The user service could not be reached or returned an unusable answer."""

    def __init__(self, detail: str = "User service request failed"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)


class UserConnectionsClient:
    """Synchronous client for the user service."""

    def __init__(
        self, base_url: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        raw_base = base_url or settings.USER_SERVICE_URL
        if not raw_base:
            raise ValueError("base_url cannot be empty. Provide the user service URL.")
        self.base_url = raw_base.rstrip("/")
        self.timeout = (
            timeout if timeout is not None else settings.USER_SERVICE_TIMEOUT_SECONDS
        )

    def list_connections(self, bearer_token: str) -> List[UserSummary]:
        """
        Fetch the confirmed connections of the token's subject.

        Args:
            bearer_token: Authorization header value ("Bearer ...") of the caller

        Returns:
            List of user summaries

        Raises:
            ConnectionsServiceError: On network errors, non-2xx answers or
                malformed payloads
        """
        url = f"{self.base_url}{CONNECTIONS_PATH}"
        headers = {"Authorization": bearer_token, "Accept": "application/json"}
        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to fetch connections from user service: {e}")
            raise ConnectionsServiceError(f"User service error: {str(e)}")
        except ValueError as e:
            logger.error(f"User service returned invalid JSON: {e}")
            raise ConnectionsServiceError("User service returned an invalid response")

        if not isinstance(payload, list):
            raise ConnectionsServiceError("User service returned an invalid response")

        try:
            connections = [UserSummary.model_validate(item) for item in payload]
        except ValidationError as e:
            logger.error(f"User service returned malformed connections: {e}")
            raise ConnectionsServiceError("User service returned an invalid response")

        logger.info(f"Fetched {len(connections)} connections from user service")
        return connections


_connections_client: Optional[UserConnectionsClient] = None


def get_connections_client() -> UserConnectionsClient:
    global _connections_client
    if _connections_client is None:
        _connections_client = UserConnectionsClient()
    return _connections_client
