# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Bearer token handling.

Tokens are issued by the external identity provider. This service trusts the
claims of a valid token as-is and turns them into a TokenClaims value that the
service layer uses to identify (and lazily materialize) the caller.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from project_service.core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class TokenClaims:
    """Identity of the caller as asserted by the token."""

    subject_id: uuid.UUID
    username: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    location: Optional[str] = None
    # Raw token, forwarded to the user service on the caller's behalf
    token: Optional[str] = None

    @property
    def bearer(self) -> str:
        return f"Bearer {self.token}" if self.token else ""


def _credentials_exception(detail: str = "Could not validate credentials"):
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    data: Dict[str, Any], expires_delta: Optional[int] = None
) -> str:
    """
    Create access token

    Args:
        data: Token claims
        expires_delta: Expiration time (minutes)

    Returns:
        Access token
    """
    to_encode = data.copy()
    minutes = expires_delta or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode.update({"exp": datetime.now(timezone.utc) + timedelta(minutes=minutes)})
    if settings.JWT_AUDIENCE and "aud" not in to_encode:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Verify token and return its claims

    Raises:
        HTTPException: 401 if the token is invalid or expired
    """
    try:
        options = {"verify_aud": settings.JWT_AUDIENCE is not None}
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
    except JWTError as e:
        logger.warning(f"Token verification failed: {e}")
        raise _credentials_exception()


def claims_from_payload(payload: Dict[str, Any], token: Optional[str] = None) -> TokenClaims:
    """Map a decoded token payload to TokenClaims"""
    subject = payload.get("sub")
    username = payload.get("preferred_username")
    if not subject or not username:
        raise _credentials_exception("Token is missing subject or username")
    try:
        subject_id = uuid.UUID(str(subject))
    except ValueError:
        raise _credentials_exception("Token subject is not a valid user id")

    return TokenClaims(
        subject_id=subject_id,
        username=username,
        given_name=payload.get("given_name"),
        family_name=payload.get("family_name"),
        location=payload.get("location"),
        token=token,
    )


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> TokenClaims:
    """Get the authenticated caller's claims"""
    if credentials is None or not credentials.credentials:
        raise _credentials_exception("Not authenticated")
    payload = verify_token(credentials.credentials)
    return claims_from_payload(payload, token=credentials.credentials)
