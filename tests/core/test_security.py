# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from project_service.core.config import settings
from project_service.core.security import (
    TokenClaims,
    claims_from_payload,
    create_access_token,
    get_current_claims,
    verify_token,
)


def _payload(subject=None, **extra):
    payload = {
        "sub": str(subject or uuid.uuid4()),
        "preferred_username": "ada",
        "given_name": "Ada",
        "family_name": "Lovelace",
    }
    payload.update(extra)
    return payload


@pytest.mark.unit
class TestTokens:
    """Test token creation and verification"""

    def test_create_and_verify_token(self):
        """Test a minted token verifies and keeps its claims"""
        token = create_access_token(_payload())

        decoded = verify_token(token)

        assert decoded["preferred_username"] == "ada"
        assert "exp" in decoded

    def test_verify_token_with_wrong_secret(self):
        """Test tokens signed with another key are rejected"""
        token = jwt.encode(_payload(), "other-secret", algorithm=settings.ALGORITHM)

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)

        assert exc_info.value.status_code == 401

    def test_verify_expired_token(self):
        """Test expired tokens are rejected"""
        expired = _payload(exp=datetime.now(timezone.utc) - timedelta(minutes=1))
        token = jwt.encode(expired, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

        with pytest.raises(HTTPException) as exc_info:
            verify_token(token)

        assert exc_info.value.status_code == 401


@pytest.mark.unit
class TestClaims:
    """Test mapping token payloads to TokenClaims"""

    def test_claims_from_payload(self):
        """Test all identity claims are carried over"""
        subject = uuid.uuid4()

        claims = claims_from_payload(_payload(subject), token="abc")

        assert claims.subject_id == subject
        assert claims.username == "ada"
        assert claims.given_name == "Ada"
        assert claims.family_name == "Lovelace"
        assert claims.location is None
        assert claims.bearer == "Bearer abc"

    def test_claims_require_subject_and_username(self):
        """Test payloads without sub or preferred_username are rejected"""
        payload = _payload()
        del payload["preferred_username"]

        with pytest.raises(HTTPException) as exc_info:
            claims_from_payload(payload)

        assert exc_info.value.status_code == 401

    def test_claims_require_uuid_subject(self):
        """Test a non-UUID subject is rejected"""
        with pytest.raises(HTTPException):
            claims_from_payload(_payload(subject="not-a-uuid"))

    def test_bearer_without_token(self):
        """Test bearer is empty when no raw token is known"""
        claims = TokenClaims(subject_id=uuid.uuid4(), username="ada")

        assert claims.bearer == ""


@pytest.mark.unit
class TestGetCurrentClaims:
    """Test the FastAPI dependency"""

    def test_missing_credentials(self):
        """Test requests without a bearer token get 401"""
        with pytest.raises(HTTPException) as exc_info:
            get_current_claims(credentials=None)

        assert exc_info.value.status_code == 401
        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    def test_valid_credentials(self):
        """Test a valid token yields claims with the raw token attached"""
        subject = uuid.uuid4()
        token = create_access_token(_payload(subject))
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        claims = get_current_claims(credentials=credentials)

        assert claims.subject_id == subject
        assert claims.token == token
