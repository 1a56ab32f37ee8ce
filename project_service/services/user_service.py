# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Identity resolver.

Users are materialized from externally asserted identities (token claims or
user service summaries) the first time they are referenced. Existing rows are
returned as stored and are never re-synced from newer claims.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from project_service.core.exceptions import UserNotFoundException, ValidationException
from project_service.core.security import TokenClaims
from project_service.models.user import User
from project_service.schemas.user import UserSummary

logger = logging.getLogger(__name__)


class IdentityResolver(ABC):
    """Port turning an external identity into a local User row."""

    @abstractmethod
    def resolve_or_create(self, db: Session, claims: TokenClaims) -> User:
        """Return the User for these claims, creating it on first sight."""


class UserService(IdentityResolver):
    """
    User service class
    """

    def find_user_by_id(self, db: Session, user_id: uuid.UUID) -> User:
        logger.info(f"Attempting to find user by ID: {user_id}")
        user = db.get(User, user_id)
        if user is None:
            logger.warning(f"User not found with ID: {user_id}")
            raise UserNotFoundException(f"User not found with ID: {user_id}")
        return user

    def resolve_or_create(self, db: Session, claims: TokenClaims) -> User:
        if claims is None or claims.subject_id is None:
            raise ValidationException("User ID cannot be null")
        return self._get_or_create(
            db,
            user_id=claims.subject_id,
            username=claims.username,
            first_name=claims.given_name,
            last_name=claims.family_name,
            location=claims.location,
        )

    def get_or_create_from_summary(
        self, db: Session, summary: Optional[UserSummary]
    ) -> User:
        if summary is None or summary.id is None:
            logger.error("UserSummary or its ID is null.")
            raise ValidationException("User summary or its ID cannot be null")
        return self._get_or_create(
            db,
            user_id=summary.id,
            username=summary.username,
            first_name=summary.first_name,
            last_name=summary.last_name,
            location=summary.location,
        )

    def _get_or_create(
        self,
        db: Session,
        user_id: uuid.UUID,
        username: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
        location: Optional[str],
    ) -> User:
        user = db.get(User, user_id)
        if user is not None:
            return user

        logger.info(
            f"User with ID {user_id} not found. Creating new user with username: {username}"
        )
        new_user = User(
            id=user_id,
            username=username or str(user_id),
            first_name=first_name,
            last_name=last_name,
            location=location,
        )
        # A concurrent request may materialize the same user first
        try:
            with db.begin_nested():
                db.add(new_user)
        except IntegrityError:
            logger.info(f"User {user_id} was created concurrently, reusing it")
            user = db.get(User, user_id)
            if user is None:
                raise ValidationException(
                    f"Username {username} is already taken by another user"
                )
            return user

        logger.info(f"New user created and saved with ID: {user_id}")
        return new_user


user_service = UserService()
