# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""
Shared helpers for the service layer.
"""

import logging
from typing import Any, List, Sequence, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Query, Session

from project_service.core.exceptions import ConflictException

logger = logging.getLogger(__name__)


def paginate(query: Query, page: int, limit: int) -> Tuple[int, List[Any]]:
    """
    Apply page/limit to an ordered query.

    Args:
        query: Query with its ordering already applied
        page: 1-based page number
        limit: Page size

    Returns:
        (total row count, rows of the requested page)
    """
    page = max(page, 1)
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return total, items


def slice_page(items: Sequence[Any], page: int, limit: int) -> List[Any]:
    """Pagination over an already loaded sequence."""
    start = (max(page, 1) - 1) * limit
    if start >= len(items):
        return []
    return list(items[start : start + limit])


def commit_or_conflict(db: Session, detail: str) -> None:
    """
    Commit the session, turning a uniqueness violation into a conflict.

    Application-level duplicate checks can race with a concurrent request;
    the database constraint is what finally rejects the duplicate.
    """
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error on commit: {e.orig}")
        raise ConflictException(detail)


def execute_or_conflict(db: Session, statement: Any, detail: str) -> None:
    """
    Execute a Core statement, turning a uniqueness violation into a conflict.

    Core inserts are sent immediately, so the constraint fires here rather
    than at commit time.
    """
    try:
        db.execute(statement)
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error on execute: {e.orig}")
        raise ConflictException(detail)
