# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

from typing import Generator

from sqlalchemy.orm import Session

from project_service.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency, one session per request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
