# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import os
import uuid
from typing import Dict, List, Optional

# Settings are read at import time; keep tests away from real services
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import project_service.db.session  # noqa: F401  registers the SQLite foreign key listener
from project_service.core.security import TokenClaims
from project_service.db.base import Base
from project_service.models import *  # noqa: F401,F403
from project_service.models.project import Project, project_collaborators
from project_service.models.user import User
from project_service.schemas.user import UserSummary
from project_service.services.storage import ObjectStorage, ObjectVersion, StorageError


class FakeObjectStorage(ObjectStorage):
    """In-memory versioned object store."""

    def __init__(self):
        self.objects: Dict[str, List[Dict]] = {}
        self.deleted: List[tuple] = []
        self.fail_on_delete = False
        self.fail_on_put = False
        self.return_version_id = True
        self._counter = 0

    @property
    def backend_type(self) -> str:
        return "fake"

    def put(self, key, stream, content_type, size, metadata) -> Optional[str]:
        if self.fail_on_put:
            raise StorageError("put failed", key)
        self._counter += 1
        version_id = f"v{self._counter}"
        self.objects.setdefault(key, []).append(
            {
                "version_id": version_id,
                "data": stream.read(),
                "content_type": content_type,
                "metadata": metadata,
            }
        )
        return version_id if self.return_version_id else None

    def presign_download(self, key, version_id, expires) -> str:
        return f"https://storage.test/{key}?versionId={version_id}&expires={expires}"

    def delete_version(self, key, version_id) -> None:
        if self.fail_on_delete:
            raise StorageError("delete failed", key)
        self.deleted.append((key, version_id))
        self.objects[key] = [
            v for v in self.objects.get(key, []) if v["version_id"] != version_id
        ]

    def list_versions(self, key) -> List[ObjectVersion]:
        return [
            ObjectVersion(
                key=key,
                version_id=v["version_id"],
                size=len(v["data"]),
                last_modified=None,
                is_latest=i == len(self.objects[key]) - 1,
            )
            for i, v in enumerate(self.objects.get(key, []))
        ]


class FakeConnectionsClient:
    """Stands in for the user service connections directory."""

    def __init__(self, connections: Optional[List[UserSummary]] = None):
        self.connections = connections or []
        self.calls: List[str] = []

    def list_connections(self, bearer_token: str) -> List[UserSummary]:
        self.calls.append(bearer_token)
        return list(self.connections)


@pytest.fixture
def test_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def test_db(test_engine):
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, bind=test_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


def _make_user(db, username: str) -> User:
    user = User(
        id=uuid.uuid4(),
        username=username,
        first_name=username.capitalize(),
        last_name="Tester",
        location="Berlin",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def owner(test_db) -> User:
    return _make_user(test_db, "owner")


@pytest.fixture
def collaborator(test_db) -> User:
    return _make_user(test_db, "collab")


@pytest.fixture
def outsider(test_db) -> User:
    return _make_user(test_db, "outsider")


@pytest.fixture
def project(test_db, owner, collaborator) -> Project:
    """Project owned by `owner` with `collaborator` as its only collaborator."""
    project = Project(title="Album", description="Debut album", owner_id=owner.id)
    test_db.add(project)
    test_db.flush()
    test_db.execute(
        project_collaborators.insert().values(
            project_id=project.id, user_id=collaborator.id
        )
    )
    test_db.commit()
    test_db.refresh(project)
    return project


@pytest.fixture
def fake_storage() -> FakeObjectStorage:
    return FakeObjectStorage()


@pytest.fixture
def owner_claims(owner) -> TokenClaims:
    return TokenClaims(
        subject_id=owner.id,
        username=owner.username,
        given_name=owner.first_name,
        family_name=owner.last_name,
        token="owner-token",
    )


def summary_of(user: User) -> UserSummary:
    return UserSummary(
        id=user.id,
        username=user.username,
        first_name=user.first_name,
        last_name=user.last_name,
        location=user.location,
    )
