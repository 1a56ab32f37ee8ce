# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

import pytest
from fastapi.testclient import TestClient

from project_service.api.dependencies import get_db
from project_service.core.security import create_access_token
from project_service.main import app
from project_service.services.file_service import file_service
from tests.conftest import FakeConnectionsClient


def auth_headers(user) -> dict:
    token = create_access_token(
        {
            "sub": str(user.id),
            "preferred_username": user.username,
            "given_name": user.first_name,
            "family_name": user.last_name,
        }
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def connections():
    return FakeConnectionsClient()


@pytest.fixture
def client(test_db, fake_storage, connections, monkeypatch):
    def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(file_service, "_storage", fake_storage)
    monkeypatch.setattr(
        "project_service.services.project_service.get_connections_client",
        lambda: connections,
    )
    monkeypatch.setattr(
        "project_service.services.project_service.get_storage_backend",
        lambda: fake_storage,
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
