from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dinner_spinner.app import create_app
from dinner_spinner.config import AppConfig

TEST_CONFIG = AppConfig(database_url="sqlite://", session_secret="test-secret")


@pytest.fixture
def app():
    return create_app(TEST_CONFIG)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_client(app):
    c = TestClient(app)
    resp = c.post("/api/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return c
