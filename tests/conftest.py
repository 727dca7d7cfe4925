"""Pytest fixtures."""

import asyncio
import uuid

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from app.core.config import settings
from app.main import create_app


def run(coro):
    """Run a Motor coroutine against the mock database from a sync test."""
    return asyncio.run(coro)


@pytest.fixture
def db():
    """Fresh in-memory database per test."""
    return AsyncMongoMockClient()[f"hazard_test_{uuid.uuid4().hex[:8]}"]


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", str(path))
    monkeypatch.setattr(settings, "backend_url", "")
    return path


@pytest.fixture
def client(db, upload_dir):
    """Test client bound to the mock database."""
    app = create_app(database=db)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def register(client):
    """Register a user and return (auth headers, user json)."""

    def _register(email="citizen@test.com", role="user", password="secret123", name="Test Citizen"):
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return {"Authorization": f"Bearer {data['token']}"}, data["user"]

    return _register


@pytest.fixture
def user_headers(register):
    headers, _ = register()
    return headers


@pytest.fixture
def admin_headers(register):
    headers, _ = register(email="admin@test.com", role="admin", name="Admin")
    return headers


def report_payload(**overrides):
    payload = {
        "title": "Open manhole on 5th street",
        "description": "Cover is missing next to the bus stop, very dangerous at night.",
        "location": "5th Street, near bus stop",
        "city": "Pune",
        "locationDetails": {"streetName": "5th Street", "landmark": "Bus stop", "city": "Pune"},
        "type": "hazard",
    }
    payload.update(overrides)
    return payload
