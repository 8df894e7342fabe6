"""Shared fixtures: every API test runs against its own SQLite file."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from backend.main import create_app
from backend.settings import reset_settings

TOKEN = "test-backend-secret"
STUDENT = "student@example.com"
ADMIN = "admin@example.com"


def auth_headers(email=STUDENT, token=TOKEN):
    return {"X-User-Email": email, "X-Backend-Token": token}


def in_days(days, hours=0):
    return (datetime.now(timezone.utc) + timedelta(days=days, hours=hours)).replace(microsecond=0).isoformat()


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Create test client with a fresh database."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'planner.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", TOKEN)
    monkeypatch.setenv("ADMIN_EMAILS", ADMIN)
    monkeypatch.delenv("ALLOWED_EMAILS", raising=False)
    monkeypatch.delenv("APP_TIMEZONE", raising=False)
    reset_settings()
    with TestClient(create_app()) as test_client:
        yield test_client
    reset_settings()


@pytest.fixture
def headers():
    return auth_headers()


@pytest.fixture
def subject(client, headers):
    response = client.post(
        "/v1/subjects",
        json={"name": "Linear Algebra", "instructor": "Dr. Noether", "credits": 3},
        headers=headers,
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def make_task(client, headers, subject):
    def _make(title="Problem set", hours_required=5, due_date=None, **extra):
        payload = {
            "subject_id": subject["id"],
            "title": title,
            "hours_required": hours_required,
            "due_date": due_date or in_days(10),
            **extra,
        }
        response = client.post("/v1/tasks", json=payload, headers=headers)
        assert response.status_code == 200, response.text
        return response.json()

    return _make
