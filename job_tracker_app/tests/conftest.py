"""
Pytest configuration and shared fixtures for the Job Tracker tests.
"""
import os
import sys

# Settings are read once at import time, so the environment goes first
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-jwt-tokens-12345678901234567890")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.main import app
from backend.models.db.database import get_db, Base


# Test Database Setup
@pytest.fixture(scope="function")
def test_db_engine():
    """A fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_db_engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def test_client(test_db_session):
    """Create a test client with overridden database dependency."""
    def override_get_db():
        try:
            yield test_db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# User Fixtures
@pytest.fixture
def test_user_data():
    return {
        "email": "test@example.com",
        "password": "testpassword123",
    }


@pytest.fixture
def other_user_data():
    return {
        "email": "someone.else@example.com",
        "password": "anotherpassword456",
    }


def _login_headers(client, user_data):
    response = client.post("/api/auth/register", json=user_data)
    assert response.status_code == 200

    login_data = {"username": user_data["email"], "password": user_data["password"]}
    response = client.post("/api/auth/login", data=login_data)
    assert response.status_code == 200

    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(test_client, test_user_data):
    """Authentication headers for the primary test user."""
    return _login_headers(test_client, test_user_data)


@pytest.fixture
def other_auth_headers(test_client, other_user_data):
    """Authentication headers for a second, unrelated user."""
    return _login_headers(test_client, other_user_data)


# Job Test Data Fixtures
@pytest.fixture
def sample_job_data():
    return {
        "company": "Acme",
        "position": "Engineer",
        "status": "applied",
        "dateApplied": "2024-01-01",
    }


@pytest.fixture
def full_job_data():
    """A candidate record exercising every field and sub-document."""
    return {
        "company": "Globex Corporation",
        "position": "Senior Backend Developer",
        "status": "interview",
        "dateApplied": "2024-03-15",
        "salary": 125000,
        "location": "Remote",
        "jobUrl": "https://globex.example.com/careers/123",
        "notes": "Referred by a former colleague",
        "priority": "high",
        "contacts": [
            {"name": "Hank Scorpio", "email": "Hank@Globex.com", "phone": "555-0100", "role": "CEO"}
        ],
        "interviews": [
            {
                "date": "2024-03-22T15:00:00",
                "type": "technical",
                "interviewer": "Frank Grimes",
                "notes": "System design round",
            }
        ],
        "documents": [
            {"name": "Resume v3", "type": "resume", "url": "https://files.example.com/resume.pdf"}
        ],
        "reminders": [
            {"date": "2024-03-29T09:00:00", "message": "Send thank-you note"}
        ],
        "tags": ["python", "remote"],
    }


@pytest.fixture
def create_job(test_client, auth_headers):
    """Factory creating a job for the primary user and returning the stored record."""
    def _create(**overrides):
        payload = {
            "company": "Acme",
            "position": "Engineer",
            "status": "applied",
            "dateApplied": "2024-01-01",
        }
        payload.update(overrides)
        response = test_client.post("/api/jobs", json=payload, headers=auth_headers)
        assert response.status_code == 201, response.json()
        return response.json()["job"]

    return _create
