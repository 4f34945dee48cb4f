"""Pytest configuration and fixtures."""

import os
import secrets

import pytest

# Generate a unique test secret for this test run to prevent token forgery
_TEST_JWT_SECRET = f"test-only-{secrets.token_urlsafe(32)}"

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SUPABASE_PUBLISHABLE_KEY", "test-publishable-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", _TEST_JWT_SECRET)

from app.auth import create_access_token  # noqa: E402
from app.config import get_settings  # noqa: E402
from app.database import get_job_storage, get_profile_storage, get_rating_storage  # noqa: E402
from app.main import app  # noqa: E402
from app.rate_limit import limiter  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from gigboard.jobs import InMemoryJobStorage  # noqa: E402
from gigboard.profiles import InMemoryProfileStorage  # noqa: E402
from gigboard.profiles.service import ProfileService  # noqa: E402
from gigboard.ratings import InMemoryRatingStorage  # noqa: E402


@pytest.fixture
def profile_storage():
    return InMemoryProfileStorage()


@pytest.fixture
def job_storage(profile_storage):
    return InMemoryJobStorage(profiles=profile_storage)


@pytest.fixture
def client(profile_storage, job_storage):
    """Create a test client backed by in-memory storage."""
    ratings = InMemoryRatingStorage()
    app.dependency_overrides[get_profile_storage] = lambda: profile_storage
    app.dependency_overrides[get_job_storage] = lambda: job_storage
    app.dependency_overrides[get_rating_storage] = lambda: ratings
    limiter.reset()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def token_for():
    """Build auth headers for an auth user ID."""

    def _headers(user_id: str) -> dict:
        token = create_access_token(user_id, get_settings())
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def signup(profile_storage):
    """Create a profile directly in storage, bypassing the API."""
    service = ProfileService(profile_storage)

    def _signup(user_id: str, full_name: str, role: str):
        return service.create_profile(user_id, full_name, role)

    return _signup


@pytest.fixture
def employer_headers(signup, token_for):
    signup("usr_employer", "Emma Employer", "employer")
    return token_for("usr_employer")


@pytest.fixture
def worker_headers(signup, token_for):
    signup("usr_worker", "Wendy Worker", "worker")
    return token_for("usr_worker")


@pytest.fixture
def job_payload():
    return {
        "title": "Shelf stacking",
        "description": "Restock shelves during the evening shift",
        "category": "retail",
        "hourly_rate": 150,
        "duration_hours": 3,
        "location_address": "12 Market Road",
        "city": "Pune",
        "start_time": "2030-05-01T09:00:00+00:00",
    }


@pytest.fixture
def posted_job(client, employer_headers, job_payload):
    response = client.post("/api/v1/jobs", json=job_payload, headers=employer_headers)
    assert response.status_code == 201
    return response.json()
