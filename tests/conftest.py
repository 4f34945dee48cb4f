"""
Pytest fixtures and test configuration for gigboard tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from gigboard.config import GigboardConfig
from gigboard.identity import Identity
from gigboard.jobs.service import JobService
from gigboard.jobs.storage import InMemoryJobStorage
from gigboard.profiles.service import ProfileService
from gigboard.profiles.storage import InMemoryProfileStorage
from gigboard.ratings.service import RatingService
from gigboard.ratings.storage import InMemoryRatingStorage


@pytest.fixture
def config():
    """Create test configuration."""
    return GigboardConfig(list_limit=50)


@pytest.fixture
def profile_storage():
    return InMemoryProfileStorage()


@pytest.fixture
def job_storage(profile_storage):
    return InMemoryJobStorage(profiles=profile_storage)


@pytest.fixture
def rating_storage():
    return InMemoryRatingStorage()


@pytest.fixture
def profiles(profile_storage, config):
    return ProfileService(storage=profile_storage, config=config)


@pytest.fixture
def service(job_storage, config):
    """Create job service for testing."""
    return JobService(storage=job_storage, config=config)


@pytest.fixture
def ratings(rating_storage, job_storage, profile_storage, config):
    return RatingService(
        storage=rating_storage, jobs=job_storage, profiles=profile_storage, config=config
    )


def _identity_for(profile) -> Identity:
    return Identity(user_id=profile.user_id, profile_id=profile.id, role=profile.role)


@pytest.fixture
def employer(profiles):
    """Identity of a signed-up employer."""
    profile = profiles.create_profile("user-employer", "Emma Employer", "employer", city="Pune")
    return _identity_for(profile)


@pytest.fixture
def other_employer(profiles):
    profile = profiles.create_profile("user-employer-2", "Oscar Owner", "employer")
    return _identity_for(profile)


@pytest.fixture
def worker(profiles):
    """Identity of a signed-up worker."""
    profile = profiles.create_profile("user-worker-1", "Wendy Worker", "worker")
    return _identity_for(profile)


@pytest.fixture
def second_worker(profiles):
    profile = profiles.create_profile("user-worker-2", "Walt Worker", "worker")
    return _identity_for(profile)


def _future_start(days: int = 2) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


def _job_fields(**overrides: Any) -> Dict[str, Any]:
    fields = {
        "title": "Shelf stacking",
        "description": "Restock shelves during the evening shift",
        "category": "retail",
        "hourly_rate": 150,
        "duration_hours": 3,
        "location_address": "12 Market Road",
        "city": "Pune",
        "start_time": _future_start().isoformat(),
    }
    fields.update(overrides)
    return fields


def _make_query(data: Optional[List[Dict[str, Any]]] = None) -> MagicMock:
    """Mock a PostgREST query builder.

    Every builder method returns the same mock so chains of any length work;
    ``execute()`` returns an object whose ``data`` is ``data``.
    """
    query = MagicMock()
    for method in ("select", "insert", "update", "eq", "in_", "or_", "order", "limit", "offset"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data if data is not None else [])
    return query


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client whose ``table()`` returns a chainable query."""
    client = MagicMock()
    client.query = _make_query()
    client.table.return_value = client.query
    return client


def _job_row(**overrides: Any) -> Dict[str, Any]:
    now = datetime.now(timezone.utc).isoformat()
    row = {
        "id": "job-1",
        "employer_id": "emp-1",
        "worker_id": None,
        "title": "Shelf stacking",
        "description": "Restock shelves",
        "category": "retail",
        "hourly_rate": 150,
        "duration_hours": 3,
        "location_address": "12 Market Road",
        "location_lat": None,
        "location_lng": None,
        "city": "Pune",
        "start_time": now,
        "status": "open",
        "created_at": now,
        "updated_at": now,
    }
    row.update(overrides)
    return row


@pytest.fixture
def future_start():
    """Factory for a start time ``days`` from now."""
    return _future_start


@pytest.fixture
def job_fields():
    """Factory for a valid job form payload."""
    return _job_fields


@pytest.fixture
def job_row():
    """Factory for a jobs table row as Supabase returns it."""
    return _job_row


@pytest.fixture
def make_query():
    """Factory for a chainable PostgREST query mock."""
    return _make_query


@pytest.fixture
def posted_job(service, employer, job_fields):
    """An open job posted by ``employer``."""
    return service.create_job(employer, job_fields())
