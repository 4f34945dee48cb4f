"""
Profiles storage layer.

Supabase-backed persistence for the ``profiles`` table and an in-memory
equivalent for tests and local development.
"""

import logging
import threading
import uuid
from typing import Any, Dict, Optional, Protocol

import httpx
from postgrest.exceptions import APIError

from gigboard.errors import StoreUnavailableError
from gigboard.profiles.models import Profile
from gigboard.types import format_datetime, utc_now

logger = logging.getLogger(__name__)

PROFILES_TABLE = "profiles"


class ProfileStorage(Protocol):
    """Protocol for profile persistence backends."""

    def insert_profile(self, data: Dict[str, Any]) -> Profile:
        """Insert a profile row. The store assigns id and timestamps."""
        ...

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        """Get a profile by ID."""
        ...

    def get_profile_for_user(self, user_id: str) -> Optional[Profile]:
        """Get the profile owned by an auth user."""
        ...

    def update_profile(self, profile_id: str, updates: Dict[str, Any]) -> Optional[Profile]:
        """Update a profile. Returns None if it does not exist."""
        ...


class InMemoryProfileStorage:
    """In-memory profile storage for testing and local development."""

    def __init__(self):
        self._profiles: Dict[str, Profile] = {}
        self._lock = threading.Lock()

    def insert_profile(self, data: Dict[str, Any]) -> Profile:
        now = utc_now()
        row = {
            **data,
            "id": data.get("id") or str(uuid.uuid4()),
            "created_at": format_datetime(now),
            "updated_at": format_datetime(now),
        }
        profile = Profile.from_dict(row)
        with self._lock:
            self._profiles[profile.id] = profile
        return profile

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        return self._profiles.get(profile_id)

    def get_profile_for_user(self, user_id: str) -> Optional[Profile]:
        for profile in self._profiles.values():
            if profile.user_id == user_id:
                return profile
        return None

    def update_profile(self, profile_id: str, updates: Dict[str, Any]) -> Optional[Profile]:
        with self._lock:
            current = self._profiles.get(profile_id)
            if current is None:
                return None
            row = {**current.to_dict(), **updates, "updated_at": format_datetime(utc_now())}
            profile = Profile.from_dict(row)
            self._profiles[profile_id] = profile
        return profile


class SupabaseProfileStorage:
    """Profile storage backed by a Supabase ``profiles`` table."""

    def __init__(self, client: Any, table: str = PROFILES_TABLE):
        self._client = client
        self._table = table

    def _execute(self, query: Any, operation: str) -> Any:
        try:
            return query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Store call failed | op={operation} | table={self._table} | error={e}")
            raise StoreUnavailableError(f"Failed to {operation}", cause=e) from e

    def insert_profile(self, data: Dict[str, Any]) -> Profile:
        result = self._execute(self._client.table(self._table).insert(data), "insert profile")
        if not result.data:
            raise StoreUnavailableError("Insert returned no row")
        return Profile.from_dict(result.data[0])

    def get_profile(self, profile_id: str) -> Optional[Profile]:
        query = self._client.table(self._table).select("*").eq("id", profile_id).limit(1)
        result = self._execute(query, "get profile")
        return Profile.from_dict(result.data[0]) if result.data else None

    def get_profile_for_user(self, user_id: str) -> Optional[Profile]:
        query = self._client.table(self._table).select("*").eq("user_id", user_id).limit(1)
        result = self._execute(query, "get profile")
        return Profile.from_dict(result.data[0]) if result.data else None

    def update_profile(self, profile_id: str, updates: Dict[str, Any]) -> Optional[Profile]:
        data = {**updates, "updated_at": format_datetime(utc_now())}
        query = self._client.table(self._table).update(data).eq("id", profile_id)
        result = self._execute(query, "update profile")
        return Profile.from_dict(result.data[0]) if result.data else None
