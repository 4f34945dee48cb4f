"""
Ratings storage layer.

Supabase-backed persistence for the ``ratings`` table and an in-memory
equivalent. Both reject a second rating of the same job by the same rater.
"""

import logging
import threading
import uuid
from typing import Any, Dict, List, Optional, Protocol

import httpx
from postgrest.exceptions import APIError

from gigboard.errors import ConflictError, StoreUnavailableError
from gigboard.ratings.models import Rating
from gigboard.types import format_datetime, utc_now

logger = logging.getLogger(__name__)

RATINGS_TABLE = "ratings"

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class RatingStorage(Protocol):
    """Protocol for rating persistence backends."""

    def insert_rating(self, data: Dict[str, Any]) -> Rating:
        """Insert a rating. Raises ConflictError on a duplicate (job, rater)."""
        ...

    def find_rating(self, job_id: str, rater_id: str) -> Optional[Rating]:
        """The rating a rater left on a job, if any."""
        ...

    def list_ratings(self, rated_id: str, limit: int = 100, offset: int = 0) -> List[Rating]:
        """Ratings received by a profile, newest first."""
        ...


class InMemoryRatingStorage:
    """In-memory rating storage for testing and local development."""

    def __init__(self):
        self._ratings: List[Rating] = []
        self._lock = threading.Lock()

    def insert_rating(self, data: Dict[str, Any]) -> Rating:
        rating = Rating.from_dict(
            {**data, "id": str(uuid.uuid4()), "created_at": format_datetime(utc_now())}
        )
        with self._lock:
            if any(
                r.job_id == rating.job_id and r.rater_id == rating.rater_id for r in self._ratings
            ):
                raise ConflictError("You have already rated this job")
            self._ratings.append(rating)
        return rating

    def find_rating(self, job_id: str, rater_id: str) -> Optional[Rating]:
        for rating in self._ratings:
            if rating.job_id == job_id and rating.rater_id == rater_id:
                return rating
        return None

    def list_ratings(self, rated_id: str, limit: int = 100, offset: int = 0) -> List[Rating]:
        received = [r for r in self._ratings if r.rated_id == rated_id]
        return list(reversed(received))[offset : offset + limit]


class SupabaseRatingStorage:
    """Rating storage backed by a Supabase ``ratings`` table."""

    def __init__(self, client: Any, table: str = RATINGS_TABLE):
        self._client = client
        self._table = table

    def _execute(self, query: Any, operation: str) -> Any:
        try:
            return query.execute()
        except APIError as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise ConflictError("You have already rated this job") from e
            logger.error(f"Store call failed | op={operation} | table={self._table} | error={e}")
            raise StoreUnavailableError(f"Failed to {operation}", cause=e) from e
        except httpx.HTTPError as e:
            logger.error(f"Store call failed | op={operation} | table={self._table} | error={e}")
            raise StoreUnavailableError(f"Failed to {operation}", cause=e) from e

    def insert_rating(self, data: Dict[str, Any]) -> Rating:
        result = self._execute(self._client.table(self._table).insert(data), "insert rating")
        if not result.data:
            raise StoreUnavailableError("Insert returned no row")
        return Rating.from_dict(result.data[0])

    def find_rating(self, job_id: str, rater_id: str) -> Optional[Rating]:
        query = (
            self._client.table(self._table)
            .select("*")
            .eq("job_id", job_id)
            .eq("rater_id", rater_id)
            .limit(1)
        )
        result = self._execute(query, "find rating")
        return Rating.from_dict(result.data[0]) if result.data else None

    def list_ratings(self, rated_id: str, limit: int = 100, offset: int = 0) -> List[Rating]:
        query = (
            self._client.table(self._table)
            .select("*")
            .eq("rated_id", rated_id)
            .order("created_at", desc=True)
            .limit(limit)
        )
        if offset:
            query = query.offset(offset)
        result = self._execute(query, "list ratings")
        return [Rating.from_dict(row) for row in result.data or []]
