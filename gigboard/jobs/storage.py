"""
Jobs storage layer.

Provides persistence for jobs using a Supabase backend, plus an in-memory
backend for tests and local development. Both honour the same contract:
``update_job_if`` is a conditional update evaluated atomically by the store
and returns None when no row matched.
"""

import logging
import threading
import uuid
from typing import Any, Dict, Iterable, List, Optional, Protocol

import httpx
from postgrest.exceptions import APIError

from gigboard.errors import StoreUnavailableError
from gigboard.jobs.models import Job
from gigboard.profiles.models import ProfileSummary
from gigboard.types import JobStatus, format_datetime, utc_now

logger = logging.getLogger(__name__)

JOBS_TABLE = "jobs"

SUMMARY_FIELDS = "full_name, rating, is_verified"
JOIN_SELECTS = {
    "employer": f"employer:employer_id ({SUMMARY_FIELDS})",
    "worker": f"worker:worker_id ({SUMMARY_FIELDS})",
}

# Characters with meaning inside a PostgREST or=() filter
_FILTER_UNSAFE = str.maketrans("", "", ",()*%\\")


class JobStorage(Protocol):
    """Protocol for job persistence backends."""

    def insert_job(self, data: Dict[str, Any]) -> Job:
        """Insert a job row. The store assigns id and timestamps."""
        ...

    def get_job(self, job_id: str) -> Optional[Job]:
        """Get a job by ID."""
        ...

    def list_jobs(
        self,
        statuses: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
        search_text: Optional[str] = None,
        employer_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        joins: Iterable[str] = (),
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        """List jobs newest first, optionally embedding profile summaries.

        ``offset`` skips that many matching rows, for paging.
        """
        ...

    def update_job_if(
        self,
        job_id: str,
        updates: Dict[str, Any],
        expected_status: str,
        employer_id: Optional[str] = None,
    ) -> Optional[Job]:
        """Apply ``updates`` only if the row still has ``expected_status``
        (and ``employer_id``, when given). Returns the updated job, or None
        if zero rows matched."""
        ...


class InMemoryJobStorage:
    """In-memory job storage for testing and local development.

    Args:
        profiles: Optional profile storage used to resolve joined summaries
    """

    def __init__(self, profiles: Any = None):
        self._jobs: Dict[str, Dict[str, Any]] = {}
        self._profiles = profiles
        self._lock = threading.Lock()
        self._seq = 0

    def insert_job(self, data: Dict[str, Any]) -> Job:
        now = utc_now()
        row = dict(data)
        row["id"] = str(uuid.uuid4())
        row["created_at"] = format_datetime(now)
        row["updated_at"] = format_datetime(now)
        # Validate before storing so a bad row never lands
        job = Job.from_dict(row)
        with self._lock:
            self._seq += 1
            row["_seq"] = self._seq
            self._jobs[job.id] = row
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        row = self._jobs.get(job_id)
        return Job.from_dict(row) if row else None

    def list_jobs(
        self,
        statuses: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
        search_text: Optional[str] = None,
        employer_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        joins: Iterable[str] = (),
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        with self._lock:
            rows = [dict(r) for r in self._jobs.values()]

        if statuses is not None:
            wanted = set(statuses)
            rows = [r for r in rows if r["status"] in wanted]
        if category is not None:
            rows = [r for r in rows if r["category"] == category]
        if employer_id is not None:
            rows = [r for r in rows if r["employer_id"] == employer_id]
        if worker_id is not None:
            rows = [r for r in rows if r.get("worker_id") == worker_id]
        if search_text:
            needle = search_text.lower()
            rows = [
                r
                for r in rows
                if any(needle in str(r.get(f) or "").lower() for f in ("title", "description", "city"))
            ]

        # Newest first; insertion order breaks ties within the same instant
        rows.sort(key=lambda r: (r["created_at"], r["_seq"]), reverse=True)

        jobs = []
        for row in rows[offset : offset + limit]:
            for name in joins:
                row[name] = self._summary(row.get(f"{name}_id"))
            jobs.append(Job.from_dict(row))
        return jobs

    def update_job_if(
        self,
        job_id: str,
        updates: Dict[str, Any],
        expected_status: str,
        employer_id: Optional[str] = None,
    ) -> Optional[Job]:
        with self._lock:
            row = self._jobs.get(job_id)
            if row is None or row["status"] != expected_status:
                return None
            if employer_id is not None and row["employer_id"] != employer_id:
                return None
            candidate = {**row, **updates, "updated_at": format_datetime(utc_now())}
            job = Job.from_dict(candidate)
            self._jobs[job_id] = candidate
        return job

    def _summary(self, profile_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if profile_id is None or self._profiles is None:
            return None
        profile = self._profiles.get_profile(profile_id)
        if profile is None:
            return None
        summary: ProfileSummary = profile.summary()
        return summary.to_dict()


class SupabaseJobStorage:
    """Job storage backed by a Supabase ``jobs`` table.

    Args:
        client: A ``supabase.Client``
        table: Table name override
    """

    def __init__(self, client: Any, table: str = JOBS_TABLE):
        self._client = client
        self._table = table

    def _execute(self, query: Any, operation: str) -> Any:
        try:
            return query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(f"Store call failed | op={operation} | table={self._table} | error={e}")
            raise StoreUnavailableError(f"Failed to {operation}", cause=e) from e

    def insert_job(self, data: Dict[str, Any]) -> Job:
        result = self._execute(self._client.table(self._table).insert(data), "insert job")
        if not result.data:
            raise StoreUnavailableError("Insert returned no row")
        return Job.from_dict(result.data[0])

    def get_job(self, job_id: str) -> Optional[Job]:
        query = self._client.table(self._table).select("*").eq("id", job_id).limit(1)
        result = self._execute(query, "get job")
        return Job.from_dict(result.data[0]) if result.data else None

    def list_jobs(
        self,
        statuses: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
        search_text: Optional[str] = None,
        employer_id: Optional[str] = None,
        worker_id: Optional[str] = None,
        joins: Iterable[str] = (),
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        columns = ", ".join(["*"] + [JOIN_SELECTS[name] for name in joins])
        query = self._client.table(self._table).select(columns)

        if statuses is not None:
            statuses = list(statuses)
            if len(statuses) == 1:
                query = query.eq("status", statuses[0])
            else:
                query = query.in_("status", statuses)
        if category is not None:
            query = query.eq("category", category)
        if employer_id is not None:
            query = query.eq("employer_id", employer_id)
        if worker_id is not None:
            query = query.eq("worker_id", worker_id)
        if search_text:
            term = search_text.translate(_FILTER_UNSAFE).strip()
            if term:
                pattern = f"%{term}%"
                query = query.or_(
                    f"title.ilike.{pattern},description.ilike.{pattern},city.ilike.{pattern}"
                )

        query = query.order("created_at", desc=True).limit(limit)
        if offset:
            query = query.offset(offset)
        result = self._execute(query, "list jobs")
        return [Job.from_dict(row) for row in result.data or []]

    def update_job_if(
        self,
        job_id: str,
        updates: Dict[str, Any],
        expected_status: str,
        employer_id: Optional[str] = None,
    ) -> Optional[Job]:
        data = {**updates, "updated_at": format_datetime(utc_now())}
        # Atomic update: only matches if status is still what the caller saw
        query = (
            self._client.table(self._table)
            .update(data)
            .eq("id", job_id)
            .eq("status", expected_status)
        )
        if employer_id is not None:
            query = query.eq("employer_id", employer_id)
        result = self._execute(query, "update job")
        if not result.data:
            return None
        return Job.from_dict(result.data[0])


def open_job_row(employer_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """Row for a new job. Status and worker are forced regardless of input."""
    return {
        **fields,
        "employer_id": employer_id,
        "status": JobStatus.OPEN.value,
        "worker_id": None,
    }
