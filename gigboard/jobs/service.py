"""Job service: the repository of marketplace jobs.

Translates domain operations (list, accept, advance, cancel, create) into
storage calls. Preconditions and input validation run before any write; the
lifecycle policy decides every status change; the store's conditional update
settles races.
"""

import logging
import math
import threading
from datetime import datetime, time, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from gigboard.config import GigboardConfig
from gigboard.errors import (
    ConflictError,
    ForbiddenError,
    IllegalTransitionError,
    NotFoundError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)
from gigboard.identity import Identity
from gigboard.jobs import policy
from gigboard.jobs.models import EmployerStats, Job, JobDraft, JobFilter
from gigboard.jobs.storage import JobStorage, open_job_row
from gigboard.types import (
    STATUS_GROUPS,
    VALID_CATEGORY_VALUES,
    JobStatus,
    parse_datetime,
)

logger = logging.getLogger(__name__)


class JobListing:
    """Lazy, finite, restartable sequence of jobs.

    Nothing is fetched until iteration. Each iteration re-executes the query,
    so iterating again after a mutation sees fresh rows. ``is_stale`` reports
    whether the service has mutated anything since this listing was made.
    """

    def __init__(self, fetch: Callable[[], List[Job]], service: "JobService"):
        self._fetch = fetch
        self._service = service
        self._revision = service.revision

    def __iter__(self) -> Iterator[Job]:
        self._revision = self._service.revision
        return iter(self._fetch())

    def to_list(self) -> List[Job]:
        return list(self)

    @property
    def is_stale(self) -> bool:
        return self._service.revision != self._revision


class JobService:
    """Job operations for workers and employers.

    Args:
        storage: Job persistence backend
        config: Service configuration
    """

    def __init__(self, storage: JobStorage, config: Optional[GigboardConfig] = None):
        self.storage = storage
        self.config = config or GigboardConfig()
        self._revision = 0
        self._revision_lock = threading.Lock()

    # === Invalidation ===

    @property
    def revision(self) -> int:
        """Incremented by every successful mutation."""
        return self._revision

    def _mutated(self) -> None:
        with self._revision_lock:
            self._revision += 1

    # === Reads ===

    def get_job(self, job_id: str) -> Job:
        """Get a job by ID.

        Raises:
            NotFoundError: If the job does not exist
        """
        job = self.storage.get_job(job_id)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        return job

    def list_open_jobs(self, job_filter: Optional[JobFilter] = None) -> JobListing:
        """Open jobs, newest first, with the employer's name, rating and
        verification joined."""
        job_filter = job_filter or JobFilter()
        limit = min(job_filter.limit or self.config.list_limit, self.config.list_limit)

        def fetch() -> List[Job]:
            return self.storage.list_jobs(
                statuses=[JobStatus.OPEN.value],
                category=job_filter.category,
                search_text=job_filter.search_text,
                joins=("employer",),
                limit=limit,
            )

        return JobListing(fetch, self)

    def list_jobs_for_user(
        self, identity: Identity, status_group: Optional[str] = None
    ) -> JobListing:
        """Jobs the caller is party to, newest first.

        Workers see jobs assigned to them with the employer joined; employers
        see jobs they posted with the worker joined.

        Args:
            identity: Verified caller
            status_group: Optional "active", "completed" or "cancelled"
        """
        identity = _require(identity)
        statuses = None
        if status_group is not None:
            if status_group not in STATUS_GROUPS:
                raise ValidationError({"status_group": f"Unknown status group: {status_group}"})
            statuses = sorted(s.value for s in STATUS_GROUPS[status_group])

        if identity.is_worker:
            scope = {"worker_id": identity.profile_id, "joins": ("employer",)}
        else:
            scope = {"employer_id": identity.profile_id, "joins": ("worker",)}

        def fetch() -> List[Job]:
            return self.storage.list_jobs(statuses=statuses, limit=self.config.list_limit, **scope)

        return JobListing(fetch, self)

    def employer_stats(self, identity: Identity) -> EmployerStats:
        """Totals for the employer dashboard."""
        identity = _require(identity)
        if not identity.is_employer:
            raise UnauthorizedError("Only employers have posting stats")
        jobs = self._all_jobs(employer_id=identity.profile_id)
        completed = [j for j in jobs if j.status == JobStatus.COMPLETED.value]
        return EmployerStats(
            total_jobs=len(jobs),
            completed_jobs=len(completed),
            total_spend=sum(j.total_pay for j in completed),
        )

    def next_actions(self, job: Job, identity: Identity) -> List[JobStatus]:
        """Statuses the caller could move this job to right now."""
        identity = _require(identity)
        return policy.next_actions(
            job.status,
            identity.role,
            is_actor_employer_of_job=job.employer_id == identity.profile_id,
            is_actor_assigned_worker=job.worker_id == identity.profile_id,
        )

    # === Mutations ===

    def create_job(self, identity: Identity, fields: Union[JobDraft, Dict[str, Any]]) -> Job:
        """Post a new job.

        All fields are validated before the store is touched. The job always
        starts ``open`` with no worker, whatever the caller sent.

        Raises:
            UnauthorizedError: If the caller is not an employer
            ValidationError: If any field is missing or malformed
        """
        identity = _require(identity)
        if not identity.is_employer:
            raise UnauthorizedError("Only employers can post jobs")

        draft = fields if isinstance(fields, JobDraft) else JobDraft.from_dict(fields)
        row = open_job_row(identity.profile_id, self._validate_draft(draft))

        job = self.storage.insert_job(row)
        self._mutated()
        logger.info(
            f"Job created | id={job.id} | employer={identity.profile_id} | title={job.title[:50]}"
        )
        return job

    def accept_job(self, job_id: str, identity: Identity) -> Job:
        """Claim an open job for the calling worker.

        The update is conditioned on ``status = 'open'`` so that when two
        workers race, exactly one wins and the other gets ConflictError.

        Raises:
            UnauthorizedError: If the caller is not a worker
            NotFoundError: If the job does not exist
            ConflictError: If the job is no longer open
        """
        identity = _require(identity)
        decision = policy.validate(
            JobStatus.OPEN,
            JobStatus.ACCEPTED,
            identity.role,
            is_actor_employer_of_job=False,
        )
        if not decision:
            raise UnauthorizedError(decision.reason)

        updated = self.storage.update_job_if(
            job_id,
            {"status": JobStatus.ACCEPTED.value, "worker_id": identity.profile_id},
            expected_status=JobStatus.OPEN.value,
        )
        if updated is None:
            raise self._zero_rows(job_id, JobStatus.OPEN.value, "Job is no longer available")

        self._mutated()
        logger.info(f"Job accepted | id={job_id} | worker={identity.profile_id}")
        return updated

    def advance_status(
        self, job_id: str, identity: Identity, target: Union[JobStatus, str]
    ) -> Job:
        """Move a job along its lifecycle.

        Every target, ``accepted`` included, is checked against the job's
        current status first. An allowed accept is then handed to accept_job.

        Raises:
            NotFoundError: If the job does not exist
            ForbiddenError: If the caller does not own the job
            IllegalTransitionError: If the policy rejects the change
            ConflictError: If the job changed status concurrently
        """
        identity = _require(identity)
        try:
            target_status = JobStatus(target)
        except ValueError:
            raise ValidationError({"status": f"Unknown status: {target}"})

        job = self.get_job(job_id)
        is_owner = identity.is_employer and job.employer_id == identity.profile_id
        decision = policy.validate(
            job.status,
            target_status,
            identity.role,
            is_actor_employer_of_job=is_owner,
            is_actor_assigned_worker=job.worker_id == identity.profile_id,
        )
        if decision.kind == policy.DecisionKind.ILLEGAL_TRANSITION:
            raise IllegalTransitionError(
                decision.reason, from_status=job.status, to_status=target_status.value
            )
        if not decision:
            raise ForbiddenError(decision.reason)

        if target_status == JobStatus.ACCEPTED:
            return self.accept_job(job_id, identity)

        updated = self.storage.update_job_if(
            job_id,
            {"status": target_status.value},
            expected_status=job.status,
            employer_id=identity.profile_id,
        )
        if updated is None:
            raise self._zero_rows(
                job_id, job.status, "Job status was modified by another request"
            )

        self._mutated()
        logger.info(
            f"Job status changed | id={job_id} | {job.status} -> {target_status.value} "
            f"| employer={identity.profile_id}"
        )
        return updated

    def start_job(self, job_id: str, identity: Identity) -> Job:
        return self.advance_status(job_id, identity, JobStatus.IN_PROGRESS)

    def complete_job(self, job_id: str, identity: Identity) -> Job:
        return self.advance_status(job_id, identity, JobStatus.COMPLETED)

    def cancel_job(self, job_id: str, identity: Identity) -> Job:
        """Cancel an open job. Accepted jobs cannot be cancelled."""
        return self.advance_status(job_id, identity, JobStatus.CANCELLED)

    # === Helpers ===

    def _all_jobs(self, **scope: Any) -> List[Job]:
        """Every matching job, fetched a page of ``list_limit`` at a time."""
        page_size = self.config.list_limit
        jobs: List[Job] = []
        while True:
            page = self.storage.list_jobs(limit=page_size, offset=len(jobs), **scope)
            jobs.extend(page)
            if len(page) < page_size:
                return jobs

    def _zero_rows(self, job_id: str, expected_status: str, message: str) -> Exception:
        """Explain why a conditional update matched nothing."""
        current = self.storage.get_job(job_id)
        if current is None:
            return NotFoundError(f"Job {job_id} not found")
        logger.warning(
            f"Race condition detected on job {job_id}: "
            f"expected status '{expected_status}', found '{current.status}'"
        )
        return ConflictError(message)

    def _validate_draft(self, draft: JobDraft) -> Dict[str, Any]:
        errors: Dict[str, str] = {}
        clean: Dict[str, Any] = {}

        title = _text(draft.title)
        if not title:
            errors["title"] = "Job title is required"
        elif len(title) > self.config.max_title_length:
            errors["title"] = f"Title too long (max {self.config.max_title_length} characters)"
        clean["title"] = title

        description = _text(draft.description)
        if not description:
            errors["description"] = "Description is required"
        elif len(description) > self.config.max_description_length:
            errors["description"] = "Description too long"
        clean["description"] = description

        category = draft.category.value if hasattr(draft.category, "value") else draft.category
        if category is None or category == "":
            errors["category"] = "Category is required"
        elif not isinstance(category, str) or category not in VALID_CATEGORY_VALUES:
            errors["category"] = f"Invalid category: {category}"
        clean["category"] = category

        rate = _number(draft.hourly_rate)
        if rate is None or rate <= 0:
            errors["hourly_rate"] = "Valid hourly rate is required"
        clean["hourly_rate"] = rate

        hours = _whole_number(draft.duration_hours)
        if hours is None or hours <= 0:
            errors["duration_hours"] = "Valid duration is required"
        clean["duration_hours"] = hours

        address = _text(draft.location_address)
        if not address:
            errors["location_address"] = "Address is required"
        clean["location_address"] = address

        city = _text(draft.city)
        if not city:
            errors["city"] = "City is required"
        clean["city"] = city

        try:
            start = _start_time(draft)
        except ValueError as e:
            errors["start_time"] = str(e)
            start = None
        clean["start_time"] = start.isoformat() if start else None

        for name in ("location_lat", "location_lng"):
            raw = getattr(draft, name)
            if raw is None or raw == "":
                continue
            value = _number(raw)
            if value is None:
                errors[name] = "Must be a number"
            clean[name] = value

        if errors:
            raise ValidationError(errors)
        return clean


def _require(identity: Optional[Identity]) -> Identity:
    if identity is None:
        raise UnauthenticatedError("Sign in to continue")
    return identity


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _whole_number(value: Any) -> Optional[int]:
    number = _number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _start_time(draft: JobDraft) -> datetime:
    """Resolve the start time from either the combined or split fields."""
    if draft.start_time not in (None, ""):
        start = parse_datetime(draft.start_time)
    elif draft.start_date and draft.start_clock:
        day = datetime.fromisoformat(str(draft.start_date)).date()
        clock = time.fromisoformat(str(draft.start_clock))
        start = datetime.combine(day, clock)
    else:
        raise ValueError("Start date and time are required")
    if start.tzinfo is None:
        start = start.replace(tzinfo=timezone.utc)
    return start
