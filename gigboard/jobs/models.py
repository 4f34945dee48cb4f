"""Job data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from gigboard.profiles.models import ProfileSummary
from gigboard.types import (
    TERMINAL_STATUSES,
    VALID_CATEGORY_VALUES,
    VALID_STATUS_VALUES,
    JobCategory,
    JobStatus,
    format_datetime,
    parse_datetime,
)


@dataclass
class Job:
    """A work order posted by an employer.

    Attributes:
        id: Job ID
        employer_id: Profile ID of the employer who posted the job
        title: Short title
        description: Full description of the work
        category: One of the job_category values
        hourly_rate: Pay per hour (positive)
        duration_hours: Length of the shift in whole hours (positive)
        location_address: Free-text street address
        city: City the job is in
        start_time: Scheduled start
        worker_id: Profile ID of the assigned worker (None while open)
        status: Lifecycle status
        location_lat: Optional latitude
        location_lng: Optional longitude
        employer: Joined employer summary (read-only, listing queries only)
        worker: Joined worker summary (read-only, listing queries only)
    """

    id: str
    employer_id: str
    title: str
    description: str
    category: str
    hourly_rate: float
    duration_hours: int
    location_address: str
    city: str
    start_time: datetime
    worker_id: Optional[str] = None
    status: str = "open"
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employer: Optional[ProfileSummary] = None
    worker: Optional[ProfileSummary] = None

    def __post_init__(self):
        if isinstance(self.status, JobStatus):
            self.status = self.status.value
        if isinstance(self.category, JobCategory):
            self.category = self.category.value
        if self.status not in VALID_STATUS_VALUES:
            raise ValueError(f"Invalid status: {self.status}")
        if self.category not in VALID_CATEGORY_VALUES:
            raise ValueError(f"Invalid category: {self.category}")
        if self.hourly_rate <= 0:
            raise ValueError("Hourly rate must be positive")
        if self.duration_hours <= 0:
            raise ValueError("Duration must be positive")
        # status == open <=> no worker assigned
        if self.status == JobStatus.OPEN.value and self.worker_id is not None:
            raise ValueError("Open job cannot have a worker assigned")
        if self.status != JobStatus.OPEN.value and self.worker_id is None and (
            self.status != JobStatus.CANCELLED.value
        ):
            raise ValueError(f"Job in status {self.status} must have a worker assigned")

    @property
    def job_status(self) -> JobStatus:
        return JobStatus(self.status)

    @property
    def job_category(self) -> JobCategory:
        return JobCategory(self.category)

    @property
    def total_pay(self) -> float:
        """Pay for the whole shift. Derived, never stored."""
        return self.hourly_rate * self.duration_hours

    @property
    def status_label(self) -> str:
        return self.job_status.label

    @property
    def is_open(self) -> bool:
        return self.status == JobStatus.OPEN.value

    @property
    def is_terminal(self) -> bool:
        return self.job_status in TERMINAL_STATUSES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a database row (joined summaries excluded)."""
        return {
            "id": self.id,
            "employer_id": self.employer_id,
            "worker_id": self.worker_id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "hourly_rate": self.hourly_rate,
            "duration_hours": self.duration_hours,
            "location_address": self.location_address,
            "location_lat": self.location_lat,
            "location_lng": self.location_lng,
            "city": self.city,
            "start_time": format_datetime(self.start_time),
            "status": self.status,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        """Create from a database row, including embedded profile joins."""
        lat = data.get("location_lat")
        lng = data.get("location_lng")
        return cls(
            id=data["id"],
            employer_id=data["employer_id"],
            worker_id=data.get("worker_id"),
            title=data["title"],
            description=data["description"],
            category=data["category"],
            hourly_rate=float(data["hourly_rate"]),
            duration_hours=int(data["duration_hours"]),
            location_address=data["location_address"],
            location_lat=float(lat) if lat is not None else None,
            location_lng=float(lng) if lng is not None else None,
            city=data["city"],
            start_time=parse_datetime(data["start_time"]),
            status=data.get("status", "open"),
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
            employer=ProfileSummary.from_dict(data.get("employer")),
            worker=ProfileSummary.from_dict(data.get("worker")),
        )


@dataclass
class JobDraft:
    """Unvalidated input for a new job, as submitted by an employer.

    ``start_time`` may be a datetime or ISO string; alternatively the form's
    separate ``start_date`` (YYYY-MM-DD) and ``start_clock`` (HH:MM) fields
    are combined. Any ``status`` or ``worker_id`` the caller sends is ignored.
    """

    title: Any = None
    description: Any = None
    category: Any = None
    hourly_rate: Any = None
    duration_hours: Any = None
    location_address: Any = None
    city: Any = None
    start_time: Any = None
    start_date: Any = None
    start_clock: Any = None
    location_lat: Any = None
    location_lng: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JobDraft":
        fields = cls.__dataclass_fields__
        return cls(**{k: v for k, v in data.items() if k in fields})


@dataclass(frozen=True)
class JobFilter:
    """Filter for the open-jobs listing."""

    category: Optional[str] = None
    search_text: Optional[str] = None
    limit: Optional[int] = None

    def __post_init__(self):
        category = self.category
        if isinstance(category, JobCategory):
            object.__setattr__(self, "category", category.value)
        elif category == "all" or category == "":
            # "all" is how the listing UI spells "no filter"
            object.__setattr__(self, "category", None)
        elif category is not None and (
            not isinstance(category, str) or category not in VALID_CATEGORY_VALUES
        ):
            raise ValueError(f"Invalid category: {category}")
        if self.search_text is not None:
            text = self.search_text.strip()
            object.__setattr__(self, "search_text", text or None)

    def matches(self, job: Job) -> bool:
        """Apply the filter to a job (used by in-memory backends)."""
        if self.category and job.category != self.category:
            return False
        if self.search_text:
            needle = self.search_text.lower()
            haystacks = (job.title, job.description, job.city)
            if not any(needle in h.lower() for h in haystacks):
                return False
        return True


@dataclass(frozen=True)
class EmployerStats:
    """Dashboard summary of an employer's jobs."""

    total_jobs: int
    completed_jobs: int
    total_spend: float
