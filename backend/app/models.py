"""Pydantic models for API requests and responses."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from gigboard.jobs.models import EmployerStats, Job
from gigboard.navigation import NavItem
from gigboard.profiles.models import Profile, ProfileSummary
from gigboard.ratings.models import Rating
from gigboard.types import JobCategory, JobStatus

JobStatusValue = Literal["open", "accepted", "in_progress", "completed", "cancelled"]
JobCategoryValue = Literal[
    "retail", "restaurant", "warehouse", "events", "household", "construction", "delivery", "other"
]
UserRoleValue = Literal["worker", "employer"]
StatusGroup = Literal["active", "completed", "cancelled"]


# =============================================================================
# Profile Models
# =============================================================================


class ProfileSummaryResponse(BaseModel):
    """Counterpart shown on a job card."""

    full_name: str
    rating: float | None = None
    is_verified: bool = False

    @classmethod
    def from_summary(cls, summary: ProfileSummary | None) -> "ProfileSummaryResponse | None":
        if summary is None:
            return None
        return cls(
            full_name=summary.full_name, rating=summary.rating, is_verified=summary.is_verified
        )


class ProfileCreate(BaseModel):
    """Request to create the caller's profile after signup."""

    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRoleValue
    city: str | None = None
    phone: str | None = None


class ProfileUpdateRequest(BaseModel):
    """Self-service profile edit.

    Unknown fields are kept so the service can reject them by name.
    """

    model_config = ConfigDict(extra="allow")

    full_name: str | None = None
    phone: str | None = None
    city: str | None = None
    bio: str | None = None


class ProfileResponse(BaseModel):
    id: str
    user_id: str
    full_name: str
    role: UserRoleValue
    rating: float
    total_jobs: int
    is_verified: bool
    city: str | None = None
    phone: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            user_id=profile.user_id,
            full_name=profile.full_name,
            role=profile.role,
            rating=profile.rating,
            total_jobs=profile.total_jobs,
            is_verified=profile.is_verified,
            city=profile.city,
            phone=profile.phone,
            bio=profile.bio,
            avatar_url=profile.avatar_url,
            created_at=profile.created_at,
        )


# =============================================================================
# Job Models
# =============================================================================


class JobCreate(BaseModel):
    """Request to post a job.

    Field rules (required, positive, known category) are enforced by the job
    service so every problem is reported together.
    """

    title: str | None = None
    description: str | None = None
    category: str | None = None
    hourly_rate: float | None = None
    duration_hours: float | None = None
    location_address: str | None = None
    city: str | None = None
    start_time: datetime | None = None
    start_date: str | None = None
    start_clock: str | None = None
    location_lat: float | None = None
    location_lng: float | None = None


class JobResponse(BaseModel):
    """Job details response."""

    id: str
    employer_id: str
    worker_id: str | None = None
    title: str
    description: str
    category: JobCategoryValue
    category_label: str
    hourly_rate: float
    duration_hours: int
    total_pay: float
    location_address: str
    location_lat: float | None = None
    location_lng: float | None = None
    city: str
    start_time: datetime
    status: JobStatusValue
    status_label: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    employer: ProfileSummaryResponse | None = None
    worker: ProfileSummaryResponse | None = None
    next_actions: list[JobStatusValue] = Field(default_factory=list)

    @classmethod
    def from_job(cls, job: Job, next_actions: list[JobStatus] | None = None) -> "JobResponse":
        return cls(
            id=job.id,
            employer_id=job.employer_id,
            worker_id=job.worker_id,
            title=job.title,
            description=job.description,
            category=job.category,
            category_label=JobCategory(job.category).label,
            hourly_rate=job.hourly_rate,
            duration_hours=job.duration_hours,
            total_pay=job.total_pay,
            location_address=job.location_address,
            location_lat=job.location_lat,
            location_lng=job.location_lng,
            city=job.city,
            start_time=job.start_time,
            status=job.status,
            status_label=job.status_label,
            created_at=job.created_at,
            updated_at=job.updated_at,
            employer=ProfileSummaryResponse.from_summary(job.employer),
            worker=ProfileSummaryResponse.from_summary(job.worker),
            next_actions=[s.value for s in next_actions or []],
        )


class JobListResponse(BaseModel):
    """List of jobs, newest first."""

    jobs: list[JobResponse]
    total: int


class EmployerStatsResponse(BaseModel):
    total_jobs: int
    completed_jobs: int
    total_spend: float

    @classmethod
    def from_stats(cls, stats: EmployerStats) -> "EmployerStatsResponse":
        return cls(
            total_jobs=stats.total_jobs,
            completed_jobs=stats.completed_jobs,
            total_spend=stats.total_spend,
        )


# =============================================================================
# Rating Models
# =============================================================================


class RatingCreate(BaseModel):
    """Request to rate the other party of a completed job."""

    rating: int
    review: str | None = None


class RatingResponse(BaseModel):
    id: str
    job_id: str
    rater_id: str
    rated_id: str
    rating: int
    review: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_rating(cls, rating: Rating) -> "RatingResponse":
        return cls(**rating.to_dict())


class RatingListResponse(BaseModel):
    ratings: list[RatingResponse]
    total: int


# =============================================================================
# Navigation / Errors
# =============================================================================


class NavItemResponse(BaseModel):
    href: str
    label: str

    @classmethod
    def from_item(cls, item: NavItem) -> "NavItemResponse":
        return cls(href=item.href, label=item.label)


class NavigationResponse(BaseModel):
    role: UserRoleValue
    items: list[NavItemResponse]


class ErrorResponse(BaseModel):
    """Body of every error raised by the service layer."""

    code: str
    detail: str
    errors: dict[str, Any] | None = None
