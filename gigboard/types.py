"""
Shared vocabulary for gigboard.

The closed enumerations mirror the Postgres enum types of the hosted
database (``user_role``, ``job_category``, ``job_status``) and must not be
extended without a migration.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

# === Shared Utility Functions ===


def utc_now() -> datetime:
    """Get current timestamp in UTC."""
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO datetime string (or pass a datetime through).

    Returns None for empty values. Raises ValueError for malformed strings.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid ISO datetime value: {value!r}")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


# === Enums ===


class UserRole(str, Enum):
    """Role chosen at signup. Never changes afterwards."""

    WORKER = "worker"
    EMPLOYER = "employer"


class JobCategory(str, Enum):
    """Kind of work a job offers."""

    RETAIL = "retail"
    RESTAURANT = "restaurant"
    WAREHOUSE = "warehouse"
    EVENTS = "events"
    HOUSEHOLD = "household"
    CONSTRUCTION = "construction"
    DELIVERY = "delivery"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


class JobStatus(str, Enum):
    """Job lifecycle status."""

    OPEN = "open"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]


CATEGORY_LABELS = {
    JobCategory.RETAIL: "Retail",
    JobCategory.RESTAURANT: "Restaurant",
    JobCategory.WAREHOUSE: "Warehouse",
    JobCategory.EVENTS: "Events",
    JobCategory.HOUSEHOLD: "Household",
    JobCategory.CONSTRUCTION: "Construction",
    JobCategory.DELIVERY: "Delivery",
    JobCategory.OTHER: "Other",
}

# Display labels. The enum value is the source of truth for logic.
STATUS_LABELS = {
    JobStatus.OPEN: "Available",
    JobStatus.ACCEPTED: "Accepted",
    JobStatus.IN_PROGRESS: "In progress",
    JobStatus.COMPLETED: "Completed",
    JobStatus.CANCELLED: "Cancelled",
}

VALID_ROLE_VALUES = frozenset(r.value for r in UserRole)
VALID_CATEGORY_VALUES = frozenset(c.value for c in JobCategory)
VALID_STATUS_VALUES = frozenset(s.value for s in JobStatus)

TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.CANCELLED})

# Tabs of the "my jobs" view.
STATUS_GROUPS = {
    "active": frozenset({JobStatus.OPEN, JobStatus.ACCEPTED, JobStatus.IN_PROGRESS}),
    "completed": frozenset({JobStatus.COMPLETED}),
    "cancelled": frozenset({JobStatus.CANCELLED}),
}
