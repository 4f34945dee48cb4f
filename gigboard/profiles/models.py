"""Profile data models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from gigboard.types import VALID_ROLE_VALUES, UserRole, format_datetime, parse_datetime

# Fields an owner may change through self-service editing.
EDITABLE_PROFILE_FIELDS = ("full_name", "phone", "city", "bio")


@dataclass
class Profile:
    """Identity record of a marketplace user.

    Attributes:
        id: Profile ID (referenced by jobs and ratings)
        user_id: Auth user that owns this profile
        full_name: Display name
        role: "worker" or "employer", fixed at signup
        rating: Average rating on a 1..5 scale
        total_jobs: Number of completed jobs. Read from the store as is;
            the job service never writes it, so a hosted deployment keeps
            it current with a database trigger on jobs.
        is_verified: Whether the profile has been verified
        city: Home city
        phone: Contact phone number
        bio: Free-text introduction
        avatar_url: Avatar image URL
    """

    id: str
    user_id: str
    full_name: str
    role: str
    rating: float = 3.0
    total_jobs: int = 0
    is_verified: bool = False
    city: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.role, UserRole):
            self.role = self.role.value
        if self.role not in VALID_ROLE_VALUES:
            raise ValueError(f"Invalid role: {self.role}")
        if not self.full_name or not self.full_name.strip():
            raise ValueError("Full name is required")

    @property
    def is_worker(self) -> bool:
        return self.role == UserRole.WORKER.value

    @property
    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER.value

    def summary(self) -> "ProfileSummary":
        return ProfileSummary(
            full_name=self.full_name,
            rating=self.rating,
            is_verified=self.is_verified,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "role": self.role,
            "rating": self.rating,
            "total_jobs": self.total_jobs,
            "is_verified": self.is_verified,
            "city": self.city,
            "phone": self.phone,
            "bio": self.bio,
            "avatar_url": self.avatar_url,
            "created_at": format_datetime(self.created_at),
            "updated_at": format_datetime(self.updated_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Profile":
        """Create from a database row."""
        rating = data.get("rating")
        return cls(
            id=data["id"],
            user_id=data["user_id"],
            full_name=data["full_name"],
            role=data["role"],
            rating=float(rating) if rating is not None else 3.0,
            total_jobs=int(data.get("total_jobs") or 0),
            is_verified=bool(data.get("is_verified") or False),
            city=data.get("city"),
            phone=data.get("phone"),
            bio=data.get("bio"),
            avatar_url=data.get("avatar_url"),
            created_at=parse_datetime(data.get("created_at")),
            updated_at=parse_datetime(data.get("updated_at")),
        )


@dataclass(frozen=True)
class ProfileSummary:
    """Counterpart fields joined onto a job listing."""

    full_name: str
    rating: Optional[float] = None
    is_verified: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "full_name": self.full_name,
            "rating": self.rating,
            "is_verified": self.is_verified,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ProfileSummary"]:
        if not data:
            return None
        rating = data.get("rating")
        return cls(
            full_name=data.get("full_name") or "",
            rating=float(rating) if rating is not None else None,
            is_verified=bool(data.get("is_verified") or False),
        )


@dataclass
class ProfileUpdate:
    """Self-service edit of a profile. None means "leave unchanged"."""

    full_name: Optional[str] = None
    phone: Optional[str] = None
    city: Optional[str] = None
    bio: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProfileUpdate":
        """Split a raw payload into editable fields and everything else."""
        known = {k: data[k] for k in EDITABLE_PROFILE_FIELDS if k in data}
        extra = {k: v for k, v in data.items() if k not in EDITABLE_PROFILE_FIELDS}
        return cls(**known, extra=extra)

    def changes(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in EDITABLE_PROFILE_FIELDS
            if getattr(self, name) is not None
        }
