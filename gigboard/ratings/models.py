"""Rating data model."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from gigboard.types import format_datetime, parse_datetime

MIN_SCORE = 1
MAX_SCORE = 5


@dataclass
class Rating:
    """Feedback left by one party of a completed job about the other.

    Attributes:
        id: Rating ID
        job_id: The completed job being rated
        rater_id: Profile ID of the author
        rated_id: Profile ID of the party being rated
        rating: Score from 1 to 5
        review: Optional free-text review
    """

    id: str
    job_id: str
    rater_id: str
    rated_id: str
    rating: int
    review: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self):
        if not MIN_SCORE <= self.rating <= MAX_SCORE:
            raise ValueError(f"Rating must be between {MIN_SCORE} and {MAX_SCORE}")
        if self.rater_id == self.rated_id:
            raise ValueError("Cannot rate yourself")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "job_id": self.job_id,
            "rater_id": self.rater_id,
            "rated_id": self.rated_id,
            "rating": self.rating,
            "review": self.review,
            "created_at": format_datetime(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rating":
        return cls(
            id=data["id"],
            job_id=data["job_id"],
            rater_id=data["rater_id"],
            rated_id=data["rated_id"],
            rating=int(data["rating"]),
            review=data.get("review"),
            created_at=parse_datetime(data.get("created_at")),
        )
