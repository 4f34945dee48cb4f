"""Rating service.

Ratings sit outside the job lifecycle: no transition depends on them. A party
to a completed job may rate the other party once.
"""

import logging
from typing import Any, List, Optional

from gigboard.config import GigboardConfig
from gigboard.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from gigboard.identity import Identity
from gigboard.ratings.models import MAX_SCORE, MIN_SCORE, Rating
from gigboard.ratings.storage import RatingStorage
from gigboard.types import JobStatus

logger = logging.getLogger(__name__)

MAX_REVIEW_LENGTH = 2000


class RatingService:
    """Rating operations.

    Args:
        storage: Rating persistence backend
        jobs: Job storage, to check the rated job
        profiles: Profile storage, to keep the rated party's average current
        config: Service configuration
    """

    def __init__(
        self,
        storage: RatingStorage,
        jobs: Any,
        profiles: Any,
        config: Optional[GigboardConfig] = None,
    ):
        self.storage = storage
        self.jobs = jobs
        self.profiles = profiles
        self.config = config or GigboardConfig()

    def rate(
        self,
        identity: Identity,
        job_id: str,
        score: Any,
        review: Optional[str] = None,
    ) -> Rating:
        """Rate the other party of a completed job.

        Raises:
            ValidationError: Bad score or review, or the job is not completed
            NotFoundError: If the job does not exist
            ForbiddenError: If the caller was not party to the job
            ConflictError: If the caller already rated this job. The store's
                unique (job, rater) constraint backs this check up under races.
        """
        errors = {}
        if isinstance(score, bool) or not isinstance(score, int) or not (
            MIN_SCORE <= score <= MAX_SCORE
        ):
            errors["rating"] = f"Rating must be a whole number from {MIN_SCORE} to {MAX_SCORE}"
        review = review.strip() if isinstance(review, str) else None
        if review and len(review) > MAX_REVIEW_LENGTH:
            errors["review"] = "Review too long"
        if errors:
            raise ValidationError(errors)

        job = self.jobs.get_job(job_id)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        if job.status != JobStatus.COMPLETED.value:
            raise ValidationError({"job_id": "Only completed jobs can be rated"})

        if identity.profile_id == job.employer_id:
            rated_id = job.worker_id
        elif identity.profile_id == job.worker_id:
            rated_id = job.employer_id
        else:
            raise ForbiddenError("Only the job's employer or worker can rate it")

        if self.storage.find_rating(job_id, identity.profile_id) is not None:
            raise ConflictError("You have already rated this job")

        rating = self.storage.insert_rating(
            {
                "job_id": job_id,
                "rater_id": identity.profile_id,
                "rated_id": rated_id,
                "rating": score,
                "review": review or None,
            }
        )
        self._refresh_average(rated_id)
        logger.info(f"Rating submitted | job={job_id} | rater={identity.profile_id} | score={score}")
        return rating

    def ratings_for(self, profile_id: str) -> List[Rating]:
        """Ratings a profile has received, newest first."""
        return self.storage.list_ratings(profile_id, limit=self.config.list_limit)

    def _refresh_average(self, profile_id: str) -> None:
        page_size = self.config.list_limit
        scores: List[int] = []
        while True:
            page = self.storage.list_ratings(profile_id, limit=page_size, offset=len(scores))
            scores.extend(r.rating for r in page)
            if len(page) < page_size:
                break
        if not scores:
            return
        average = sum(scores) / len(scores)
        self.profiles.update_profile(profile_id, {"rating": round(average, 2)})
