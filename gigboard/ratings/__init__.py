"""Ratings subsystem for gigboard."""

from gigboard.ratings.models import Rating
from gigboard.ratings.service import RatingService
from gigboard.ratings.storage import InMemoryRatingStorage, RatingStorage, SupabaseRatingStorage

__all__ = [
    "Rating",
    "RatingService",
    "RatingStorage",
    "InMemoryRatingStorage",
    "SupabaseRatingStorage",
]
