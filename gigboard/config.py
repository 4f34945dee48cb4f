"""Configuration for the gigboard service layer."""

import os
from dataclasses import dataclass

ENV_PREFIX = "GIGBOARD_"


@dataclass
class GigboardConfig:
    """Tunables shared by the services and storage backends.

    Attributes:
        default_profile_rating: Rating given to a new profile (midpoint of 1..5)
        list_limit: Maximum rows returned by a listing query
        max_title_length: Longest accepted job title
        max_description_length: Longest accepted job description
        jobs_table: Name of the jobs table
        profiles_table: Name of the profiles table
        ratings_table: Name of the ratings table
    """

    default_profile_rating: float = 3.0
    list_limit: int = 100
    max_title_length: int = 200
    max_description_length: int = 5000
    jobs_table: str = "jobs"
    profiles_table: str = "profiles"
    ratings_table: str = "ratings"

    def __post_init__(self):
        if self.list_limit < 1:
            raise ValueError("list_limit must be at least 1")
        if not 1.0 <= self.default_profile_rating <= 5.0:
            raise ValueError("default_profile_rating must be between 1 and 5")

    @classmethod
    def from_env(cls) -> "GigboardConfig":
        """Build a config from ``GIGBOARD_*`` environment variables."""
        defaults = cls()
        return cls(
            default_profile_rating=float(
                os.environ.get(f"{ENV_PREFIX}DEFAULT_PROFILE_RATING", defaults.default_profile_rating)
            ),
            list_limit=int(os.environ.get(f"{ENV_PREFIX}LIST_LIMIT", defaults.list_limit)),
            max_title_length=int(
                os.environ.get(f"{ENV_PREFIX}MAX_TITLE_LENGTH", defaults.max_title_length)
            ),
            max_description_length=int(
                os.environ.get(f"{ENV_PREFIX}MAX_DESCRIPTION_LENGTH", defaults.max_description_length)
            ),
            jobs_table=os.environ.get(f"{ENV_PREFIX}JOBS_TABLE", defaults.jobs_table),
            profiles_table=os.environ.get(f"{ENV_PREFIX}PROFILES_TABLE", defaults.profiles_table),
            ratings_table=os.environ.get(f"{ENV_PREFIX}RATINGS_TABLE", defaults.ratings_table),
        )
