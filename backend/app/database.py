"""Database wiring: the Supabase client and the services built on it."""

from typing import Annotated

from fastapi import Depends

from gigboard.config import GigboardConfig
from gigboard.jobs import JobService, JobStorage, SupabaseJobStorage
from gigboard.profiles import ProfileService, ProfileStorage, SupabaseProfileStorage
from gigboard.ratings import RatingService, RatingStorage, SupabaseRatingStorage
from supabase import Client, create_client

from .config import Settings, get_gigboard_config, get_settings

_supabase_client: Client | None = None


def get_supabase_client(settings: Settings | None = None) -> Client:
    """Get cached Supabase client."""
    global _supabase_client
    if _supabase_client is None:
        if settings is None:
            settings = get_settings()
        if not settings.supabase_secret_key:
            raise ValueError("SUPABASE_SECRET_KEY must be set")
        _supabase_client = create_client(settings.supabase_url, settings.supabase_secret_key)
    return _supabase_client


def get_db(settings: Annotated[Settings, Depends(get_settings)]) -> Client:
    """FastAPI dependency for Supabase client."""
    return get_supabase_client(settings)


# Type alias for dependency injection
Database = Annotated[Client, Depends(get_db)]
Config = Annotated[GigboardConfig, Depends(get_gigboard_config)]


# =============================================================================
# Storage backends
# =============================================================================


def get_profile_storage(db: Database, config: Config) -> ProfileStorage:
    return SupabaseProfileStorage(db, table=config.profiles_table)


def get_job_storage(db: Database, config: Config) -> JobStorage:
    return SupabaseJobStorage(db, table=config.jobs_table)


def get_rating_storage(db: Database, config: Config) -> RatingStorage:
    return SupabaseRatingStorage(db, table=config.ratings_table)


Profiles = Annotated[ProfileStorage, Depends(get_profile_storage)]


# =============================================================================
# Services
# =============================================================================


def get_profile_service(storage: Profiles, config: Config) -> ProfileService:
    return ProfileService(storage=storage, config=config)


def get_job_service(
    storage: Annotated[JobStorage, Depends(get_job_storage)], config: Config
) -> JobService:
    return JobService(storage=storage, config=config)


def get_rating_service(
    storage: Annotated[RatingStorage, Depends(get_rating_storage)],
    jobs: Annotated[JobStorage, Depends(get_job_storage)],
    profiles: Profiles,
    config: Config,
) -> RatingService:
    return RatingService(storage=storage, jobs=jobs, profiles=profiles, config=config)


ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
JobServiceDep = Annotated[JobService, Depends(get_job_service)]
RatingServiceDep = Annotated[RatingService, Depends(get_rating_service)]
