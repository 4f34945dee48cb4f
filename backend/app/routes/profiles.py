"""Profile and navigation routes."""

from fastapi import APIRouter, Request, status

from gigboard.navigation import navigation_for

from ..auth import CurrentIdentity, CurrentUser
from ..database import ProfileServiceDep, RatingServiceDep
from ..logging_config import get_logger
from ..models import (
    NavigationResponse,
    NavItemResponse,
    ProfileCreate,
    ProfileResponse,
    ProfileUpdateRequest,
    RatingListResponse,
    RatingResponse,
)
from ..rate_limit import READ_LIMIT, WRITE_LIMIT, limiter

logger = get_logger("gigboard.routes.profiles")
router = APIRouter(tags=["profiles"])


@router.post("/profiles", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_profile(
    request: Request, body: ProfileCreate, user: CurrentUser, profiles: ProfileServiceDep
):
    """
    Create the caller's profile right after signup.

    The role chosen here cannot be changed later.
    """
    profile = profiles.create_profile(user.id, body.full_name, body.role, body.city, body.phone)
    logger.info(f"POST /profiles | user={user.id} | role={body.role}")
    return ProfileResponse.from_profile(profile)


@router.get("/profiles/me", response_model=ProfileResponse)
@limiter.limit(READ_LIMIT)
async def get_my_profile(request: Request, identity: CurrentIdentity, profiles: ProfileServiceDep):
    return ProfileResponse.from_profile(profiles.get_profile(identity.profile_id))


@router.patch("/profiles/me", response_model=ProfileResponse)
@limiter.limit(WRITE_LIMIT)
async def update_my_profile(
    request: Request,
    body: ProfileUpdateRequest,
    identity: CurrentIdentity,
    profiles: ProfileServiceDep,
):
    """Edit name, phone, city or bio. Any other field is rejected."""
    changes = {**body.model_dump(exclude_unset=True), **(body.model_extra or {})}
    profile = profiles.update_profile(identity, changes)
    return ProfileResponse.from_profile(profile)


@router.get("/profiles/{profile_id}/ratings", response_model=RatingListResponse)
@limiter.limit(READ_LIMIT)
async def list_profile_ratings(
    request: Request, profile_id: str, identity: CurrentIdentity, ratings: RatingServiceDep
):
    """Ratings a profile has received, newest first."""
    received = [RatingResponse.from_rating(r) for r in ratings.ratings_for(profile_id)]
    return RatingListResponse(ratings=received, total=len(received))


@router.get("/navigation", response_model=NavigationResponse)
@limiter.limit(READ_LIMIT)
async def get_navigation(request: Request, identity: CurrentIdentity):
    """Destinations for the caller's role, in display order."""
    items = [NavItemResponse.from_item(i) for i in navigation_for(identity.role)]
    return NavigationResponse(role=identity.role, items=items)
