"""Jobs routes.

Workers browse and accept open jobs; employers post jobs and move them
through the lifecycle. Every rule lives in the job service; these handlers
only translate HTTP to service calls.
"""

from fastapi import APIRouter, Query, Request, status

from gigboard.jobs import JobFilter

from ..auth import CurrentIdentity
from ..database import JobServiceDep, RatingServiceDep
from ..logging_config import get_logger, log_job_event
from ..models import (
    EmployerStatsResponse,
    JobCategoryValue,
    JobCreate,
    JobListResponse,
    JobResponse,
    RatingCreate,
    RatingResponse,
    StatusGroup,
)
from ..rate_limit import READ_LIMIT, WRITE_LIMIT, limiter

logger = get_logger("gigboard.routes.jobs")
router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=JobListResponse)
@limiter.limit(READ_LIMIT)
async def list_open_jobs(
    request: Request,
    identity: CurrentIdentity,
    jobs: JobServiceDep,
    category: JobCategoryValue | None = Query(None),
    q: str | None = Query(None, max_length=100, description="Search title, description, city"),
    limit: int = Query(50, ge=1, le=100),
):
    """Open jobs, newest first, with the employer's name and rating."""
    logger.info(f"GET /jobs | user={identity.profile_id} | category={category} | q={q}")

    listing = jobs.list_open_jobs(JobFilter(category=category, search_text=q, limit=limit))
    found = [JobResponse.from_job(j, jobs.next_actions(j, identity)) for j in listing]
    return JobListResponse(jobs=found, total=len(found))


@router.get("/mine", response_model=JobListResponse)
@limiter.limit(READ_LIMIT)
async def list_my_jobs(
    request: Request,
    identity: CurrentIdentity,
    jobs: JobServiceDep,
    group: StatusGroup | None = Query(None, description="active, completed or cancelled"),
):
    """Jobs the caller posted (employers) or is working (workers)."""
    listing = jobs.list_jobs_for_user(identity, group)
    found = [JobResponse.from_job(j, jobs.next_actions(j, identity)) for j in listing]
    return JobListResponse(jobs=found, total=len(found))


@router.get("/stats", response_model=EmployerStatsResponse)
@limiter.limit(READ_LIMIT)
async def employer_stats(request: Request, identity: CurrentIdentity, jobs: JobServiceDep):
    """Dashboard totals for an employer."""
    return EmployerStatsResponse.from_stats(jobs.employer_stats(identity))


@router.get("/{job_id}", response_model=JobResponse)
@limiter.limit(READ_LIMIT)
async def get_job(request: Request, job_id: str, identity: CurrentIdentity, jobs: JobServiceDep):
    """Get details of a specific job."""
    job = jobs.get_job(job_id)
    return JobResponse.from_job(job, jobs.next_actions(job, identity))


@router.post("", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(WRITE_LIMIT)
async def create_job(
    request: Request,
    job: JobCreate,
    identity: CurrentIdentity,
    jobs: JobServiceDep,
):
    """
    Post a new job.

    The caller must be an employer. Jobs always start 'open' with no worker.
    """
    logger.info(f"POST /jobs | employer={identity.profile_id} | title={(job.title or '')[:50]}")

    created = jobs.create_job(identity, job.model_dump(exclude_none=True))

    log_job_event(logger, "create", created.id, identity.profile_id)
    return JobResponse.from_job(created, jobs.next_actions(created, identity))


@router.post("/{job_id}/accept", response_model=JobResponse)
@limiter.limit(WRITE_LIMIT)
async def accept_job(request: Request, job_id: str, identity: CurrentIdentity, jobs: JobServiceDep):
    """
    Claim an open job.

    Exactly one worker wins when several accept at once; the others get 409.
    """
    job = jobs.accept_job(job_id, identity)
    log_job_event(logger, "accept", job_id, identity.profile_id)
    return JobResponse.from_job(job, jobs.next_actions(job, identity))


@router.post("/{job_id}/start", response_model=JobResponse)
@limiter.limit(WRITE_LIMIT)
async def start_job(request: Request, job_id: str, identity: CurrentIdentity, jobs: JobServiceDep):
    """Mark an accepted job as in progress (employer only)."""
    job = jobs.start_job(job_id, identity)
    log_job_event(logger, "start", job_id, identity.profile_id)
    return JobResponse.from_job(job, jobs.next_actions(job, identity))


@router.post("/{job_id}/complete", response_model=JobResponse)
@limiter.limit(WRITE_LIMIT)
async def complete_job(
    request: Request, job_id: str, identity: CurrentIdentity, jobs: JobServiceDep
):
    """Mark an in-progress job as completed (employer only)."""
    job = jobs.complete_job(job_id, identity)
    log_job_event(logger, "complete", job_id, identity.profile_id)
    return JobResponse.from_job(job, jobs.next_actions(job, identity))


@router.post("/{job_id}/cancel", response_model=JobResponse)
@limiter.limit(WRITE_LIMIT)
async def cancel_job(request: Request, job_id: str, identity: CurrentIdentity, jobs: JobServiceDep):
    """Cancel an open job (employer only). Accepted jobs cannot be cancelled."""
    job = jobs.cancel_job(job_id, identity)
    log_job_event(logger, "cancel", job_id, identity.profile_id)
    return JobResponse.from_job(job, jobs.next_actions(job, identity))


@router.post(
    "/{job_id}/ratings", response_model=RatingResponse, status_code=status.HTTP_201_CREATED
)
@limiter.limit(WRITE_LIMIT)
async def rate_job(
    request: Request,
    job_id: str,
    body: RatingCreate,
    identity: CurrentIdentity,
    ratings: RatingServiceDep,
):
    """Rate the other party of a completed job."""
    rating = ratings.rate(identity, job_id, body.rating, body.review)
    log_job_event(logger, "rate", job_id, identity.profile_id, score=body.rating)
    return RatingResponse.from_rating(rating)
