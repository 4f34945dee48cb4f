"""Gigboard Backend API - FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from gigboard.errors import (
    ConflictError,
    GigboardError,
    IllegalTransitionError,
    NotFoundError,
    StoreUnavailableError,
    UnauthenticatedError,
    UnauthorizedError,
    ValidationError,
)

from .config import get_settings
from .logging_config import configure_logging, get_logger
from .models import ErrorResponse
from .rate_limit import limiter
from .routes import jobs_router, profiles_router

API_PREFIX = "/api/v1"

logger = get_logger("gigboard.api")

# Checked in order; ForbiddenError is caught by its UnauthorizedError parent.
ERROR_STATUS: tuple[tuple[type[GigboardError], int], ...] = (
    (UnauthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (UnauthorizedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (IllegalTransitionError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (StoreUnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_for(error: GigboardError) -> int:
    for error_type, status_code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def gigboard_error_handler(request: Request, exc: GigboardError) -> JSONResponse:
    """Translate a service-layer error into its HTTP status."""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} | {exc.code} | {exc}")
    body = ErrorResponse(
        code=exc.code,
        detail=str(exc),
        errors=exc.errors if isinstance(exc, ValidationError) else None,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting Gigboard Backend API (debug={settings.debug})")
    yield
    logger.info("Shutting down Gigboard Backend API")


app = FastAPI(
    title="Gigboard Backend API",
    description="API for the gigboard short-term job marketplace",
    version="0.1.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(GigboardError, gigboard_error_handler)

# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(jobs_router, prefix=API_PREFIX)
app.include_router(profiles_router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "gigboard-backend",
        "version": "0.1.0",
        "status": "ok",
    }


@app.get("/health")
async def health():
    """Detailed health check with actual database verification."""
    from .database import get_supabase_client

    db_status = "disconnected"
    try:
        db = get_supabase_client()
        db.table("jobs").select("id").limit(1).execute()
        db_status = "connected"
    except Exception as e:
        logger.warning(f"Health check database probe failed: {e}")
        db_status = f"error: {str(e)[:50]}"

    overall_status = "healthy" if db_status == "connected" else "degraded"

    return {
        "status": overall_status,
        "database": db_status,
    }
