"""API routes."""

from .jobs import router as jobs_router
from .profiles import router as profiles_router

__all__ = ["jobs_router", "profiles_router"]
