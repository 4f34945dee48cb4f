"""
gigboard - service layer for a short-term gig marketplace.

Workers browse and accept hourly jobs; employers post jobs and drive them
through their lifecycle.
"""

from .config import GigboardConfig
from .identity import Identity, RoleGuard
from .jobs import JobService
from .profiles import ProfileService
from .ratings import RatingService

try:
    from importlib.metadata import version

    __version__ = version("gigboard")
except Exception:
    __version__ = "0.0.0"

__all__ = [
    "GigboardConfig",
    "Identity",
    "RoleGuard",
    "JobService",
    "ProfileService",
    "RatingService",
]
