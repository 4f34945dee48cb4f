"""Profiles subsystem for gigboard."""

from gigboard.profiles.models import EDITABLE_PROFILE_FIELDS, Profile, ProfileSummary, ProfileUpdate
from gigboard.profiles.service import ProfileService
from gigboard.profiles.storage import InMemoryProfileStorage, ProfileStorage, SupabaseProfileStorage

__all__ = [
    "Profile",
    "ProfileSummary",
    "ProfileUpdate",
    "EDITABLE_PROFILE_FIELDS",
    "ProfileService",
    "ProfileStorage",
    "InMemoryProfileStorage",
    "SupabaseProfileStorage",
]
