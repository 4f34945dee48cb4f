"""Profile service: signup profile creation and self-service editing."""

import logging
from typing import Any, Dict, Optional, Union

from gigboard.config import GigboardConfig
from gigboard.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from gigboard.identity import Identity
from gigboard.profiles.models import EDITABLE_PROFILE_FIELDS, Profile, ProfileUpdate
from gigboard.profiles.storage import ProfileStorage
from gigboard.types import VALID_ROLE_VALUES, UserRole

logger = logging.getLogger(__name__)


class ProfileService:
    """Profile operations.

    Args:
        storage: Profile persistence backend
        config: Service configuration
    """

    def __init__(self, storage: ProfileStorage, config: Optional[GigboardConfig] = None):
        self.storage = storage
        self.config = config or GigboardConfig()

    def create_profile(
        self,
        user_id: str,
        full_name: str,
        role: Union[UserRole, str],
        city: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> Profile:
        """Create the profile for a newly signed-up user.

        The role chosen here is permanent.

        Raises:
            ValidationError: If the name is empty or the role is unknown
            ConflictError: If the user already has a profile
        """
        role_value = role.value if isinstance(role, UserRole) else role
        errors = {}
        if not isinstance(full_name, str) or not full_name.strip():
            errors["full_name"] = "Full name is required"
        if role_value not in VALID_ROLE_VALUES:
            errors["role"] = f"Invalid role: {role_value}"
        if errors:
            raise ValidationError(errors)

        if self.storage.get_profile_for_user(user_id) is not None:
            raise ConflictError("Profile already exists for this user")

        profile = self.storage.insert_profile(
            {
                "user_id": user_id,
                "full_name": full_name.strip(),
                "role": role_value,
                "rating": self.config.default_profile_rating,
                "total_jobs": 0,
                "is_verified": False,
                "city": city.strip() if city else None,
                "phone": phone.strip() if phone else None,
            }
        )
        logger.info(f"Profile created | id={profile.id} | user={user_id} | role={role_value}")
        return profile

    def get_profile(self, profile_id: str) -> Profile:
        profile = self.storage.get_profile(profile_id)
        if profile is None:
            raise NotFoundError(f"Profile {profile_id} not found")
        return profile

    def get_profile_for_user(self, user_id: str) -> Profile:
        profile = self.storage.get_profile_for_user(user_id)
        if profile is None:
            raise NotFoundError("No profile for this user")
        return profile

    def update_profile(
        self,
        identity: Identity,
        update: Union[ProfileUpdate, Dict[str, Any]],
        profile_id: Optional[str] = None,
    ) -> Profile:
        """Edit the caller's own name, phone, city or bio.

        Raises:
            ForbiddenError: If ``profile_id`` is someone else's profile
            ValidationError: If the payload touches a non-editable field
                (role included) or blanks the name
            NotFoundError: If the profile vanished
        """
        target_id = profile_id or identity.profile_id
        if target_id != identity.profile_id:
            raise ForbiddenError("You can only edit your own profile")

        if not isinstance(update, ProfileUpdate):
            update = ProfileUpdate.from_dict(update)

        errors = {
            name: f"{name} cannot be changed; editable fields are {', '.join(EDITABLE_PROFILE_FIELDS)}"
            for name in update.extra
        }
        changes = update.changes()
        if "full_name" in changes:
            changes["full_name"] = str(changes["full_name"]).strip()
            if not changes["full_name"]:
                errors["full_name"] = "Full name is required"
        if errors:
            raise ValidationError(errors)

        if not changes:
            return self.get_profile(target_id)

        profile = self.storage.update_profile(target_id, changes)
        if profile is None:
            raise NotFoundError(f"Profile {target_id} not found")
        logger.info(f"Profile updated | id={target_id} | fields={sorted(changes)}")
        return profile
