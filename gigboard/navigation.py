"""Role-dependent navigation.

Workers and employers see different destinations. This is a fixed mapping
from role to an ordered list; it carries no lifecycle rules.
"""

from dataclasses import dataclass
from typing import Dict, Tuple, Union

from gigboard.types import UserRole


@dataclass(frozen=True)
class NavItem:
    href: str
    label: str


HOME = NavItem("/dashboard", "Home")
FIND_JOBS = NavItem("/jobs", "Jobs")
POST_JOB = NavItem("/post-job", "Post Job")
MY_JOBS = NavItem("/my-jobs", "My Jobs")
PROFILE = NavItem("/profile", "Profile")

NAVIGATION: Dict[UserRole, Tuple[NavItem, ...]] = {
    UserRole.WORKER: (HOME, FIND_JOBS, MY_JOBS, PROFILE),
    UserRole.EMPLOYER: (HOME, POST_JOB, MY_JOBS, PROFILE),
}


def navigation_for(role: Union[UserRole, str]) -> Tuple[NavItem, ...]:
    """Ordered destinations for a role. Raises ValueError for unknown roles."""
    return NAVIGATION[UserRole(role)]
