"""Identity and role guard.

Resolves who is calling from an external session provider and what role they
hold. The role is always read from the caller's stored profile, never from
anything the client sends, so a worker cannot post jobs by claiming to be an
employer.

Usage:
    guard = RoleGuard(session_provider, profile_storage)
    identity = guard.require()
    job_service.accept_job(job_id, identity)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Union

from gigboard.errors import UnauthenticatedError, UnauthorizedError
from gigboard.types import UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthUser:
    """An authenticated user as reported by the session provider."""

    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class Identity:
    """Verified caller context passed explicitly into every service call.

    Attributes:
        user_id: Auth user ID
        profile_id: ID of the caller's profile (what jobs reference)
        role: Server-verified role
    """

    user_id: str
    profile_id: str
    role: str

    @property
    def is_worker(self) -> bool:
        return self.role == UserRole.WORKER.value

    @property
    def is_employer(self) -> bool:
        return self.role == UserRole.EMPLOYER.value


AuthChangeCallback = Callable[[Optional[AuthUser]], None]
Unsubscribe = Callable[[], None]


class SessionProvider(Protocol):
    """Source of the current authenticated user."""

    def get_current_user(self) -> Optional[AuthUser]:
        """Return the signed-in user, or None."""
        ...

    def on_auth_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        """Register a callback for sign-in/sign-out. Returns an unsubscriber."""
        ...


class StaticSessionProvider:
    """In-process session provider for tests and scripts."""

    def __init__(self, user: Optional[AuthUser] = None):
        self._user = user
        self._listeners: List[AuthChangeCallback] = []

    def get_current_user(self) -> Optional[AuthUser]:
        return self._user

    def on_auth_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def sign_in(self, user: AuthUser) -> None:
        self._user = user
        self._notify()

    def sign_out(self) -> None:
        self._user = None
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self._user)


class SupabaseSessionProvider:
    """Session provider backed by ``supabase.Client.auth``."""

    def __init__(self, client: Any):
        self._auth = client.auth

    def get_current_user(self) -> Optional[AuthUser]:
        response = self._auth.get_user()
        user = getattr(response, "user", None) if response else None
        if user is None:
            return None
        return AuthUser(id=user.id, email=getattr(user, "email", None))

    def on_auth_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        def handler(event, session) -> None:
            user = getattr(session, "user", None) if session else None
            callback(AuthUser(id=user.id, email=getattr(user, "email", None)) if user else None)

        subscription = self._auth.on_auth_state_change(handler)
        return subscription.unsubscribe


class RoleGuard:
    """Wraps repository calls with identity resolution.

    Args:
        sessions: Session provider supplying the signed-in user
        profiles: Profile storage used to look up the verified role
    """

    def __init__(self, sessions: SessionProvider, profiles: Any):
        self._sessions = sessions
        self._profiles = profiles
        self._cached: Optional[Identity] = None
        self._unsubscribe = sessions.on_auth_change(self._on_auth_change)

    def _on_auth_change(self, user: Optional[AuthUser]) -> None:
        self._cached = None

    def close(self) -> None:
        self._unsubscribe()

    def current(self) -> Optional[Identity]:
        """Resolve the caller, or None when nobody is signed in."""
        user = self._sessions.get_current_user()
        if user is None:
            self._cached = None
            return None
        if self._cached is not None and self._cached.user_id == user.id:
            return self._cached

        profile = self._profiles.get_profile_for_user(user.id)
        if profile is None:
            logger.warning(f"Authenticated user has no profile | user={user.id}")
            return None

        self._cached = Identity(user_id=user.id, profile_id=profile.id, role=profile.role)
        return self._cached

    def require(self) -> Identity:
        """Resolve the caller or raise UnauthenticatedError."""
        identity = self.current()
        if identity is None:
            raise UnauthenticatedError("Sign in to continue")
        return identity

    def require_role(self, role: Union[UserRole, str]) -> Identity:
        """Resolve the caller and insist on a role."""
        identity = self.require()
        wanted = role.value if isinstance(role, UserRole) else role
        if identity.role != wanted:
            raise UnauthorizedError(f"This action requires the {wanted} role")
        return identity
