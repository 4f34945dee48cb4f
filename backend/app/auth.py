"""Authentication for the gigboard backend.

Callers present the access token Supabase Auth issued them. The token only
proves *who* the caller is; the role always comes from their stored profile.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from gigboard.errors import UnauthenticatedError
from gigboard.identity import AuthUser, Identity, RoleGuard, StaticSessionProvider

from .config import Settings, get_settings
from .database import Profiles

# Bearer token scheme
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def create_access_token(
    user_id: str,
    settings: Settings,
    expires_delta: timedelta | None = None,
    email: str | None = None,
) -> str:
    """Mint a token shaped like a Supabase Auth access token.

    Only used by tests and local tooling; in production Supabase issues them.
    """
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": user_id,
        "aud": settings.jwt_audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + (expires_delta or timedelta(hours=1)),
    }
    if email:
        to_encode["email"] = email
    return jwt.encode(to_encode, settings.supabase_jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    """Decode and validate a Supabase access token."""
    try:
        return jwt.decode(
            token,
            settings.supabase_jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
        )
    except JWTError:
        raise _unauthorized("Invalid or expired token")


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthUser:
    """The authenticated user behind the bearer token."""
    if credentials is None:
        raise _unauthorized("Not authenticated - provide Authorization header")

    payload = decode_token(credentials.credentials, settings)
    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Invalid token payload")
    return AuthUser(id=user_id, email=payload.get("email"))


CurrentUser = Annotated[AuthUser, Depends(get_current_user)]


async def get_current_identity(user: CurrentUser, profiles: Profiles) -> Identity:
    """Resolve the caller's profile and verified role.

    A signed-in user who has not created a profile yet is unauthenticated
    as far as the marketplace is concerned.
    """
    guard = RoleGuard(StaticSessionProvider(user), profiles)
    try:
        return guard.require()
    except UnauthenticatedError:
        raise _unauthorized("Complete your profile to continue")
    finally:
        guard.close()


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
