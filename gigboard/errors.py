"""Error taxonomy for gigboard.

Every service raises one of these. Callers branch on the concrete type
(``except ConflictError``) instead of parsing messages; the HTTP layer maps
each ``code`` to a status.
"""

from typing import Dict, Optional


class GigboardError(Exception):
    """Base for all gigboard errors."""

    code = "error"


class UnauthenticatedError(GigboardError):
    """No valid session."""

    code = "unauthenticated"


class UnauthorizedError(GigboardError):
    """Valid session, but the caller's role may not perform the operation."""

    code = "unauthorized"


class ForbiddenError(UnauthorizedError):
    """Valid session and role, but the caller does not own the resource."""

    code = "forbidden"


class NotFoundError(GigboardError):
    """Referenced job or profile does not exist."""

    code = "not_found"


class ConflictError(GigboardError):
    """A conditional update matched zero rows: someone else mutated first."""

    code = "conflict"


class IllegalTransitionError(GigboardError):
    """Requested status change is not permitted from the current state."""

    code = "illegal_transition"

    def __init__(self, message: str, from_status: Optional[str] = None, to_status: Optional[str] = None):
        super().__init__(message)
        self.from_status = from_status
        self.to_status = to_status


class ValidationError(GigboardError):
    """Malformed input. ``errors`` maps each offending field to a message."""

    code = "validation_error"

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid fields: {fields}")


class StoreUnavailableError(GigboardError):
    """The underlying data store call failed or timed out."""

    code = "store_unavailable"

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
