"""Error taxonomy.

Services raise these; the API layer turns them into JSON responses of the
form ``{"error": <message>, "code": <code>}`` with the matching status.
"""

from __future__ import annotations

from fastapi import status


class FarmTimeError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class ValidationError(FarmTimeError):
    """Missing or invalid required input."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"
    default_message = "Invalid request"


class NotFoundError(FarmTimeError):
    """A referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class ConflictError(FarmTimeError):
    """The write would violate a uniqueness rule."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Already exists"


class UnauthenticatedError(FarmTimeError):
    """Missing, invalid or expired session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Unauthorized"


class ForbiddenError(FarmTimeError):
    """Authenticated, but lacking the required privilege."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "Admin access required"


class InvalidStateError(FarmTimeError):
    """OAuth state parameter did not match the state cookie."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "invalid_state"
    default_message = "Invalid state"


class StorageError(FarmTimeError):
    """The database failed. The message never carries driver detail."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "storage_error"
    default_message = "Storage failure"
