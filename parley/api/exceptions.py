"""Exception hierarchy for consistent error handling.

All errors surfaced to webhook callers inherit from ParleyAPIError, which
carries the status_code and error_code the global exception handler uses
to render an ErrorResponse. Messages are generic; they never echo the
inbound payload.
"""

from parley.api.models.errors import ErrorCode


class ParleyAPIError(Exception):
    """Base exception for all API errors."""

    status_code: int = 500
    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidRequestError(ParleyAPIError):
    """Raised on malformed bodies or missing required fields."""

    status_code = 400
    error_code = ErrorCode.INVALID_REQUEST


class NoResponseError(ParleyAPIError):
    """Raised when the LLM returns no usable text."""

    status_code = 400
    error_code = ErrorCode.NO_RESPONSE


class UnauthorizedError(ParleyAPIError):
    """Raised on missing headers or an invalid signature."""

    status_code = 401
    error_code = ErrorCode.UNAUTHORIZED


class SessionNotFoundError(ParleyAPIError):
    """Raised when a session is absent or not in the status a handler requires."""

    status_code = 404
    error_code = ErrorCode.SESSION_NOT_FOUND


class PersonaNotFoundError(ParleyAPIError):
    """Raised when a session's persona does not exist."""

    status_code = 404
    error_code = ErrorCode.PERSONA_NOT_FOUND


class DownstreamError(ParleyAPIError):
    """Raised when a collaborator fails in a way not otherwise classified."""

    status_code = 500
    error_code = ErrorCode.DOWNSTREAM_ERROR
