"""Error response models for consistent API error handling."""

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Machine-readable error codes for webhook responses."""

    INVALID_REQUEST = "INVALID_REQUEST"
    """Malformed body or missing required field."""

    NO_RESPONSE = "NO_RESPONSE"
    """The LLM produced no usable text."""

    UNAUTHORIZED = "UNAUTHORIZED"
    """Missing headers or signature mismatch."""

    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    """Session absent or in the wrong status for the requested transition."""

    PERSONA_NOT_FOUND = "PERSONA_NOT_FOUND"
    """The session's persona does not exist."""

    DOWNSTREAM_ERROR = "DOWNSTREAM_ERROR"
    """A collaborator (store, bridge, chat, jobs, LLM) failed."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""


class ErrorBody(BaseModel):
    """Error body content for API error responses."""

    code: ErrorCode
    """Machine-readable error code."""

    message: str
    """Human-readable, payload-agnostic error message."""


class ErrorResponse(BaseModel):
    """Standard error response format.

    Example:
        {
            "error": {
                "code": "SESSION_NOT_FOUND",
                "message": "Session not found"
            }
        }
    """

    error: ErrorBody
