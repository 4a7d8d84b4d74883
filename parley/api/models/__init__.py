"""API request/response models."""

from parley.api.models.errors import ErrorBody, ErrorCode, ErrorResponse
from parley.api.models.health import ComponentHealth, HealthResponse
from parley.api.models.webhook import DispatchResult

__all__ = [
    "ErrorBody",
    "ErrorCode",
    "ErrorResponse",
    "ComponentHealth",
    "HealthResponse",
    "DispatchResult",
]
