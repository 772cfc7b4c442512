"""Response schemas shared by every endpoint."""

from resource_api.schemas.base import (
    HTTP_STATUS_CODES,
    HealthResponse,
    ResponseEnvelope,
    ResponseStatus,
)

__all__ = [
    "HTTP_STATUS_CODES",
    "HealthResponse",
    "ResponseEnvelope",
    "ResponseStatus",
]
