# ==============================================================================
# BASE SCHEMAS - Response Envelope
# ==============================================================================
# Every controller answer is one of these envelopes
# ==============================================================================

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from resource_api.core.constants import Messages
from resource_api.core.exceptions import AppException


class ResponseStatus(str, Enum):
    """Envelope status values."""
    SUCCESS = "SUCCESS"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    RATE_LIMITED = "RATE_LIMITED"


HTTP_STATUS_CODES: Dict[ResponseStatus, int] = {
    ResponseStatus.SUCCESS: 200,
    ResponseStatus.BAD_REQUEST: 400,
    ResponseStatus.UNAUTHORIZED: 401,
    ResponseStatus.FORBIDDEN: 403,
    ResponseStatus.RECORD_NOT_FOUND: 404,
    ResponseStatus.VALIDATION_ERROR: 422,
    ResponseStatus.RATE_LIMITED: 429,
    ResponseStatus.INTERNAL_SERVER_ERROR: 500,
}


class ResponseEnvelope(BaseModel):
    """
    Standard API response wrapper.

    Attributes:
        status: Outcome of the request
        message: Human-readable status message
        data: Response payload, only present on success
    """

    model_config = ConfigDict(use_enum_values=True)

    status: ResponseStatus = Field(
        ...,
        description="Outcome of the request"
    )
    message: Optional[str] = Field(
        None,
        description="Status message"
    )
    data: Optional[Any] = Field(
        None,
        description="Response data"
    )

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_CODES[ResponseStatus(self.status)]

    def to_content(self) -> Dict[str, Any]:
        """Envelope as a dict, leaving out ``message``/``data`` when unset."""
        content: Dict[str, Any] = {"status": self.status}
        if self.message is not None:
            content["message"] = self.message
        if self.data is not None:
            content["data"] = self.data
        return content

    @classmethod
    def success(cls, data: Any = None, message: str = Messages.SUCCESS) -> "ResponseEnvelope":
        return cls(status=ResponseStatus.SUCCESS, message=message, data=data)

    @classmethod
    def validation_error(cls, message: str = Messages.VALIDATION_ERROR) -> "ResponseEnvelope":
        return cls(status=ResponseStatus.VALIDATION_ERROR, message=message)

    @classmethod
    def internal_server_error(
        cls,
        message: str = Messages.INTERNAL_SERVER_ERROR,
    ) -> "ResponseEnvelope":
        return cls(status=ResponseStatus.INTERNAL_SERVER_ERROR, message=message)

    @classmethod
    def from_exception(cls, exc: AppException) -> "ResponseEnvelope":
        """Envelope for an application exception, keeping its message."""
        return cls(status=ResponseStatus(exc.status), message=exc.message)


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str = Field(
        ...,
        description="Health status"
    )
    version: str = Field(
        ...,
        description="Application version"
    )
    database: str = Field(
        ...,
        description="Database connection status"
    )
