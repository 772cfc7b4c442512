# ==============================================================================
# CUSTOM EXCEPTIONS - Application Error Hierarchy
# ==============================================================================
# Structured exception classes for consistent error handling
# Each exception maps to a response envelope status and an HTTP status code
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, Optional

from resource_api.core.constants import Messages


class AppException(Exception):
    """
    Base exception for all application errors.

    Provides a consistent interface for error handling with:
    - Envelope status for programmatic identification
    - HTTP status code mapping
    - Human-readable message and optional context

    Attributes:
        message: Human-readable error description
        status: Envelope status string (e.g. ``VALIDATION_ERROR``)
        status_code: HTTP status code to return
        details: Additional context dictionary

    Example:
        >>> raise AppException(
        ...     message="Something went wrong",
        ...     status="INTERNAL_SERVER_ERROR",
        ...     status_code=500
        ... )
    """

    def __init__(
        self,
        message: str = Messages.INTERNAL_SERVER_ERROR,
        status: str = "INTERNAL_SERVER_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status = status
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to the response envelope shape.

        Returns:
            Dictionary with ``status`` and ``message`` keys
        """
        body: Dict[str, Any] = {
            "status": self.status,
            "message": self.message,
        }
        if self.details:
            body["data"] = self.details
        return body

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"status='{self.status}', "
            f"status_code={self.status_code})"
        )


# ==============================================================================
# REQUEST EXCEPTIONS
# ==============================================================================

class ValidationError(AppException):
    """
    Raised when input validation fails.

    Maps to HTTP 422 Unprocessable Entity. The message aggregates every
    field violation.
    """

    def __init__(
        self,
        message: str = Messages.VALIDATION_ERROR,
        errors: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status="VALIDATION_ERROR",
            status_code=422,
            details={"validation_errors": errors} if errors else None,
        )
        self.errors = errors or {}


class BadRequestError(AppException):
    """Raised for requests missing mandatory parameters (HTTP 400)."""

    def __init__(
        self,
        message: str = Messages.BAD_REQUEST,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status="BAD_REQUEST",
            status_code=400,
            details=details,
        )


# ==============================================================================
# RESOURCE EXCEPTIONS
# ==============================================================================

class NotFoundError(AppException):
    """
    Raised when no document matches the request.

    Maps to HTTP 404 with the ``RECORD_NOT_FOUND`` envelope status.

    Attributes:
        resource_type: Type of resource that was not found
        resource_id: Identifier of the missing resource
    """

    def __init__(
        self,
        message: str = Messages.RECORD_NOT_FOUND,
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ) -> None:
        super().__init__(
            message=message,
            status="RECORD_NOT_FOUND",
            status_code=404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


# ==============================================================================
# DATABASE EXCEPTIONS
# ==============================================================================

class PersistenceError(AppException):
    """
    Raised when the document store fails.

    Covers constraint violations (duplicate keys) as well as lost
    connectivity. The driver message is kept as-is.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status="INTERNAL_SERVER_ERROR",
            status_code=500,
            details=details,
        )


# ==============================================================================
# AUTHENTICATION & AUTHORIZATION EXCEPTIONS
# ==============================================================================

class AuthenticationError(AppException):
    """
    Raised when authentication fails.

    Maps to HTTP 401 Unauthorized.

    Common causes:
    - Missing authentication header
    - Invalid or expired token
    - Token issued for another platform
    """

    def __init__(
        self,
        message: str = "Unauthorized access.",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status="UNAUTHORIZED",
            status_code=401,
            details=details,
        )


class TokenExpiredError(AuthenticationError):
    """Raised when the JWT has expired."""

    def __init__(self, message: str = "Token has expired") -> None:
        super().__init__(message=message)


class InvalidTokenError(AuthenticationError):
    """Raised when the JWT is invalid or malformed."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message=message)


class AuthorizationError(AppException):
    """
    Raised when the caller's role may not run an operation.

    Maps to HTTP 403 Forbidden.
    """

    def __init__(
        self,
        message: str = "You are not authorized to access this resource.",
        required_permission: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=message,
            status="FORBIDDEN",
            status_code=403,
            details={"required_permission": required_permission} if required_permission else None,
        )


# ==============================================================================
# RATE LIMITING EXCEPTIONS
# ==============================================================================

class RateLimitError(AppException):
    """
    Raised when rate limit is exceeded.

    Maps to HTTP 429 Too Many Requests.

    Attributes:
        retry_after: Seconds until the client can retry
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int = 60,
    ) -> None:
        super().__init__(
            message=message,
            status="RATE_LIMITED",
            status_code=429,
        )
        self.retry_after = retry_after
