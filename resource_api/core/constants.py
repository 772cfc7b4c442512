# ==============================================================================
# APPLICATION CONSTANTS - Centralized Configuration Values
# ==============================================================================
# Immutable constants used throughout the application
# ==============================================================================

from __future__ import annotations

from typing import Final, FrozenSet


# ==============================================================================
# API CONSTANTS
# ==============================================================================

class APIConstants:
    """API-related constants."""

    # Pagination defaults
    DEFAULT_PAGE: Final[int] = 1
    DEFAULT_PAGE_SIZE: Final[int] = 10

    # Response headers
    RATE_LIMIT_HEADER: Final[str] = "X-RateLimit-Limit"
    RATE_LIMIT_REMAINING_HEADER: Final[str] = "X-RateLimit-Remaining"
    RATE_LIMIT_RESET_HEADER: Final[str] = "X-RateLimit-Reset"
    REQUEST_ID_HEADER: Final[str] = "X-Request-ID"

    # Paths never counted by the rate limiter
    UNTHROTTLED_PATHS: Final[FrozenSet[str]] = frozenset(
        {"/", "/health", "/redoc", "/openapi.json"}
    )


# ==============================================================================
# DOCUMENT CONSTANTS
# ==============================================================================

class DocumentFields:
    """Bookkeeping fields every resource document carries."""

    ID: Final[str] = "id"
    MONGO_ID: Final[str] = "_id"
    ADDED_BY: Final[str] = "addedBy"
    UPDATED_BY: Final[str] = "updatedBy"
    CREATED_AT: Final[str] = "createdAt"
    UPDATED_AT: Final[str] = "updatedAt"
    IS_ACTIVE: Final[str] = "isActive"
    IS_DELETED: Final[str] = "isDeleted"

    # Values clients may never supply; the server stamps them
    SERVER_STAMPED: Final[FrozenSet[str]] = frozenset(
        {ID, MONGO_ID, ADDED_BY, UPDATED_BY, CREATED_AT, UPDATED_AT}
    )

    # Always filterable, whatever the resource declares
    FILTERABLE: Final[FrozenSet[str]] = SERVER_STAMPED | {IS_ACTIVE, IS_DELETED}


# ==============================================================================
# AUTHORIZATION CONSTANTS
# ==============================================================================

class Roles:
    """Roles a token may carry."""

    ADMIN: Final[str] = "admin"
    USER: Final[str] = "user"


class Operations:
    """Operation names used in resource permission tables."""

    CREATE: Final[str] = "create"
    LIST: Final[str] = "list"
    COUNT: Final[str] = "count"
    GET: Final[str] = "get"
    UPDATE: Final[str] = "update"
    PARTIAL_UPDATE: Final[str] = "partial_update"

    ALL: Final[FrozenSet[str]] = frozenset(
        {"create", "list", "count", "get", "update", "partial_update"}
    )


# ==============================================================================
# RESPONSE MESSAGES
# ==============================================================================

class Messages:
    """Default envelope messages."""

    SUCCESS: Final[str] = "Your request is successfully executed"
    VALIDATION_ERROR: Final[str] = "Invalid Data, Validation Failed."
    BAD_REQUEST: Final[str] = "Request parameters are invalid or missing."
    RECORD_NOT_FOUND: Final[str] = "Record not found with specified criteria."
    INTERNAL_SERVER_ERROR: Final[str] = "Internal server error."
    INVALID_PARAMS_PREFIX: Final[str] = "Invalid values in parameters"
    INVALID_OBJECT_ID: Final[str] = "invalid objectId."
    ID_REQUIRED: Final[str] = "Insufficient request parameters! id is required."
