# ==============================================================================
# CORE PACKAGE INITIALIZATION
# ==============================================================================
# Core utilities: Settings, Security, Exceptions, Constants, Logger
# ==============================================================================

"""
Core Module
===========

Contains core utilities and configurations for the application:
- settings: Environment configuration management
- security: JWT access token handling
- exceptions: Custom exception classes
- constants: Application-wide constants
- logger: Process-wide logging setup
"""

from resource_api.core.settings import settings, get_settings
from resource_api.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    BadRequestError,
    NotFoundError,
    PersistenceError,
    RateLimitError,
    ValidationError,
)

__all__ = [
    "settings",
    "get_settings",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "BadRequestError",
    "NotFoundError",
    "PersistenceError",
    "RateLimitError",
    "ValidationError",
]
