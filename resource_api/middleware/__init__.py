# ==============================================================================
# MIDDLEWARE PACKAGE INITIALIZATION
# ==============================================================================

"""
Middleware Module
=================

FastAPI middleware implementations:
- Rate limiting
- Request logging
"""

from resource_api.middleware.rate_limiter import RateLimitMiddleware
from resource_api.middleware.request_logger import RequestLoggerMiddleware

__all__ = [
    "RateLimitMiddleware",
    "RequestLoggerMiddleware",
]
