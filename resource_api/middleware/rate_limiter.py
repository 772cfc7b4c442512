# ==============================================================================
# RATE LIMITER MIDDLEWARE
# ==============================================================================
# Fixed window rate limiting, counted per client address
# ==============================================================================

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Tuple

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from resource_api.core.constants import APIConstants
from resource_api.core.exceptions import RateLimitError
from resource_api.core.settings import settings

logger = logging.getLogger(__name__)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting middleware using a fixed window counter.

    Each client may send ``requests_limit`` requests per window. The window
    starts at the client's first request and is not extended by later ones.
    Paths containing one of the skip patterns are never counted.

    Attributes:
        requests_limit: Maximum requests per window
        window_seconds: Window length in seconds
        message: Message returned once the limit is hit
        skip_patterns: Path fragments that bypass the limiter
        enabled: Whether requests are counted at all
        _windows: Window start and request count per client
    """

    def __init__(
        self,
        app,
        requests_limit: Optional[int] = None,
        window_seconds: Optional[int] = None,
        message: Optional[str] = None,
        skip_patterns: Optional[Iterable[str]] = None,
        enabled: Optional[bool] = None,
    ):
        super().__init__(app)
        self.requests_limit = requests_limit or settings.RATE_LIMIT_REQUESTS
        self.window_seconds = window_seconds or settings.RATE_LIMIT_WINDOW
        self.message = message or settings.RATE_LIMIT_MESSAGE
        self.skip_patterns = tuple(
            settings.RATE_LIMIT_SKIP_PATTERNS if skip_patterns is None else skip_patterns
        )
        self.enabled = settings.RATE_LIMIT_ENABLED if enabled is None else enabled
        self._windows: Dict[str, Tuple[float, int]] = {}

    def _get_client_id(self, request: Request) -> str:
        """Get client identifier from request."""
        # Try to get real IP from forwarded headers
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"

    def _is_skipped(self, path: str) -> bool:
        if path in APIConstants.UNTHROTTLED_PATHS:
            return True
        return any(pattern in path for pattern in self.skip_patterns)

    def _check_rate_limit(self, client_id: str) -> Tuple[bool, int, int]:
        """
        Count one request against the client's window.

        Returns:
            Tuple of (allowed, remaining, reset_seconds)
        """
        now = time.time()
        started, hits = self._windows.get(client_id, (now, 0))

        if now - started >= self.window_seconds:
            started, hits = now, 0

        reset = max(1, int(started + self.window_seconds - now))

        if hits >= self.requests_limit:
            return False, 0, reset

        hits += 1
        self._windows[client_id] = (started, hits)
        return True, self.requests_limit - hits, reset

    def _headers(self, remaining: int, reset: int) -> Dict[str, str]:
        return {
            APIConstants.RATE_LIMIT_HEADER: str(self.requests_limit),
            APIConstants.RATE_LIMIT_REMAINING_HEADER: str(remaining),
            APIConstants.RATE_LIMIT_RESET_HEADER: str(reset),
        }

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """Process request through rate limiter."""
        if not self.enabled or self._is_skipped(request.url.path):
            return await call_next(request)

        client_id = self._get_client_id(request)
        allowed, remaining, reset = self._check_rate_limit(client_id)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client_id} on {request.url.path}")
            error = RateLimitError(message=self.message, retry_after=reset)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers={
                    **self._headers(0, reset),
                    "Retry-After": str(error.retry_after),
                },
            )

        response = await call_next(request)
        response.headers.update(self._headers(remaining, reset))
        return response
