# ==============================================================================
# RATE LIMITER TESTS
# ==============================================================================
# Tests for the fixed window limiter in front of the API
# ==============================================================================

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from resource_api.middleware import RateLimitMiddleware, RequestLoggerMiddleware

LIMIT_MESSAGE = "Rate limit exceeded, please try again after 30 minutes"


def _limited_app(enabled: bool = True) -> FastAPI:
    app = FastAPI()
    app.add_middleware(
        RateLimitMiddleware,
        requests_limit=2,
        window_seconds=1800,
        enabled=enabled,
    )
    app.add_middleware(RequestLoggerMiddleware)

    @app.get("/device/api/v1/order/{id}")
    async def order(id: str) -> dict:
        return {"id": id}

    @app.get("/swagger/index.html")
    async def swagger() -> dict:
        return {}

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy"}

    return app


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRateLimiter:
    """Tests for RateLimitMiddleware."""

    @pytest.mark.asyncio
    async def test_limit_exceeded(self):
        async with _client(_limited_app()) as client:
            first = await client.get("/device/api/v1/order/1")
            second = await client.get("/device/api/v1/order/2")
            third = await client.get("/device/api/v1/order/3")

        assert first.status_code == 200
        assert first.headers["X-RateLimit-Limit"] == "2"
        assert first.headers["X-RateLimit-Remaining"] == "1"
        assert second.headers["X-RateLimit-Remaining"] == "0"

        assert third.status_code == 429
        assert third.json() == {"status": "RATE_LIMITED", "message": LIMIT_MESSAGE}
        assert 0 < int(third.headers["Retry-After"]) <= 1800

    @pytest.mark.asyncio
    async def test_clients_counted_separately(self):
        async with _client(_limited_app()) as client:
            for _ in range(2):
                await client.get("/device/api/v1/order/1", headers={"X-Forwarded-For": "10.0.0.1"})
            blocked = await client.get("/device/api/v1/order/1", headers={"X-Forwarded-For": "10.0.0.1"})
            other = await client.get("/device/api/v1/order/1", headers={"X-Forwarded-For": "10.0.0.2, 10.0.0.1"})

        assert blocked.status_code == 429
        assert other.status_code == 200

    @pytest.mark.asyncio
    async def test_skipped_paths(self):
        async with _client(_limited_app()) as client:
            responses = [await client.get("/swagger/index.html") for _ in range(3)]
            responses += [await client.get("/health") for _ in range(3)]

        assert all(response.status_code == 200 for response in responses)
        assert "X-RateLimit-Limit" not in responses[0].headers

    @pytest.mark.asyncio
    async def test_disabled(self):
        async with _client(_limited_app(enabled=False)) as client:
            responses = [await client.get("/device/api/v1/order/1") for _ in range(5)]

        assert all(response.status_code == 200 for response in responses)
        assert "X-RateLimit-Limit" not in responses[0].headers

    def test_window_resets(self):
        limiter = RateLimitMiddleware(app=None, requests_limit=1, window_seconds=60, enabled=True)

        assert limiter._check_rate_limit("client")[0] is True
        assert limiter._check_rate_limit("client")[0] is False

        started, hits = limiter._windows["client"]
        limiter._windows["client"] = (started - 60, hits)

        assert limiter._check_rate_limit("client")[0] is True

    def test_check_rate_limit_counts(self):
        limiter = RateLimitMiddleware(app=None, requests_limit=3, window_seconds=60, enabled=True)

        results = [limiter._check_rate_limit("client")[:2] for _ in range(4)]

        assert results == [(True, 2), (True, 1), (True, 0), (False, 0)]


class TestRequestLogger:
    """Tests for RequestLoggerMiddleware."""

    @pytest.mark.asyncio
    async def test_request_id_echoed(self):
        async with _client(_limited_app()) as client:
            generated = await client.get("/health")
            forwarded = await client.get("/health", headers={"X-Request-ID": "abc123"})

        assert len(generated.headers["X-Request-ID"]) == 8
        assert forwarded.headers["X-Request-ID"] == "abc123"
        assert generated.headers["X-Response-Time"].endswith("ms")
