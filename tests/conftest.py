# ==============================================================================
# CONFTEST - Pytest Fixtures and Configuration
# ==============================================================================
# Shared fixtures for all tests
# ==============================================================================

from __future__ import annotations

import os
from typing import AsyncGenerator, Dict

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

# Set test environment before importing app
os.environ["ENVIRONMENT"] = "development"
os.environ["DEBUG"] = "false"
os.environ["MONGODB_DB"] = "resource_api_test"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only-32chars!"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"



# ==============================================================================
# DATABASE FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def adapter():
    """In-memory MongoDB adapter installed as the shared instance."""
    from resource_api.database.adapters.mongodb_adapter import MongoDBAdapter
    from resource_api.database.factory import DatabaseFactory

    DatabaseFactory.reset()
    mock_adapter = MongoDBAdapter(client=AsyncMongoMockClient())
    DatabaseFactory.register(mock_adapter)

    yield mock_adapter

    DatabaseFactory.reset()


@pytest.fixture
def orders(adapter):
    """The orders collection of the in-memory database."""
    return adapter.collection("orders")


@pytest.fixture
def controller(adapter):
    """Order controller bound to the in-memory database."""
    from resource_api.resources import ORDER
    from resource_api.services.resource_service import ResourceController

    return ResourceController(ORDER, adapter)


# ==============================================================================
# HTTP CLIENT FIXTURES
# ==============================================================================

@pytest_asyncio.fixture
async def client(adapter) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    # Import app after environment is set
    from resource_api.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        timeout=30.0,
    ) as async_client:
        yield async_client


@pytest.fixture
def user_id() -> str:
    return str(ObjectId())


def make_token(subject: str, role: str = "user", platform: str = "device") -> str:
    from resource_api.core.security import create_access_token

    return create_access_token(subject=subject, role=role, platform=platform)


@pytest.fixture
def auth_headers(user_id: str) -> Dict[str, str]:
    """Bearer header of a device platform user."""
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient, auth_headers: Dict[str, str], user_id: str):
    """
    Authenticated client.

    Returns:
        Tuple of (client, user_id)
    """
    client.headers.update(auth_headers)
    yield client, user_id
    client.headers.pop("Authorization", None)


# ==============================================================================
# HELPER FIXTURES
# ==============================================================================

@pytest.fixture
def sample_order_data() -> dict:
    """Generate a valid order body."""
    return {
        "customerName": "Ada Lovelace",
        "item": "Analytical engine gear",
        "quantity": 3,
        "price": 12.5,
        "shippingAddress": "12 St James's Square, London",
    }
