# ==============================================================================
# MONGODB ADAPTER - Motor Async Driver Implementation
# ==============================================================================
# Owns the Motor client and hands out collections to the data layer
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)

from resource_api.core.settings import settings
from resource_api.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class MongoDBAdapter:
    """
    MongoDB database adapter using Motor async driver.

    Features:
        - Connection lifecycle (connect, disconnect, health check)
        - Collection lookup by name for the data-access helpers
        - Client injection, so tests can hand in an in-memory client

    Attributes:
        _connection_url: MongoDB connection string
        _database_name: Target database name
        _client: Motor async client
        _database: Target database instance

    Example:
        >>> adapter = MongoDBAdapter()
        >>> await adapter.connect()
        >>> orders = adapter.collection("orders")
    """

    def __init__(
        self,
        connection_url: Optional[str] = None,
        database_name: Optional[str] = None,
        client: Optional[Any] = None,
    ) -> None:
        """
        Initialize MongoDB adapter.

        Args:
            connection_url: MongoDB connection URI (defaults to settings)
            database_name: Database name (defaults to settings)
            client: Ready-made client; skips client creation in connect()
        """
        self._connection_url = connection_url or settings.MONGODB_URL
        self._database_name = database_name or settings.MONGODB_DB
        self._client: Optional[AsyncIOMotorClient] = client
        self._database: Optional[AsyncIOMotorDatabase] = (
            client[self._database_name] if client is not None else None
        )

    @property
    def database_name(self) -> str:
        return self._database_name

    @property
    def is_connected(self) -> bool:
        return self._database is not None

    # ==========================================================================
    # LIFECYCLE METHODS
    # ==========================================================================

    async def connect(self) -> None:
        """
        Initialize MongoDB connection.

        Creates the Motor client (unless one was injected), selects the
        target database and pings the server.

        Raises:
            PersistenceError: If the server cannot be reached
        """
        try:
            if self._client is None:
                self._client = AsyncIOMotorClient(
                    self._connection_url,
                    maxPoolSize=settings.DB_POOL_SIZE,
                    minPoolSize=1,
                    maxIdleTimeMS=settings.DB_POOL_TIMEOUT * 1000,
                )
            self._database = self._client[self._database_name]

            # Verify connection
            await self._client.admin.command("ping")

            logger.info(f"MongoDB adapter connected to {self._database_name}")

        except Exception as e:
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise PersistenceError(f"MongoDB connection failed: {e}")

    async def disconnect(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._database = None
            logger.info("MongoDB adapter disconnected")

    async def health_check(self) -> bool:
        """
        Verify database connectivity.

        Returns:
            True if the server answers a ping
        """
        try:
            if self._client is not None:
                await self._client.admin.command("ping")
                return True
            return False
        except Exception as e:
            logger.warning(f"MongoDB health check failed: {e}")
            return False

    # ==========================================================================
    # COLLECTION ACCESS
    # ==========================================================================

    def collection(self, name: str) -> AsyncIOMotorCollection:
        """
        Return the named collection of the target database.

        Raises:
            RuntimeError: If the adapter is not connected
        """
        if self._database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._database[name]
