# ==============================================================================
# DATABASE FACTORY - Adapter Instantiation & Lifecycle Management
# ==============================================================================
# One cached MongoDB adapter per process, shared by every request
# ==============================================================================

from __future__ import annotations

import logging
from typing import Optional

from resource_api.core.exceptions import PersistenceError
from resource_api.database.adapters.mongodb_adapter import MongoDBAdapter

logger = logging.getLogger(__name__)


class DatabaseFactory:
    """
    Factory class for creating and managing the database adapter.

    Features:
        - Lazy adapter creation from settings
        - Singleton caching for the adapter instance
        - Lifecycle management (initialize/shutdown)
        - Registration of a pre-built adapter (tests, scripts)

    Class Attributes:
        _instance: Cached adapter, ``None`` until initialized

    Example:
        >>> await DatabaseFactory.initialize()
        >>> adapter = DatabaseFactory.get_adapter()
        >>> await DatabaseFactory.shutdown()
    """

    _instance: Optional[MongoDBAdapter] = None

    @classmethod
    def create_adapter(cls, **kwargs) -> MongoDBAdapter:
        """
        Create the adapter, or return the cached one.

        Args:
            **kwargs: Adapter configuration
                - connection_url: MongoDB connection URL
                - database_name: MongoDB database name
                - client: Pre-built client
        """
        if cls._instance is None:
            cls._instance = MongoDBAdapter(
                connection_url=kwargs.get("connection_url"),
                database_name=kwargs.get("database_name"),
                client=kwargs.get("client"),
            )
            logger.info("Created MongoDB adapter")
        return cls._instance

    @classmethod
    async def initialize(cls, **kwargs) -> MongoDBAdapter:
        """
        Initialize database connection.

        Should be called at application startup.

        Raises:
            PersistenceError: If connection fails
        """
        adapter = cls.create_adapter(**kwargs)

        try:
            await adapter.connect()
            logger.info(f"Database initialized: {adapter.database_name}")
            return adapter
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise PersistenceError(f"Failed to initialize database: {e}")

    @classmethod
    def register(cls, adapter: MongoDBAdapter) -> MongoDBAdapter:
        """Install an already connected adapter as the shared instance."""
        cls._instance = adapter
        return adapter

    @classmethod
    async def shutdown(cls) -> None:
        """
        Close the database connection and clear the cache.

        Should be called at application shutdown.
        """
        if cls._instance is not None:
            try:
                await cls._instance.disconnect()
            except Exception as e:
                logger.error(f"Error disconnecting MongoDB: {e}")
        cls._instance = None
        logger.info("All database connections closed")

    @classmethod
    def get_adapter(cls) -> MongoDBAdapter:
        """
        Get the existing adapter instance.

        Raises:
            RuntimeError: If adapter not initialized
        """
        if cls._instance is None or not cls._instance.is_connected:
            raise RuntimeError(
                "Database adapter not initialized. "
                "Call DatabaseFactory.initialize() first."
            )
        return cls._instance

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._instance is not None and cls._instance.is_connected

    @classmethod
    async def health_check(cls) -> bool:
        """Check database health; never raises."""
        try:
            return await cls.get_adapter().health_check()
        except Exception:
            return False

    @classmethod
    def reset(cls) -> None:
        """
        Reset factory state.

        Clears the cached adapter without disconnecting.
        Primarily for testing purposes.
        """
        cls._instance = None
