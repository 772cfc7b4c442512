"""Database adapters."""

from resource_api.database.adapters.mongodb_adapter import MongoDBAdapter

__all__ = ["MongoDBAdapter"]
