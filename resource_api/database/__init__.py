# ==============================================================================
# DATABASE PACKAGE INITIALIZATION
# ==============================================================================

"""
Database Module
===============

- adapters.mongodb_adapter: Motor client lifecycle
- factory: process-wide adapter cache
- db_service: resource-agnostic data-access helpers
"""

from resource_api.database.adapters.mongodb_adapter import MongoDBAdapter
from resource_api.database.factory import DatabaseFactory

__all__ = ["DatabaseFactory", "MongoDBAdapter"]
