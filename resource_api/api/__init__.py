# ==============================================================================
# API PACKAGE INITIALIZATION
# ==============================================================================

"""
API Module
==========

FastAPI routers and endpoint definitions:
- dependencies: authentication, permission gates, database access
- v1.resources: generic CRUD router factory
"""

from resource_api.api.router import api_router

__all__ = ["api_router"]
