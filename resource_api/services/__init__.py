"""
Services Module
===============

Business operations sitting between the routers and the data layer.
"""

from resource_api.services.resource_service import ResourceController

__all__ = ["ResourceController"]
