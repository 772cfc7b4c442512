# ==============================================================================
# API V1 ENDPOINTS PACKAGE
# ==============================================================================

"""
API V1 Endpoints
================

Generic CRUD routes, built once per resource definition.
"""

from resource_api.api.v1.resources import build_resource_router, envelope_response

__all__ = ["build_resource_router", "envelope_response"]
