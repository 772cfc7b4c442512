# ==============================================================================
# MAIN API ROUTER - Route Aggregation
# ==============================================================================
# One CRUD router per registered resource, under the platform prefix
# ==============================================================================

from __future__ import annotations

from fastapi import APIRouter

from resource_api.core.settings import settings
from resource_api.api.v1 import build_resource_router
from resource_api.resources import RESOURCES

# Create main API router
api_router = APIRouter()

for definition in RESOURCES:
    api_router.include_router(
        build_resource_router(definition),
        prefix=settings.API_PREFIX,
    )
