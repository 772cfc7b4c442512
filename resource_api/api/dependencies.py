# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies for authentication, permissions and database access
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Awaitable, Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from resource_api.core.settings import settings
from resource_api.core.security import verify_access_token
from resource_api.core.exceptions import AuthenticationError, AuthorizationError
from resource_api.database.factory import DatabaseFactory
from resource_api.database.adapters.mongodb_adapter import MongoDBAdapter
from resource_api.resources.base import ResourceDefinition
from resource_api.services.resource_service import ResourceController

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Actor extracted from the access token."""

    id: str
    role: Optional[str] = None
    platform: Optional[str] = None


# ==============================================================================
# DATABASE DEPENDENCIES
# ==============================================================================

async def get_adapter() -> MongoDBAdapter:
    """Return the initialized adapter from the factory."""
    return DatabaseFactory.get_adapter()


DatabaseDep = Annotated[MongoDBAdapter, Depends(get_adapter)]


def controller_provider(
    definition: ResourceDefinition,
) -> Callable[..., Awaitable[ResourceController]]:
    """Dependency building the controller of ``definition`` per request."""

    async def get_controller(adapter: DatabaseDep) -> ResourceController:
        return ResourceController(definition, adapter)

    return get_controller


# ==============================================================================
# AUTHENTICATION DEPENDENCIES
# ==============================================================================

async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> AuthenticatedUser:
    """
    Decode the bearer token into the calling actor.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired
            or carries no subject
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")

    payload = verify_access_token(credentials.credentials)

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Invalid token payload")

    return AuthenticatedUser(
        id=str(user_id),
        role=payload.get("role"),
        platform=payload.get("platform"),
    )


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]


def authorize(
    definition: ResourceDefinition,
    operation: str,
) -> Callable[..., Awaitable[AuthenticatedUser]]:
    """
    Gate for one operation of one resource.

    The token must belong to the resource's platform and its role must be
    listed in the resource's permission table for ``operation``.
    """
    platform = definition.platform or settings.PLATFORM
    # fail at import time on a misspelled operation
    definition.allowed_roles(operation)

    async def check_permission(user: CurrentUser) -> AuthenticatedUser:
        if user.platform != platform:
            raise AuthenticationError("Unauthorized access.")
        if not definition.is_allowed(operation, user.role):
            raise AuthorizationError(required_permission=f"{definition.name}:{operation}")
        return user

    return check_permission
