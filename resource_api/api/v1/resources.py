# ==============================================================================
# RESOURCE ENDPOINTS - Generic CRUD Routes
# ==============================================================================
# create / list / count / get / update / partial-update for any resource
# ==============================================================================

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from resource_api.api.dependencies import (
    AuthenticatedUser,
    authorize,
    controller_provider,
)
from resource_api.core.constants import Operations
from resource_api.resources.base import ResourceDefinition
from resource_api.schemas.base import ResponseEnvelope
from resource_api.services.resource_service import ResourceController


def envelope_response(envelope: ResponseEnvelope) -> JSONResponse:
    """Serialize an envelope with the HTTP status its outcome maps to."""
    return JSONResponse(
        status_code=envelope.http_status,
        content=jsonable_encoder(envelope.to_content()),
    )


def build_resource_router(definition: ResourceDefinition) -> APIRouter:
    """
    Bind the six CRUD routes of ``definition``.

    Every route runs the authentication, platform and role gates for its
    operation before the controller is called.
    """
    name = definition.display_name
    router = APIRouter(prefix=f"/{definition.name}", tags=[name])
    get_controller = controller_provider(definition)

    @router.post(
        "/create",
        summary=f"Create {name}",
        description=f"Validate the body and store a new {name} document.",
    )
    async def create(
        payload: Any = Body(None),
        user: AuthenticatedUser = Depends(authorize(definition, Operations.CREATE)),
        controller: ResourceController = Depends(get_controller),
    ) -> JSONResponse:
        return envelope_response(await controller.create(payload or {}, user.id))

    @router.post(
        "/list",
        summary=f"List {name} documents",
        description="Filter with `query`, page with `options`, or count with `isCountOnly`.",
    )
    async def find_all(
        payload: Any = Body(None),
        _: AuthenticatedUser = Depends(authorize(definition, Operations.LIST)),
        controller: ResourceController = Depends(get_controller),
    ) -> JSONResponse:
        return envelope_response(await controller.find_all(payload or {}))

    @router.post(
        "/count",
        summary=f"Count {name} documents",
        description="Count the documents matching `where`.",
    )
    async def count(
        payload: Any = Body(None),
        _: AuthenticatedUser = Depends(authorize(definition, Operations.COUNT)),
        controller: ResourceController = Depends(get_controller),
    ) -> JSONResponse:
        return envelope_response(await controller.count(payload or {}))

    @router.get(
        "/{id}",
        summary=f"Get {name} by ID",
    )
    async def get(
        id: str,
        populate: Optional[str] = Query(None, description="Space separated reference fields"),
        select: Optional[str] = Query(None, description="Space separated projection"),
        _: AuthenticatedUser = Depends(authorize(definition, Operations.GET)),
        controller: ResourceController = Depends(get_controller),
    ) -> JSONResponse:
        options = {key: value for key, value in (("populate", populate), ("select", select)) if value}
        return envelope_response(await controller.get(id, options))

    @router.put(
        "/update/{id}",
        summary=f"Update {name}",
        description="Full update; every required field must be sent.",
    )
    async def update(
        id: str,
        payload: Any = Body(None),
        user: AuthenticatedUser = Depends(authorize(definition, Operations.UPDATE)),
        controller: ResourceController = Depends(get_controller),
    ) -> JSONResponse:
        return envelope_response(await controller.update(id, payload or {}, user.id))

    @router.put(
        "/partial-update/{id}",
        summary=f"Partially update {name}",
        description="Only the fields sent are changed; `addedBy` is ignored.",
    )
    async def partial_update(
        id: str,
        payload: Any = Body(None),
        user: AuthenticatedUser = Depends(authorize(definition, Operations.PARTIAL_UPDATE)),
        controller: ResourceController = Depends(get_controller),
    ) -> JSONResponse:
        return envelope_response(await controller.partial_update(id, payload or {}, user.id))

    return router
