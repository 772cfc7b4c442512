# ==============================================================================
# RESOURCE SERVICE - Generic CRUD Controller
# ==============================================================================
# validate -> data access -> response envelope, for any ResourceDefinition
# ==============================================================================

from __future__ import annotations

import functools
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from motor.motor_asyncio import AsyncIOMotorCollection

from resource_api.core.constants import DocumentFields, Messages
from resource_api.core.exceptions import (
    AppException,
    BadRequestError,
    NotFoundError,
    ValidationError,
)
from resource_api.database import db_service
from resource_api.database.adapters.mongodb_adapter import MongoDBAdapter
from resource_api.resources.base import ResourceDefinition
from resource_api.schemas.base import ResponseEnvelope, ResponseStatus
from resource_api.validation import (
    SchemaKeys,
    is_valid_object_id,
    validate_filter,
    validate_params,
)

logger = logging.getLogger(__name__)

Operation = Callable[..., Awaitable[ResponseEnvelope]]


def envelope_boundary(func: Operation) -> Operation:
    """
    Convert every exception raised by an operation into an envelope.

    Application errors keep their own status and message; anything else
    becomes INTERNAL_SERVER_ERROR carrying the exception message.
    """

    @functools.wraps(func)
    async def wrapper(self: "ResourceController", *args: Any, **kwargs: Any) -> ResponseEnvelope:
        try:
            return await func(self, *args, **kwargs)
        except AppException as exc:
            if exc.status == ResponseStatus.INTERNAL_SERVER_ERROR.value:
                logger.error(f"{self.definition.name}.{func.__name__} failed: {exc.message}")
            return ResponseEnvelope.from_exception(exc)
        except Exception as exc:
            logger.exception(f"{self.definition.name}.{func.__name__} failed: {exc}")
            return ResponseEnvelope.internal_server_error(message=str(exc))

    return wrapper


def strip_server_fields(payload: Any) -> Any:
    """Drop values only the server may set (``addedBy``, ``updatedBy``, ids, timestamps)."""
    if not isinstance(payload, dict):
        return payload
    return {
        key: value for key, value in payload.items()
        if key not in DocumentFields.SERVER_STAMPED
    }


class ResourceController:
    """
    CRUD operations for one resource.

    Every public operation returns a ResponseEnvelope and never raises.
    Validation always happens before the store is touched.

    Attributes:
        definition: Resource configuration
        adapter: Connected MongoDB adapter

    Example:
        >>> controller = ResourceController(ORDER, DatabaseFactory.get_adapter())
        >>> envelope = await controller.get("64b7f0c2e1a4c3b2a1d0e9f8")
        >>> envelope.status
        'RECORD_NOT_FOUND'
    """

    def __init__(
        self,
        definition: ResourceDefinition,
        adapter: MongoDBAdapter,
    ) -> None:
        self.definition = definition
        self.adapter = adapter

    # ==========================================================================
    # HELPERS
    # ==========================================================================

    @property
    def collection(self) -> AsyncIOMotorCollection:
        return self.adapter.collection(self.definition.collection)

    def _references(self) -> Dict[str, AsyncIOMotorCollection]:
        return {
            path: self.adapter.collection(collection_name)
            for path, collection_name in self.definition.references.items()
        }

    @staticmethod
    def _validated_body(payload: Any, schema_keys: SchemaKeys) -> Dict[str, Any]:
        result = validate_params(strip_server_fields(payload), schema_keys)
        if not result.is_valid:
            raise ValidationError(f"{Messages.INVALID_PARAMS_PREFIX}, {result.message}")
        return result.value

    def _validated_filter(self, payload: Any) -> Dict[str, Any]:
        result = validate_filter(payload, model_fields=self.definition.model_fields())
        if not result.is_valid:
            raise ValidationError(result.message)
        return result.value

    @staticmethod
    def _require_identity(id: Optional[str]) -> None:
        if not id:
            raise BadRequestError(Messages.ID_REQUIRED)
        if not is_valid_object_id(id):
            raise ValidationError(Messages.INVALID_OBJECT_ID)

    # ==========================================================================
    # OPERATIONS
    # ==========================================================================

    @envelope_boundary
    async def create(self, payload: Any, actor_id: str) -> ResponseEnvelope:
        """
        Create a document.

        ``addedBy`` is always the authenticated actor, whatever the body says.
        """
        data = self._validated_body(payload, self.definition.create_keys)
        document = {**self.definition.creation_defaults(), **data}
        created = await db_service.create(self.collection, document, actor_id=actor_id)
        logger.debug(f"Created {self.definition.name} {created['id']} by {actor_id}")
        return ResponseEnvelope.success(data=created)

    @envelope_boundary
    async def find_all(self, payload: Any) -> ResponseEnvelope:
        """
        List documents matching ``query`` with paging ``options``.

        ``isCountOnly`` answers ``{"totalRecords": n}`` without paginating.
        An empty page is reported as RECORD_NOT_FOUND, not as an empty
        success.
        """
        filters = self._validated_filter(payload)
        query = filters.get("query") or {}

        if filters.get("isCountOnly"):
            total = await db_service.count(self.collection, query)
            return ResponseEnvelope.success(data={"totalRecords": total})

        found = await db_service.paginate(
            self.collection,
            query,
            filters.get("options") or {},
            references=self._references(),
        )
        if not found["data"]:
            raise NotFoundError(resource_type=self.definition.name)
        return ResponseEnvelope.success(data=found)

    @envelope_boundary
    async def get(
        self,
        id: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> ResponseEnvelope:
        """Fetch one document by identity; a malformed identity is a validation error."""
        if not is_valid_object_id(id):
            raise ValidationError(Messages.INVALID_OBJECT_ID)
        options = self._validated_filter({"options": options or {}}).get("options")

        found = await db_service.find_one(
            self.collection,
            {DocumentFields.MONGO_ID: id},
            options,
            references=self._references(),
        )
        if found is None:
            raise NotFoundError(resource_type=self.definition.name, resource_id=id)
        return ResponseEnvelope.success(data=found)

    @envelope_boundary
    async def count(self, payload: Any) -> ResponseEnvelope:
        """Count documents matching ``where``; zero is a success."""
        filters = self._validated_filter(payload)
        total = await db_service.count(self.collection, filters.get("where") or {})
        return ResponseEnvelope.success(data={"count": total})

    @envelope_boundary
    async def update(self, id: str, payload: Any, actor_id: str) -> ResponseEnvelope:
        """Full update: every required field must be resent."""
        self._require_identity(id)
        data = self._validated_body(payload, self.definition.update_keys)
        return await self._apply_update(id, data, actor_id)

    @envelope_boundary
    async def partial_update(self, id: str, payload: Any, actor_id: str) -> ResponseEnvelope:
        """Partial update: only the fields sent are changed."""
        self._require_identity(id)
        data = self._validated_body(payload, self.definition.partial_update_keys)
        return await self._apply_update(id, data, actor_id)

    async def _apply_update(
        self,
        id: str,
        data: Dict[str, Any],
        actor_id: str,
    ) -> ResponseEnvelope:
        updated = await db_service.update_one(
            self.collection,
            {DocumentFields.MONGO_ID: id},
            data,
            actor_id=actor_id,
        )
        if updated is None:
            raise NotFoundError(resource_type=self.definition.name, resource_id=id)
        logger.debug(f"Updated {self.definition.name} {id} by {actor_id}")
        return ResponseEnvelope.success(data=updated)
