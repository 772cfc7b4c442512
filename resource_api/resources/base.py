# ==============================================================================
# RESOURCE DEFINITION - Configuration of One CRUD Resource
# ==============================================================================
# Everything a generic controller and router need to serve a resource
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Mapping, Optional

from resource_api.core.constants import DocumentFields, Operations
from resource_api.validation.rules import SchemaKeys


@dataclass(frozen=True)
class ResourceDefinition:
    """
    Declarative description of a resource.

    Attributes:
        name: Route segment and display name (``order``)
        collection: MongoDB collection name
        create_keys: Rules applied on create
        update_keys: Rules applied on full update
        partial_update_keys: Rules applied on partial update; nothing required
        references: Reference field -> collection it points to, for populate
        permissions: Operation -> roles allowed to run it
        platform: Token platform the routes are served to; ``None`` means
            the configured default
    """

    name: str
    collection: str
    create_keys: SchemaKeys
    update_keys: SchemaKeys
    partial_update_keys: SchemaKeys
    references: Mapping[str, str] = field(default_factory=dict)
    permissions: Mapping[str, FrozenSet[str]] = field(default_factory=dict)
    platform: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()

    def model_fields(self) -> List[str]:
        """Every field a filter may name on this resource."""
        names = set(self.create_keys.field_names())
        names.update(self.update_keys.field_names())
        names.update(self.references)
        return sorted(names | DocumentFields.FILTERABLE)

    def creation_defaults(self) -> Dict[str, object]:
        return self.create_keys.defaults()

    def allowed_roles(self, operation: str) -> FrozenSet[str]:
        if operation not in Operations.ALL:
            raise ValueError(f"Unknown operation: {operation}")
        return self.permissions.get(operation, frozenset())

    def is_allowed(self, operation: str, role: Optional[str]) -> bool:
        return role is not None and role in self.allowed_roles(operation)
