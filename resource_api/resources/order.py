# ==============================================================================
# ORDER RESOURCE
# ==============================================================================
# Field rules, references and permissions for /device/api/v1/order
# ==============================================================================

from __future__ import annotations

from resource_api.core.constants import Operations, Roles
from resource_api.resources.base import ResourceDefinition
from resource_api.validation.rules import FieldRule, SchemaKeys

ORDER_STATUSES = ("pending", "confirmed", "shipped", "delivered", "cancelled")

_ORDER_RULES = {
    "customerName": FieldRule(type="string", required=True, min_length=1, max_length=200),
    "item": FieldRule(type="string", required=True, min_length=1, max_length=200),
    "quantity": FieldRule(type="integer", required=True, min_value=1),
    "price": FieldRule(type="number", required=True, min_value=0),
    "status": FieldRule(type="string", choices=ORDER_STATUSES, default="pending"),
    "shippingAddress": FieldRule(type="string", nullable=True, max_length=500),
    "orderDate": FieldRule(type="datetime", nullable=True),
    "isActive": FieldRule(type="boolean", default=True),
    "isDeleted": FieldRule(type="boolean", default=False),
}

order_schema_keys = SchemaKeys("OrderCreate", _ORDER_RULES)

# full update: the same required fields must be resent
order_update_schema_keys = SchemaKeys("OrderUpdate", _ORDER_RULES)

order_partial_update_schema_keys = order_schema_keys.relaxed("OrderPartialUpdate")

_EVERYONE = frozenset({Roles.ADMIN, Roles.USER})

ORDER = ResourceDefinition(
    name="order",
    collection="orders",
    create_keys=order_schema_keys,
    update_keys=order_update_schema_keys,
    partial_update_keys=order_partial_update_schema_keys,
    references={"addedBy": "users", "updatedBy": "users"},
    permissions={operation: _EVERYONE for operation in Operations.ALL},
)
