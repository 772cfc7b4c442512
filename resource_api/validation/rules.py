# ==============================================================================
# FIELD RULES - Declarative Schema Keys
# ==============================================================================
# A resource describes its request bodies as tables of FieldRule entries.
# Each table is compiled once into a pydantic model that does the checking.
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from functools import cached_property
from typing import (
    Annotated,
    Any,
    Dict,
    Iterable,
    List,
    Literal,
    Mapping,
    Optional,
    Tuple,
    Type,
)

from bson import ObjectId
from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    create_model,
)


def is_valid_object_id(value: Any) -> bool:
    """Return True when ``value`` is a well-formed document identity."""
    if isinstance(value, ObjectId):
        return True
    return isinstance(value, str) and ObjectId.is_valid(value)


def _check_object_id(value: str) -> str:
    if not ObjectId.is_valid(value):
        raise ValueError("must be a valid objectId")
    return value


ObjectIdStr = Annotated[str, AfterValidator(_check_object_id)]

FieldType = Literal[
    "string",
    "integer",
    "number",
    "boolean",
    "datetime",
    "object",
    "array",
    "objectId",
]

# numbers and booleans are never coerced from other JSON types
_PYTHON_TYPES: Dict[str, Any] = {
    "string": str,
    "integer": StrictInt,
    "number": StrictFloat,
    "boolean": StrictBool,
    "datetime": datetime,
    "object": Dict[str, Any],
    "array": List[Any],
    "objectId": ObjectIdStr,
}


@dataclass(frozen=True)
class FieldRule:
    """
    Validation rule for one field of a request body.

    Attributes:
        type: Value type (string, integer, number, boolean, datetime,
            object, array, objectId)
        required: Field must be present
        nullable: ``null`` is accepted
        choices: Enumeration of accepted values
        min_value: Inclusive lower bound for numbers
        max_value: Inclusive upper bound for numbers
        min_length: Minimum length for strings and arrays
        max_length: Maximum length for strings and arrays
        pattern: Regular expression strings must match
        default: Value stored on creation when the field is omitted
    """

    type: FieldType = "string"
    required: bool = False
    nullable: bool = False
    choices: Optional[Tuple[Any, ...]] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    default: Any = None

    def annotation(self) -> Any:
        """Python type the compiled model uses for this field."""
        if self.choices:
            annotation: Any = Literal[self.choices]
        else:
            annotation = _PYTHON_TYPES[self.type]
        if self.nullable:
            annotation = Optional[annotation]
        return annotation

    def field_info(self) -> Any:
        constraints: Dict[str, Any] = {}
        if self.min_value is not None:
            constraints["ge"] = self.min_value
        if self.max_value is not None:
            constraints["le"] = self.max_value
        if self.min_length is not None:
            constraints["min_length"] = self.min_length
        if self.max_length is not None:
            constraints["max_length"] = self.max_length
        if self.pattern is not None:
            constraints["pattern"] = self.pattern
        if self.required:
            return Field(..., **constraints)
        return Field(None, **constraints)


class SchemaKeys:
    """
    Named table of field rules.

    Unknown keys in a candidate are ignored and dropped from the
    validated value, the way a strict document schema discards them.

    Example:
        >>> keys = SchemaKeys("OrderCreate", {
        ...     "item": FieldRule(type="string", required=True),
        ...     "quantity": FieldRule(type="integer", min_value=1),
        ... })
        >>> sorted(keys.required_fields())
        ['item']
    """

    def __init__(self, name: str, rules: Mapping[str, FieldRule]) -> None:
        self.name = name
        self.rules: Dict[str, FieldRule] = dict(rules)

    @cached_property
    def model(self) -> Type[BaseModel]:
        """Pydantic model compiled from the rule table."""
        fields = {
            field_name: (rule.annotation(), rule.field_info())
            for field_name, rule in self.rules.items()
        }
        return create_model(
            self.name,
            __config__=ConfigDict(extra="ignore"),
            **fields,
        )

    def field_names(self) -> List[str]:
        return list(self.rules)

    def required_fields(self) -> List[str]:
        return [name for name, rule in self.rules.items() if rule.required]

    def defaults(self) -> Dict[str, Any]:
        """Creation defaults declared on the rules."""
        return {
            name: rule.default
            for name, rule in self.rules.items()
            if rule.default is not None
        }

    def relaxed(self, name: str, exclude: Iterable[str] = ()) -> "SchemaKeys":
        """Copy of this table where no field is required.

        Fields listed in ``exclude`` are left out entirely.
        """
        excluded = set(exclude)
        rules = {
            field_name: replace(rule, required=False, default=None)
            for field_name, rule in self.rules.items()
            if field_name not in excluded
        }
        return SchemaKeys(name, rules)

    def __repr__(self) -> str:
        return f"SchemaKeys(name='{self.name}', fields={self.field_names()})"
