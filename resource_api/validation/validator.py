# ==============================================================================
# REQUEST VALIDATOR - Verdicts for Bodies and Filters
# ==============================================================================
# Pure helpers: they never raise, the caller always gets a verdict
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from resource_api.core.constants import DocumentFields
from resource_api.validation.filters import FilterKeys
from resource_api.validation.rules import FieldRule, SchemaKeys

LOGICAL_OPERATORS = frozenset({"$and", "$or", "$nor"})


@dataclass
class ValidationResult:
    """
    Outcome of a validation call.

    Attributes:
        is_valid: Whether the candidate passed
        message: Every violation joined into one sentence, empty on success
        value: Coerced payload holding only declared fields
    """

    is_valid: bool
    message: str = ""
    value: Dict[str, Any] = field(default_factory=dict)


def format_errors(errors: Iterable[Mapping[str, Any]]) -> str:
    """Join pydantic errors into one human-readable message."""
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error["loc"]) or "value"
        if error["type"] == "missing":
            messages.append(f'"{location}" is required')
        elif error["type"] == "extra_forbidden":
            messages.append(f'"{location}" is not allowed')
        else:
            messages.append(f'"{location}" {error["msg"]}')
    return ", ".join(messages)


def validate_params(
    candidate: Any,
    schema_keys: Union[SchemaKeys, Mapping[str, FieldRule]],
) -> ValidationResult:
    """
    Validate a request body against a rule table.

    Every violation is collected, not only the first one: missing
    required fields, type mismatches, range and enumeration failures.

    Args:
        candidate: Arbitrary request body
        schema_keys: Rule table, compiled or as a plain mapping

    Returns:
        ValidationResult with the coerced value on success
    """
    if not isinstance(schema_keys, SchemaKeys):
        schema_keys = SchemaKeys("Params", schema_keys)
    if not isinstance(candidate, dict):
        return ValidationResult(is_valid=False, message='"value" must be of type object')

    try:
        validated = schema_keys.model.model_validate(candidate)
    except PydanticValidationError as exc:
        return ValidationResult(is_valid=False, message=format_errors(exc.errors()))

    return ValidationResult(
        is_valid=True,
        value=validated.model_dump(exclude_unset=True),
    )


def _unknown_query_fields(query: Dict[str, Any], allowed: Iterable[str]) -> List[str]:
    allowed = set(allowed)
    unknown: List[str] = []
    for key, value in query.items():
        if key in LOGICAL_OPERATORS:
            if isinstance(value, list):
                for clause in value:
                    if isinstance(clause, dict):
                        unknown.extend(_unknown_query_fields(clause, allowed))
            continue
        if key.startswith("$"):
            # only the logical operators may appear at field level
            unknown.append(key)
            continue
        if key.split(".", 1)[0] not in allowed:
            unknown.append(key)
    return unknown


def validate_filter(
    candidate: Any,
    filter_keys: Type[BaseModel] = FilterKeys,
    model_fields: Optional[Iterable[str]] = None,
) -> ValidationResult:
    """
    Validate the list/count envelope.

    Only ``query``, ``where``, ``options`` and ``isCountOnly`` are accepted
    at the top level. When ``model_fields`` is given, every field named in
    ``query`` or ``where`` (logical operators included) must exist on the
    resource or be one of the bookkeeping fields.
    """
    if candidate is None:
        candidate = {}
    if not isinstance(candidate, dict):
        return ValidationResult(is_valid=False, message='"value" must be of type object')

    try:
        envelope = filter_keys.model_validate(candidate)
    except PydanticValidationError as exc:
        return ValidationResult(is_valid=False, message=format_errors(exc.errors()))

    value = envelope.model_dump(exclude_unset=True)
    if model_fields is None:
        return ValidationResult(is_valid=True, value=value)

    allowed = set(model_fields) | DocumentFields.FILTERABLE
    unknown: List[str] = []
    for key in ("query", "where"):
        if isinstance(value.get(key), dict):
            unknown.extend(_unknown_query_fields(value[key], allowed))
    if unknown:
        return ValidationResult(
            is_valid=False,
            message=", ".join(f'"{name}" is not allowed' for name in unknown),
        )
    return ValidationResult(is_valid=True, value=value)
