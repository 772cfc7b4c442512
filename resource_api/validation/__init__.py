"""
Validation Module
=================

Declarative field rules and the verdict-returning validators used by
every resource controller.
"""

from resource_api.validation.filters import FilterKeys, FilterOptions
from resource_api.validation.rules import FieldRule, SchemaKeys, is_valid_object_id
from resource_api.validation.validator import (
    ValidationResult,
    format_errors,
    validate_filter,
    validate_params,
)

__all__ = [
    "FieldRule",
    "FilterKeys",
    "FilterOptions",
    "SchemaKeys",
    "ValidationResult",
    "format_errors",
    "is_valid_object_id",
    "validate_filter",
    "validate_params",
]
