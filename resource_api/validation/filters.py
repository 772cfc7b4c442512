# ==============================================================================
# FILTER KEYS - List / Count Request Envelope
# ==============================================================================
# Shape shared by every resource's list and count endpoints
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

_IDENTITY_FIELDS = frozenset({"id", "_id"})

SortDirection = Literal[1, -1, "asc", "desc", "ascending", "descending"]


class FilterOptions(BaseModel):
    """
    Pagination and shaping options.

    Attributes:
        page: 1-based page index
        limit: Page size
        offset: Documents to skip; used when ``page`` is not given
        pagination: ``False`` returns every match in one response
        populate: Reference field(s) to expand into their documents
        sort: ``{"field": 1 | -1}`` or ``"-createdAt name"``
        select: Projection as a list, a space separated string or a
            ``{"field": 0 | 1}`` mapping
    """

    model_config = ConfigDict(extra="forbid")

    page: Optional[int] = Field(None, ge=1)
    limit: Optional[int] = Field(None, ge=1)
    offset: Optional[int] = Field(None, ge=0)
    pagination: Optional[bool] = None
    populate: Optional[Union[str, List[str]]] = None
    sort: Optional[Union[str, Dict[str, SortDirection]]] = None
    select: Optional[Union[str, List[str], Dict[str, Literal[0, 1]]]] = None

    @field_validator("select")
    @classmethod
    def no_mixed_projection(cls, v: Any) -> Any:
        """A projection either includes or excludes fields; only the id may be excluded from an inclusion."""
        if not v:
            return v
        if isinstance(v, dict):
            flags = {name: bool(flag) for name, flag in v.items()}
        else:
            names = v.split() if isinstance(v, str) else v
            flags = {name.lstrip("-"): not name.startswith("-") for name in names}
        modes = {flag for name, flag in flags.items() if name not in _IDENTITY_FIELDS}
        if len(modes) > 1:
            raise ValueError("cannot mix including and excluding fields")
        return v


class FilterKeys(BaseModel):
    """Top-level keys accepted by list and count requests."""

    model_config = ConfigDict(extra="forbid")

    query: Optional[Dict[str, Any]] = None
    where: Optional[Dict[str, Any]] = None
    options: Optional[FilterOptions] = None
    isCountOnly: Optional[bool] = None
