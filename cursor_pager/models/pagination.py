"""Pydantic models for pagination requests, queries and pages."""

from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


ASCENDING = 1
DESCENDING = -1


class PaginationParams(BaseModel):
    """Caller-facing pagination parameters.

    Accepts snake_case names as well as the camelCase aliases used by
    JSON APIs (``paginatedField``, ``sortAscending``).
    """

    query: Dict[str, Any] = Field(default_factory=dict, description="Store filter predicate")
    limit: Optional[int] = Field(default=None, description="Page size, clamped to the configured range")
    fields: Optional[Dict[str, Any]] = Field(default=None, description="Projection, e.g. {'title': 1, '_id': 0}")
    paginated_field: Optional[str] = Field(default=None, description="Field the result set is ordered by")
    next: Optional[str] = Field(default=None, description="Cursor of the page to continue after")
    previous: Optional[str] = Field(default=None, description="Cursor of the page to continue before")
    sort_ascending: bool = Field(default=True, description="Sort direction of the paginated field")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class PageRequest(BaseModel):
    """Normalized parameters: limit clamped, defaults applied, cursor decoded."""

    query: Dict[str, Any] = Field(default_factory=dict)
    limit: int
    fields: Optional[Dict[str, Any]] = None
    paginated_field: str
    id_field: str
    sort_ascending: bool = True
    cursor_value: Any = None
    is_next: bool = False
    is_previous: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def has_cursor(self) -> bool:
        return self.is_next or self.is_previous

    @property
    def secondary_sort(self) -> bool:
        """Whether ties on the paginated field are broken by the id field."""
        return self.paginated_field != self.id_field

    @property
    def effective_ascending(self) -> bool:
        """Physical scan direction; flipped when walking back with ``previous``."""
        return self.sort_ascending != self.is_previous


class Query(BaseModel):
    """Declarative description of one record store read."""

    filter: Dict[str, Any] = Field(default_factory=dict)
    sort: List[Tuple[str, int]]
    projection: Optional[Dict[str, int]] = None
    limit: int
    synthetic_fields: FrozenSet[str] = frozenset()

    model_config = ConfigDict(frozen=True)


class PageResult(BaseModel):
    """One page of records plus cursors to the adjacent pages."""

    results: List[Dict[str, Any]] = Field(default_factory=list)
    previous: Optional[str] = Field(default=None, description="Cursor for the page before this one")
    has_previous: bool = Field(default=False, description="Whether a previous page exists")
    next: Optional[str] = Field(default=None, description="Cursor for the page after this one")
    has_next: bool = Field(default=False, description="Whether a next page exists")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
