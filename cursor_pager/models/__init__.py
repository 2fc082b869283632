"""Pydantic models for cursor pagination."""

from .pagination import (
    ASCENDING,
    DESCENDING,
    PaginationParams,
    PageRequest,
    Query,
    PageResult
)

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "PaginationParams",
    "PageRequest",
    "Query",
    "PageResult"
]
