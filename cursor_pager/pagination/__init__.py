"""Cursor-based pagination: cursor codec, query building and page assembly."""

from .cursor import (
    CursorEnvelope,
    encode_cursor,
    decode_cursor
)
from .query import (
    build_range_filter,
    build_sort,
    build_projection,
    build_query
)
from .assembler import (
    assemble_page,
    fetch_page
)
from .paginator import (
    Paginator,
    paginate
)

__all__ = [
    "CursorEnvelope",
    "encode_cursor",
    "decode_cursor",
    "build_range_filter",
    "build_sort",
    "build_projection",
    "build_query",
    "assemble_page",
    "fetch_page",
    "Paginator",
    "paginate"
]
