"""Cursor-based pagination over ordered record stores."""

from .config import PaginationSettings, configure_logging
from .db import InMemoryRecordStore, PostgresRecordStore, RecordStore
from .errors import InvalidCursor, InvalidParams
from .models import PageResult, PaginationParams, Query
from .pagination import Paginator, decode_cursor, encode_cursor, paginate

__version__ = "1.0.0"

__all__ = [
    "PaginationSettings",
    "configure_logging",
    "InMemoryRecordStore",
    "PostgresRecordStore",
    "RecordStore",
    "InvalidCursor",
    "InvalidParams",
    "PageResult",
    "PaginationParams",
    "Query",
    "Paginator",
    "decode_cursor",
    "encode_cursor",
    "paginate"
]
