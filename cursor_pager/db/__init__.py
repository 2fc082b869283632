"""Record stores the paginator can read from."""

from .store import Record, RecordStore
from .memory import InMemoryRecordStore, matches
from .postgres import PostgresRecordStore, compile_filter
from .connection import DatabaseManager

__all__ = [
    "Record",
    "RecordStore",
    "InMemoryRecordStore",
    "matches",
    "PostgresRecordStore",
    "compile_filter",
    "DatabaseManager"
]
