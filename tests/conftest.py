"""Pytest configuration and shared fixtures for the cursor pagination tests."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest

from cursor_pager.config import PaginationSettings
from cursor_pager.db.memory import InMemoryRecordStore
from cursor_pager.pagination.paginator import Paginator


# Disable logging for cleaner test output
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("asyncpg").setLevel(logging.WARNING)


BASE_DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> PaginationSettings:
    """Settings for tests, independent of the environment."""
    return PaginationSettings(
        default_limit=10,
        max_limit=50,
        id_field="_id",
        log_level="ERROR"
    )


@pytest.fixture
def posts() -> List[Dict[str, Any]]:
    """100 posts with strictly increasing dates, in id order."""
    return [
        {
            "_id": i,
            "title": f"Post #{i}",
            "date": BASE_DATE + timedelta(milliseconds=i),
            "body": f"Post Body #{i}",
            "author": {"name": "Pawan Pandey"}
        }
        for i in range(1, 101)
    ]


@pytest.fixture
def posts_with_ties(posts: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Posts where ids 41..50 share the exact same date."""
    tied_date = BASE_DATE + timedelta(milliseconds=45)
    records = []
    for post in posts:
        post = dict(post)
        if 41 <= post["_id"] <= 50:
            post["date"] = tied_date
        records.append(post)
    return records


@pytest.fixture
def store(posts: List[Dict[str, Any]]) -> InMemoryRecordStore:
    """In-memory store seeded with the posts fixture."""
    return InMemoryRecordStore(posts, id_field="_id")


@pytest.fixture
def paginator(store: InMemoryRecordStore, test_settings: PaginationSettings) -> Paginator:
    """Paginator over the seeded in-memory store."""
    return Paginator(store, test_settings)


@pytest.fixture
def mock_store():
    """Record store whose find() is an AsyncMock returning no records."""
    store = MagicMock()
    store.find = AsyncMock(return_value=[])
    return store


@pytest.fixture
def mock_db_pool():
    """Mock asyncpg pool for unit tests."""
    mock_pool = MagicMock()
    mock_conn = AsyncMock()
    mock_pool.acquire.return_value.__aenter__.return_value = mock_conn
    mock_pool.acquire.return_value.__aexit__.return_value = False
    return mock_pool, mock_conn


# Pytest markers for test categorization
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, mocked)")
    config.addinivalue_line("markers", "integration: Integration tests (in-memory store, end to end)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)

        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
