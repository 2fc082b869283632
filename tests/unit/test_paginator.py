"""Tests for the pagination entry point."""

from datetime import datetime, timezone

import pytest

from cursor_pager.config import PaginationSettings
from cursor_pager.db.memory import InMemoryRecordStore
from cursor_pager.db.postgres import PostgresRecordStore
from cursor_pager.errors.problem_details import InvalidCursor, InvalidParams
from cursor_pager.models.pagination import PaginationParams
from cursor_pager.pagination.cursor import encode_cursor
from cursor_pager.pagination.paginator import Paginator, paginate


DATE = datetime(2024, 1, 1, tzinfo=timezone.utc)


class TestClampLimit:
    """Test page size normalization."""

    @pytest.mark.parametrize("requested,expected", [
        (None, 10),
        (0, 1),
        (-5, 1),
        (1, 1),
        (25, 25),
        (50, 50),
        (51, 50),
        (10_000, 50),
    ])
    def test_clamp(self, mock_store, test_settings, requested, expected):
        """Test that limits are clamped into [1, max_limit]."""
        paginator = Paginator(mock_store, test_settings)

        assert paginator.clamp_limit(requested) == expected

    @pytest.mark.asyncio
    async def test_query_uses_clamped_limit(self, mock_store, test_settings):
        """Test that the store sees the clamped limit plus one."""
        paginator = Paginator(mock_store, test_settings)

        await paginator.paginate(limit=0)

        query = mock_store.find.await_args.args[0]
        assert query.limit == 2


class TestNormalize:
    """Test parameter defaults and cursor decoding."""

    def test_defaults(self, mock_store, test_settings):
        """Test the request built from empty parameters."""
        request = Paginator(mock_store, test_settings).normalize(PaginationParams())

        assert request.query == {}
        assert request.limit == 10
        assert request.paginated_field == "_id"
        assert request.sort_ascending is True
        assert request.has_cursor is False
        assert request.secondary_sort is False

    def test_paginated_field_defaults_to_configured_id(self, mock_store):
        """Test that the id field comes from settings."""
        settings = PaginationSettings(id_field="id")

        request = Paginator(mock_store, settings).normalize(PaginationParams())

        assert request.paginated_field == "id"
        assert request.id_field == "id"

    @pytest.mark.asyncio
    async def test_postgres_store_id_field_used_when_unset(self, mock_db_pool):
        """Test that a Postgres-backed paginator sorts on the table's id column by default."""
        pool, conn = mock_db_pool
        conn.fetch.return_value = []
        paginator = Paginator(PostgresRecordStore(pool, "posts"), PaginationSettings(_env_file=None))

        await paginator.paginate()

        sql = conn.fetch.await_args.args[0]
        assert paginator.id_field == "id"
        assert 'ORDER BY "id" ASC NULLS FIRST' in sql

    def test_configured_id_field_wins_over_store(self):
        """Test that settings take precedence over the store's id field."""
        store = InMemoryRecordStore(id_field="_id")

        paginator = Paginator(store, PaginationSettings(id_field="uid"))

        assert paginator.id_field == "uid"

    def test_id_field_fallback(self, mock_store):
        """Test the default when neither settings nor store name an id field."""
        mock_store.id_field = None

        assert Paginator(mock_store, PaginationSettings(_env_file=None)).id_field == "_id"

    def test_decodes_next_cursor(self, mock_store, test_settings):
        """Test that the next cursor is decoded into the request."""
        params = PaginationParams(paginated_field="date", next=encode_cursor((DATE, 4)))

        request = Paginator(mock_store, test_settings).normalize(params)

        assert request.cursor_value == (DATE, 4)
        assert request.is_next is True
        assert request.is_previous is False

    def test_next_takes_precedence_over_previous(self, mock_store, test_settings):
        """Test that previous is ignored when both cursors are supplied."""
        params = PaginationParams(next=encode_cursor(20), previous=encode_cursor(5))

        request = Paginator(mock_store, test_settings).normalize(params)

        assert request.cursor_value == 20
        assert request.is_next is True
        assert request.is_previous is False

    def test_pair_cursor_on_id_field_rejected(self, mock_store, test_settings):
        """Test that a pair cursor cannot be used without a secondary sort."""
        params = PaginationParams(next=encode_cursor((DATE, 4)))

        with pytest.raises(InvalidCursor, match="does not match"):
            Paginator(mock_store, test_settings).normalize(params)

    def test_single_cursor_on_other_field_rejected(self, mock_store, test_settings):
        """Test that a single-value cursor cannot be used with a secondary sort."""
        params = PaginationParams(paginated_field="date", previous=encode_cursor(DATE))

        with pytest.raises(InvalidCursor):
            Paginator(mock_store, test_settings).normalize(params)


class TestPaginate:
    """Test the paginate coroutine."""

    @pytest.mark.asyncio
    async def test_invalid_cursor_issues_no_query(self, mock_store, test_settings):
        """Test that cursor errors fail before the store is touched."""
        paginator = Paginator(mock_store, test_settings)

        with pytest.raises(InvalidCursor):
            await paginator.paginate(next="garbage!!")

        mock_store.find.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_limit_type(self, mock_store, test_settings):
        """Test that an uninterpretable limit raises InvalidParams."""
        paginator = Paginator(mock_store, test_settings)

        with pytest.raises(InvalidParams) as exc_info:
            await paginator.paginate(limit="lots")

        assert exc_info.value.status == 400
        mock_store.find.assert_not_awaited()

    def test_validate_params_applies_overrides(self):
        """Test that keyword overrides win over the params they are merged into."""
        params = PaginationParams(limit=5, paginated_field="date")

        merged = Paginator.validate_params(params, {"limit": 7})

        assert merged.limit == 7
        assert merged.paginated_field == "date"

    def test_validate_params_wraps_validation_error(self):
        """Test that pydantic errors surface as InvalidParams."""
        with pytest.raises(InvalidParams, match="Invalid pagination parameters"):
            Paginator.validate_params({"limit": "lots"}, {})

    @pytest.mark.asyncio
    async def test_unknown_parameter(self, mock_store, test_settings):
        """Test that misspelled parameters are reported."""
        paginator = Paginator(mock_store, test_settings)

        with pytest.raises(InvalidParams):
            await paginator.paginate({"paginatedfield": "date"})

    @pytest.mark.asyncio
    async def test_accepts_camel_case_mapping(self, mock_store, test_settings):
        """Test that JSON-style parameter names are understood."""
        paginator = Paginator(mock_store, test_settings)

        await paginator.paginate({"paginatedField": "date", "sortAscending": False, "limit": 3})

        query = mock_store.find.await_args.args[0]
        assert query.sort == [("date", -1), ("_id", -1)]
        assert query.limit == 4

    @pytest.mark.asyncio
    async def test_overrides_apply_on_top_of_params(self, mock_store, test_settings):
        """Test that keyword overrides win over the params object."""
        paginator = Paginator(mock_store, test_settings)
        params = PaginationParams(limit=3, query={"title": "x"})

        await paginator.paginate(params, limit=7)

        query = mock_store.find.await_args.args[0]
        assert query.limit == 8
        assert query.filter == {"title": "x"}

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, mock_store, test_settings):
        """Test that store failures reach the caller unchanged."""
        error = RuntimeError("connection reset")
        mock_store.find.side_effect = error

        with pytest.raises(RuntimeError) as exc_info:
            await Paginator(mock_store, test_settings).paginate()

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_module_level_paginate(self, store, test_settings):
        """Test the module-level helper."""
        page = await paginate(store, {"limit": 2}, settings=test_settings)

        assert [r["_id"] for r in page.results] == [1, 2]
        assert page.has_next is True
