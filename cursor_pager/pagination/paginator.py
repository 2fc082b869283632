"""Cursor-based pagination entry point."""

import logging
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from ..config import PaginationSettings
from ..db.store import RecordStore
from ..errors.problem_details import InvalidCursor, InvalidParams
from ..models.pagination import PageRequest, PageResult, PaginationParams
from .assembler import fetch_page
from .cursor import decode_cursor
from .query import build_query


logger = logging.getLogger(__name__)

DEFAULT_ID_FIELD = "_id"


class Paginator:
    """Pages through a record store using opaque cursors.

    Holds no per-call state; one instance can serve any number of concurrent
    callers.

    Example:
        paginator = Paginator(store, PaginationSettings(max_limit=100))
        page = await paginator.paginate(paginated_field="date", limit=20)
        older = await paginator.paginate(paginated_field="date", limit=20, next=page.next)
    """

    def __init__(self, store: RecordStore, settings: Optional[PaginationSettings] = None):
        self.store = store
        self.settings = settings or PaginationSettings()
        self.id_field = self.resolve_id_field()

    def resolve_id_field(self) -> str:
        """Configured id field, else the store's, else ``"_id"``."""
        if self.settings.id_field:
            return self.settings.id_field
        store_id_field = getattr(self.store, "id_field", None)
        if isinstance(store_id_field, str) and store_id_field:
            return store_id_field
        return DEFAULT_ID_FIELD

    def clamp_limit(self, limit: Optional[int]) -> int:
        """Clamp a requested page size into ``[1, max_limit]``."""
        if limit is None:
            return self.settings.default_limit
        return max(1, min(limit, self.settings.max_limit))

    def normalize(self, params: PaginationParams) -> PageRequest:
        """Apply defaults, clamp the limit and decode the cursor.

        Raises:
            InvalidCursor: If a cursor cannot be decoded or does not fit the
                paginated field
        """
        id_field = self.id_field
        paginated_field = params.paginated_field or id_field

        if params.next and params.previous:
            logger.warning("Both next and previous cursors supplied; using next")

        cursor = params.next or params.previous
        cursor_value = None
        if cursor:
            cursor_value = decode_cursor(cursor)
            is_pair = isinstance(cursor_value, tuple)
            if is_pair != (paginated_field != id_field):
                raise InvalidCursor(
                    f"Cursor does not match paginated field '{paginated_field}'"
                )

        return PageRequest(
            query=params.query,
            limit=self.clamp_limit(params.limit),
            fields=params.fields,
            paginated_field=paginated_field,
            id_field=id_field,
            sort_ascending=params.sort_ascending,
            cursor_value=cursor_value,
            is_next=bool(params.next),
            is_previous=bool(params.previous) and not params.next
        )

    async def paginate(
        self,
        params: Optional[Union[PaginationParams, Dict[str, Any]]] = None,
        **overrides: Any
    ) -> PageResult:
        """Fetch one page.

        Args:
            params: PaginationParams or a mapping of them (camelCase or
                snake_case keys)
            **overrides: Individual parameters, applied on top of ``params``

        Returns:
            The page with cursors to its neighbours

        Raises:
            InvalidParams: If the parameters cannot be interpreted
            InvalidCursor: If a cursor cannot be decoded; no query is issued
        """
        params = self.validate_params(params, overrides)
        request = self.normalize(params)
        query = build_query(request)
        return await fetch_page(self.store, request, query)

    @staticmethod
    def validate_params(
        params: Optional[Union[PaginationParams, Dict[str, Any]]],
        overrides: Dict[str, Any]
    ) -> PaginationParams:
        """Merge ``overrides`` into ``params`` and validate, raising InvalidParams on failure."""
        if isinstance(params, PaginationParams):
            data = params.model_dump(exclude_unset=True)
        else:
            data = dict(params or {})
        data.update(overrides)

        try:
            return PaginationParams.model_validate(data)
        except ValidationError as e:
            raise InvalidParams(f"Invalid pagination parameters: {e}")


async def paginate(
    store: RecordStore,
    params: Optional[Union[PaginationParams, Dict[str, Any]]] = None,
    *,
    settings: Optional[PaginationSettings] = None,
    **overrides: Any
) -> PageResult:
    """Fetch one page from ``store``; see :meth:`Paginator.paginate`."""
    return await Paginator(store, settings).paginate(params, **overrides)
