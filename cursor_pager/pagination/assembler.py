"""Turns raw store results into a page with adjacent cursors."""

import logging
from typing import Any, Dict, FrozenSet, List, Optional

from ..db.paths import get_path, without_path
from ..db.store import Record, RecordStore
from ..models.pagination import PageRequest, PageResult, Query
from .cursor import encode_cursor


logger = logging.getLogger(__name__)


def cursor_for(record: Record, request: PageRequest) -> str:
    """Encode the cursor that points at ``record``.

    A null or missing paginated value is encoded as null; the id field is
    always required.

    Args:
        record: A record as returned by the store (before stripping)
        request: Normalized page request

    Returns:
        Opaque cursor string

    Raises:
        ValueError: If the record lacks the id field
    """
    if not request.secondary_sort:
        value = record.get(request.id_field)
        if value is None:
            raise ValueError(f"Record is missing id field '{request.id_field}'")
        return encode_cursor(value)

    value = get_path(record, request.paginated_field)
    id_value = record.get(request.id_field)
    if id_value is None:
        raise ValueError(f"Record is missing id field '{request.id_field}'")
    return encode_cursor((value, id_value))


def strip_fields(records: List[Record], synthetic_fields: FrozenSet[str]) -> List[Dict[str, Any]]:
    """Remove fields that were only queried to build cursors."""
    if not synthetic_fields:
        return records

    stripped = []
    for record in records:
        for name in synthetic_fields:
            record = without_path(record, name)
        stripped.append(record)
    return stripped


def assemble_page(
    records: List[Record],
    request: PageRequest,
    query: Query
) -> PageResult:
    """Process store results into a page.

    Args:
        records: Records as returned by the store, at most ``limit + 1``
        request: Normalized page request
        query: The query that produced ``records``

    Returns:
        Page in the caller's requested order
    """
    results = list(records)

    # The store was asked for one record more than the page size.
    has_more = len(results) > request.limit
    if has_more:
        results = results[:request.limit]

    has_previous = request.is_next or (request.is_previous and has_more)
    has_next = request.is_previous or has_more

    # A previous page is scanned backwards; put it back in requested order.
    if request.is_previous:
        results.reverse()

    previous_cursor: Optional[str] = None
    next_cursor: Optional[str] = None
    if results:
        previous_cursor = cursor_for(results[0], request)
        next_cursor = cursor_for(results[-1], request)

    page = PageResult(
        results=strip_fields(results, query.synthetic_fields),
        previous=previous_cursor,
        has_previous=has_previous,
        next=next_cursor,
        has_next=has_next
    )

    logger.debug(
        f"Assembled page of {len(page.results)} records "
        f"(has_previous={has_previous}, has_next={has_next})"
    )
    return page


async def fetch_page(
    store: RecordStore,
    request: PageRequest,
    query: Query
) -> PageResult:
    """Run ``query`` against the store and assemble the page.

    Store errors are re-raised untouched; no partial page is ever returned.
    """
    try:
        records = await store.find(query)
    except Exception as e:
        logger.error(f"Record store query failed: {e}")
        raise

    return assemble_page(records, request, query)
