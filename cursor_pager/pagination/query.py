"""Range filter, sort and projection construction for paginated reads."""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from ..models.pagination import ASCENDING, DESCENDING, PageRequest, Query


logger = logging.getLogger(__name__)


def comparison_operator(request: PageRequest) -> str:
    """Pick the range operator for the physical scan direction."""
    return "$gt" if request.effective_ascending else "$lt"


def build_range_filter(request: PageRequest) -> Optional[Dict[str, Any]]:
    """Build the filter that resumes the scan after the cursor position.

    For a non-id paginated field the paginated value alone is not unique, so
    the filter has to follow the composite order:

        field <op> value OR (field = value AND id <op> id_value)

    Null paginated values sort before everything ascending and after
    everything descending, so a descending scan also takes the null records,
    and a cursor sitting on a null resumes among the nulls by id.

    Args:
        request: Normalized page request

    Returns:
        Filter document, or None when no cursor was supplied
    """
    if not request.has_cursor:
        return None

    op = comparison_operator(request)
    field = request.paginated_field

    if request.secondary_sort:
        value, id_value = request.cursor_value
        tie = {field: {"$eq": value}, request.id_field: {op: id_value}}

        if value is None:
            if op == "$gt":
                return {"$or": [{field: {"$ne": None}}, tie]}
            return tie

        branches = [{field: {op: value}}, tie]
        if op == "$lt":
            branches.append({field: {"$eq": None}})
        return {"$or": branches}

    return {field: {op: request.cursor_value}}


def build_sort(request: PageRequest) -> List[Tuple[str, int]]:
    """Build the sort specification, tie-broken on the id field when needed."""
    direction = ASCENDING if request.effective_ascending else DESCENDING
    sort = [(request.paginated_field, direction)]
    if request.secondary_sort:
        sort.append((request.id_field, direction))
    return sort


def build_projection(
    fields: Optional[Dict[str, Any]],
    paginated_field: str,
    id_field: str
) -> Tuple[Optional[Dict[str, int]], Set[str]]:
    """Build the effective projection and the fields added for cursor purposes.

    The query always has to return the id field and the paginated field so
    the boundary records can be turned into cursors. Whatever had to be
    forced in on top of the caller's projection is reported back so it can be
    stripped from the page afterwards.

    Args:
        fields: Caller projection, inclusion (``{"title": 1}``) or exclusion
            (``{"body": 0}``) style
        paginated_field: Field the result set is ordered by
        id_field: Unique tie-break field

    Returns:
        Tuple of (projection or None for all fields, synthetic field names)
    """
    if not fields:
        return None, set()

    synthetic: Set[str] = set()
    requested = {name: 1 if flag else 0 for name, flag in fields.items()}
    inclusion = any(requested.values())

    if inclusion:
        projection = {name: flag for name, flag in requested.items() if flag}
        # The id field is returned by default unless explicitly excluded.
        if requested.get(id_field, 1) == 0:
            synthetic.add(id_field)
        projection[id_field] = 1
        if not _covered_by(paginated_field, projection):
            synthetic.add(paginated_field)
            projection[paginated_field] = 1
        return projection, synthetic

    # Excluding a parent of a cursor field hides the field too; fetch the
    # parent and strip it afterwards instead.
    projection = dict(requested)
    for name in list(projection):
        if _covered_by(id_field, {name: 1}) or _covered_by(paginated_field, {name: 1}):
            del projection[name]
            synthetic.add(name)

    return (projection or None), synthetic


def _covered_by(path: str, names: Dict[str, int]) -> bool:
    """Whether ``path`` or one of its parent paths is among ``names``."""
    parts = path.split(".")
    return any(".".join(parts[:depth]) in names for depth in range(1, len(parts) + 1))


def build_query(request: PageRequest) -> Query:
    """Derive the store query for one page.

    The limit is one more than the page size; the extra record tells the
    assembler whether another page exists.
    """
    range_filter = build_range_filter(request)
    if range_filter is None:
        query_filter = request.query
    else:
        query_filter = {"$and": [request.query, range_filter]}

    projection, synthetic = build_projection(
        request.fields, request.paginated_field, request.id_field
    )

    query = Query(
        filter=query_filter,
        sort=build_sort(request),
        projection=projection,
        limit=request.limit + 1,
        synthetic_fields=frozenset(synthetic)
    )

    logger.debug(
        f"Built query on {request.paginated_field}: filter={query.filter} "
        f"sort={query.sort} projection={query.projection} limit={query.limit}"
    )
    return query
