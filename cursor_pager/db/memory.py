"""In-memory record store evaluating Mongo-style filter documents."""

import copy
import logging
import operator
import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..models.pagination import Query
from .paths import get_path, set_path, without_path
from .store import Record


logger = logging.getLogger(__name__)

_MISSING = object()


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(value: Any, operand: Any) -> bool:
        if value is _MISSING or value is None or operand is None:
            return False
        try:
            return compare(value, operand)
        except TypeError:
            return False
    return check


def _equals(value: Any, operand: Any) -> bool:
    if value is _MISSING:
        return operand is None
    return value == operand


def _regex(value: Any, operand: Any) -> bool:
    if not isinstance(value, str):
        return False
    pattern = operand if isinstance(operand, re.Pattern) else re.compile(operand)
    return pattern.search(value) is not None


OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "$eq": _equals,
    "$ne": lambda value, operand: not _equals(value, operand),
    "$gt": _ordered(operator.gt),
    "$gte": _ordered(operator.ge),
    "$lt": _ordered(operator.lt),
    "$lte": _ordered(operator.le),
    "$in": lambda value, operand: any(_equals(value, item) for item in operand),
    "$nin": lambda value, operand: not any(_equals(value, item) for item in operand),
    "$regex": _regex,
}


def _is_operator_document(condition: Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and bool(condition)
        and all(str(key).startswith("$") for key in condition)
    )


def matches(record: Mapping[str, Any], filter_doc: Mapping[str, Any]) -> bool:
    """Evaluate a filter document against one record.

    Raises:
        ValueError: If the filter uses an unsupported operator
    """
    for key, condition in filter_doc.items():
        if key == "$and":
            if not all(matches(record, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches(record, sub) for sub in condition):
                return False
        elif key.startswith("$"):
            raise ValueError(f"Unsupported filter operator: {key}")
        else:
            value = get_path(record, key, _MISSING)
            if _is_operator_document(condition):
                for op, operand in condition.items():
                    if op not in OPERATORS:
                        raise ValueError(f"Unsupported filter operator: {op}")
                    if not OPERATORS[op](value, operand):
                        return False
            elif not _equals(value, condition):
                return False
    return True


def _sort_key(path: str) -> Callable[[Record], Any]:
    def key(record: Record) -> Any:
        value = get_path(record, path)
        # Missing values sort first, as in MongoDB.
        return (0,) if value is None else (1, value)
    return key


def apply_projection(
    record: Record,
    projection: Optional[Dict[str, int]],
    id_field: str
) -> Record:
    """Return a deep copy of ``record`` shaped by ``projection``."""
    if not projection:
        return copy.deepcopy(record)

    if any(projection.values()):
        projected: Record = {}
        included = [name for name, flag in projection.items() if flag]
        if id_field not in projection:
            included.append(id_field)
        for name in included:
            value = get_path(record, name, _MISSING)
            if value is not _MISSING:
                set_path(projected, name, copy.deepcopy(value))
        return projected

    projected = record
    for name in projection:
        projected = without_path(projected, name)
    return copy.deepcopy(projected)


class InMemoryRecordStore:
    """Record store over a list of dicts.

    Useful for tests and small fixed data sets. Returned records are deep
    copies, so callers cannot mutate the stored data.
    """

    def __init__(self, records: Optional[Iterable[Record]] = None, id_field: str = "_id"):
        self.id_field = id_field
        self.records: List[Record] = [dict(record) for record in records or []]

    def insert(self, record: Record) -> None:
        """Add a record to the store."""
        if self.id_field not in record:
            raise ValueError(f"Record is missing id field '{self.id_field}'")
        self.records.append(dict(record))

    async def find(self, query: Query) -> List[Record]:
        """Run the query over the stored records."""
        selected = [record for record in self.records if matches(record, query.filter)]

        # Stable sorts applied from the least significant key.
        for path, direction in reversed(query.sort):
            selected.sort(key=_sort_key(path), reverse=direction < 0)

        selected = selected[:query.limit]
        logger.debug(f"In-memory store matched {len(selected)} records")
        return [apply_projection(record, query.projection, self.id_field) for record in selected]
