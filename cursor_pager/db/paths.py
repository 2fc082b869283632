"""Dotted-path access into nested record mappings."""

from typing import Any, Dict, Mapping


def get_path(record: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Read ``"a.b.c"`` from nested mappings, returning default when absent."""
    if path in record:
        return record[path]

    current: Any = record
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def set_path(record: Dict[str, Any], path: str, value: Any) -> None:
    """Write ``"a.b.c"`` into nested dicts, creating levels as needed."""
    parts = path.split(".")
    current = record
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


def without_path(record: Mapping[str, Any], path: str) -> Dict[str, Any]:
    """Return a copy of record with ``path`` removed.

    Only the levels on the way to the removed key are copied; the input is
    never mutated. A parent left empty by the removal is dropped as well.
    """
    result = dict(record)
    if path in result:
        del result[path]
        return result

    head, _, rest = path.partition(".")
    if not rest or not isinstance(result.get(head), Mapping):
        return result

    child = without_path(result[head], rest)
    if child or not result[head]:
        result[head] = child
    else:
        del result[head]
    return result
