"""Record store protocol consumed by the paginator."""

from typing import Any, Dict, List, Protocol, runtime_checkable

from ..models.pagination import Query


Record = Dict[str, Any]


@runtime_checkable
class RecordStore(Protocol):
    """A store that can serve one filtered, sorted, projected, limited read.

    Implementations must honour every part of the query: ``filter``,
    ``projection``, ``sort`` (in the given key order) and ``limit``. Values
    must come back typed consistently enough to be compared (numbers,
    timestamps and identifiers by natural order).

    A store may also expose an ``id_field`` attribute naming its unique
    field; the paginator uses it when the settings leave ``id_field`` unset.
    """

    async def find(self, query: Query) -> List[Record]:
        ...
