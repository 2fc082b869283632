"""PostgreSQL record store backed by an asyncpg pool."""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Tuple

from asyncpg import Pool

from ..models.pagination import Query
from .store import Record


logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

SQL_OPERATORS = {
    "$eq": "=",
    "$ne": "<>",
    "$gt": ">",
    "$gte": ">=",
    "$lt": "<",
    "$lte": "<=",
    "$regex": "~",
}


def quote_identifier(name: str) -> str:
    """Quote a column or table name, accepting plain identifiers only.

    Raises:
        ValueError: If the name cannot be used as a SQL identifier
    """
    parts = name.split(".")
    for part in parts:
        if not _IDENTIFIER.match(part):
            raise ValueError(f"Unsupported SQL identifier: {name!r}")
    return ".".join(f'"{part}"' for part in parts)


def _quote_column(name: str) -> str:
    if "." in name:
        raise ValueError(f"Nested field paths are not supported by PostgresRecordStore: {name!r}")
    return quote_identifier(name)


def _is_operator_document(condition: Any) -> bool:
    return (
        isinstance(condition, Mapping)
        and bool(condition)
        and all(str(key).startswith("$") for key in condition)
    )


def _compile_comparison(column: str, op: str, operand: Any, params: List[Any]) -> str:
    if op == "$eq" and operand is None:
        return f"{column} IS NULL"
    if op == "$ne" and operand is None:
        return f"{column} IS NOT NULL"

    if op in ("$in", "$nin"):
        params.append(list(operand))
        clause = f"{column} = ANY(${len(params)})"
        return clause if op == "$in" else f"NOT ({clause})"

    if op not in SQL_OPERATORS:
        raise ValueError(f"Unsupported filter operator: {op}")

    if isinstance(operand, re.Pattern):
        operand = operand.pattern
    params.append(operand)
    return f"{column} {SQL_OPERATORS[op]} ${len(params)}"


def compile_filter(filter_doc: Mapping[str, Any], params: List[Any]) -> str:
    """Compile a filter document into a WHERE condition.

    Args:
        filter_doc: Mongo-style filter document
        params: Positional parameter list, extended in place

    Returns:
        SQL condition referencing ``$n`` placeholders in ``params``
    """
    clauses = []

    for key, condition in filter_doc.items():
        if key in ("$and", "$or"):
            parts = [compile_filter(sub, params) for sub in condition]
            if not parts:
                clauses.append("TRUE" if key == "$and" else "FALSE")
            else:
                joiner = " AND " if key == "$and" else " OR "
                clauses.append(f"({joiner.join(parts)})")
        elif key.startswith("$"):
            raise ValueError(f"Unsupported filter operator: {key}")
        else:
            column = _quote_column(key)
            if _is_operator_document(condition):
                for op, operand in condition.items():
                    clauses.append(_compile_comparison(column, op, operand, params))
            else:
                clauses.append(_compile_comparison(column, "$eq", condition, params))

    if not clauses:
        return "TRUE"
    if len(clauses) == 1:
        return clauses[0]
    return f"({' AND '.join(clauses)})"


def compile_order(sort: List[Tuple[str, int]]) -> str:
    """Build ORDER BY clause; NULLs sort first ascending like the in-memory store."""
    terms = []
    for field, direction in sort:
        if direction < 0:
            terms.append(f"{_quote_column(field)} DESC NULLS LAST")
        else:
            terms.append(f"{_quote_column(field)} ASC NULLS FIRST")
    return "ORDER BY " + ", ".join(terms) if terms else ""


def compile_columns(projection: Optional[Dict[str, int]]) -> str:
    """Build the select list for an inclusion projection, ``*`` otherwise."""
    if not projection or not any(projection.values()):
        return "*"
    return ", ".join(_quote_column(name) for name, flag in projection.items() if flag)


class PostgresRecordStore:
    """Record store reading rows of one table through an asyncpg pool.

    Field names map to column names. Nested paths are not supported.
    ``id_field`` names the table's unique column and becomes the paginator's
    tie-break field unless the settings name another one.
    """

    def __init__(self, pool: Pool, table: str, id_field: str = "id"):
        self.pool = pool
        self.table = quote_identifier(table)
        self.id_field = id_field

    def build_sql(self, query: Query) -> Tuple[str, List[Any]]:
        """Compile a query into SQL text and positional parameters."""
        params: List[Any] = []
        where_clause = compile_filter(query.filter, params)
        params.append(query.limit)

        sql = f"""
            SELECT {compile_columns(query.projection)}
            FROM {self.table}
            WHERE {where_clause}
            {compile_order(query.sort)}
            LIMIT ${len(params)}
        """
        return sql, params

    async def find(self, query: Query) -> List[Record]:
        """Fetch rows matching the query."""
        sql, params = self.build_sql(query)

        async with self.pool.acquire() as conn:
            rows = await conn.fetch(sql, *params)

        records = [dict(row) for row in rows]

        # Exclusion projections select every column and drop the excluded ones.
        if query.projection and not any(query.projection.values()):
            excluded = set(query.projection)
            records = [
                {key: value for key, value in record.items() if key not in excluded}
                for record in records
            ]

        logger.debug(f"Fetched {len(records)} rows from {self.table}")
        return records
