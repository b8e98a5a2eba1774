"""DML compilation: QuerySpec / records -> parameterized SQL.

Every function here is pure.  The returned
:class:`~sqlitemanager.compile.base.StatementRequest` carries a parameter
tuple whose length and order match the ``?`` placeholders in the SQL text,
left to right.

Table and column names are interpolated verbatim; callers are responsible
for passing well-formed identifiers.  Values are never interpolated.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.errors import (
    CompilationError,
    EmptyFieldsError,
    EmptyRecordError,
    EmptyRowsError,
)
from sqlitemanager.schema.query_spec import JoinClause, OrderByItem, QuerySpec
from sqlitemanager.schema.record import Record, record_items

# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


def compile_select(table: str, spec: QuerySpec | None = None) -> StatementRequest:
    """Compile ``spec`` into a SELECT against ``table``.

    Clause order is fixed: ``SELECT [DISTINCT] cols FROM table [JOIN ...]
    [WHERE] [GROUP BY] [HAVING] [ORDER BY] [LIMIT] [OFFSET]``.  Clauses whose
    source data is empty are omitted.

    Args:
        table: Table to select from.
        spec: Query description; ``None`` selects every row and column.

    Returns:
        :class:`StatementRequest` whose params are the WHERE args followed by
        the HAVING args.
    """
    if spec is None:
        spec = QuerySpec()

    parts: list[str] = ["SELECT"]

    if spec.distinct:
        parts.append("DISTINCT")

    parts.append(_join_names(spec.columns) or "*")
    parts.append(f"FROM {table}")

    for join in spec.joins:
        parts.append(_join_clause(join))

    if spec.where is not None and spec.where.clause.strip():
        parts.append(f"WHERE {spec.where.clause}")

    if spec.group_by:
        parts.append(f"GROUP BY {_join_names(spec.group_by)}")

    if spec.having is not None and spec.having.clause.strip():
        parts.append(f"HAVING {spec.having.clause}")

    if spec.order_by:
        parts.append(f"ORDER BY {', '.join(_order_item(o) for o in spec.order_by)}")

    if spec.limit is not None:
        parts.append(f"LIMIT {spec.limit}")

    if spec.offset is not None:
        parts.append(f"OFFSET {spec.offset}")

    return StatementRequest(" ".join(parts), spec.params)


def _join_names(names: str | Sequence[str]) -> str:
    if isinstance(names, str):
        return names
    return ", ".join(names)


def _join_clause(join: JoinClause) -> str:
    return f"{join.type} JOIN {join.table} ON {join.on}"


def _order_item(item: OrderByItem) -> str:
    if item.direction is None:
        return item.column
    return f"{item.column} {item.direction}"


# ---------------------------------------------------------------------------
# INSERT
# ---------------------------------------------------------------------------


def compile_insert(table: str, record: Record) -> StatementRequest:
    """Compile a single-row INSERT.

    The column list follows ``record``'s iteration order and the params are
    its values in that same order::

        compile_insert("tb_animals", {"name": "Bob"})
        # INSERT INTO tb_animals (name) VALUES (?);   params ("Bob",)

    Raises:
        EmptyRecordError: If ``record`` has no fields.
    """
    items = record_items(record)
    if not items:
        raise EmptyRecordError(table, "INSERT")

    columns = ", ".join(column for column, _ in items)
    values = ", ".join("?" for _ in items)
    return StatementRequest(
        f"INSERT INTO {table} ({columns}) VALUES ({values});",
        tuple(value for _, value in items),
    )


def compile_insert_many(
    table: str,
    fields: Sequence[str],
    rows: Sequence[Sequence[Any]],
) -> StatementRequest:
    """Compile a multi-row INSERT with one VALUES group per row.

    Params are row-major, each row in ``fields`` order.

    Raises:
        EmptyFieldsError: If ``fields`` is empty.
        EmptyRowsError: If ``rows`` is empty.
        CompilationError: If a row's length differs from ``len(fields)``.
    """
    if not fields:
        raise EmptyFieldsError(table)
    if not rows:
        raise EmptyRowsError(table)

    params: list[Any] = []
    for index, row in enumerate(rows):
        if len(row) != len(fields):
            raise CompilationError(
                f"Row {index} has {len(row)} values but {len(fields)} fields were given.",
                statement="INSERT",
            )
        params.extend(row)

    group = f"({', '.join('?' for _ in fields)})"
    values = ", ".join(group for _ in rows)
    return StatementRequest(
        f"INSERT INTO {table} ({', '.join(fields)}) VALUES {values};",
        params,
    )


# ---------------------------------------------------------------------------
# UPDATE / DELETE
# ---------------------------------------------------------------------------


def compile_update(
    table: str,
    record: Record,
    where: str | None = None,
    where_args: Sequence[Any] = (),
) -> StatementRequest:
    """Compile an UPDATE setting every field of ``record``.

    Params are the record values (key order) followed by ``where_args``.

    Raises:
        EmptyRecordError: If ``record`` has no fields.
    """
    items = record_items(record)
    if not items:
        raise EmptyRecordError(table, "UPDATE")

    assignments = ", ".join(f"{column} = ?" for column, _ in items)
    return StatementRequest(
        f"UPDATE {table} SET {assignments}{_where_suffix(where)};",
        [*(value for _, value in items), *where_args],
    )


def compile_delete(
    table: str,
    where: str | None = None,
    where_args: Sequence[Any] = (),
) -> StatementRequest:
    """Compile a DELETE, optionally restricted by ``where``."""
    return StatementRequest(f"DELETE FROM {table}{_where_suffix(where)};", where_args)


def _where_suffix(where: str | None) -> str:
    if where is None or not where.strip():
        return ""
    return f" WHERE {where}"
