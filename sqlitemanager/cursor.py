"""Builder-style facade over the compiler and executor for one table.

Each builder method returns a *new* cursor, so a partially built cursor can
be shared and extended without affecting other users::

    animals = db.table("tb_animals")
    adults = animals.where("age >= ?", 2).order_by("name")
    page_two = await adults.limit(20).page(2).get()
    await animals.where("id = ?", 7).update({"color": "brown"})

``where`` and ``having`` replace any previous predicate rather than combining
with it; write the full predicate in one call.
"""
from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.compile.statements import (
    compile_delete,
    compile_insert,
    compile_insert_many,
    compile_select,
    compile_update,
)
from sqlitemanager.engine.result import ExecutionResult
from sqlitemanager.schema.query_spec import (
    JoinClause,
    JoinType,
    OrderByItem,
    QuerySpec,
    WhereClause,
)
from sqlitemanager.schema.record import Record

if TYPE_CHECKING:
    from sqlitemanager.database import Database

RowFactory = Callable[[dict[str, Any]], Any]


class QueryCursor:
    """Immutable query builder bound to a database and a table.

    Args:
        database: Database statements run against.
        table: Table name, interpolated verbatim.
        spec: SELECT configuration accumulated so far.
        factory: Default row factory used by :meth:`get`.
    """

    def __init__(
        self,
        database: Database,
        table: str,
        spec: QuerySpec | None = None,
        factory: RowFactory | None = None,
    ) -> None:
        self._db = database
        self._table = table
        self._spec = spec or QuerySpec()
        self._factory = factory

    @property
    def table(self) -> str:
        return self._table

    @property
    def spec(self) -> QuerySpec:
        return self._spec

    def _with(self, **update: Any) -> QueryCursor:
        # model_copy(update=...) skips validation; rebuild so limit/page bounds apply.
        spec = QuerySpec.model_validate({**self._spec.model_dump(), **update})
        return QueryCursor(self._db, self._table, spec, self._factory)

    # ------------------------------------------------------------------
    # Builder methods
    # ------------------------------------------------------------------

    def select(self, *columns: str) -> QueryCursor:
        """Set the projection; a single argument is used as raw column text."""
        if len(columns) == 1:
            return self._with(columns=columns[0])
        return self._with(columns=tuple(columns) or "*")

    def distinct(self, enabled: bool = True) -> QueryCursor:
        return self._with(distinct=enabled)

    def join(self, table: str, on: str, type: JoinType = "INNER") -> QueryCursor:
        join = JoinClause(table=table, on=on, type=type)
        return self._with(joins=(*self._spec.joins, join))

    def where(self, clause: str, *args: Any) -> QueryCursor:
        return self._with(where=WhereClause(clause=clause, args=args))

    def group_by(self, *columns: str) -> QueryCursor:
        return self._with(group_by=columns[0] if len(columns) == 1 else tuple(columns))

    def having(self, clause: str, *args: Any) -> QueryCursor:
        return self._with(having=WhereClause(clause=clause, args=args))

    def order_by(self, column: str, direction: str | None = None) -> QueryCursor:
        item = OrderByItem(column=column, direction=direction)
        return self._with(order_by=(*self._spec.order_by, item))

    def limit(self, limit: int) -> QueryCursor:
        return self._with(limit=limit)

    def page(self, page: int) -> QueryCursor:
        return self._with(page=page)

    def row_factory(self, factory: RowFactory | None) -> QueryCursor:
        return QueryCursor(self._db, self._table, self._spec, factory)

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def compile(self) -> StatementRequest:
        """Return the SELECT this cursor would run, without running it."""
        return compile_select(self._table, self._spec)

    async def get(self, factory: RowFactory | None = None) -> list[Any]:
        """Run the SELECT and map every row.

        ``factory`` takes precedence over the cursor's :meth:`row_factory`;
        without either, rows are returned as plain dicts.
        """
        result = await self._db.execute(self.compile())
        mapper = factory or self._factory
        if mapper is None:
            return list(result.rows)
        return [mapper(row) for row in result.rows]

    async def first(self, factory: RowFactory | None = None) -> Any | None:
        """First row of the query, or ``None``.

        A paged cursor keeps its page and returns that page's first row.
        """
        cursor = self if self._spec.offset is not None else self.limit(1)
        rows = await cursor.get(factory)
        return rows[0] if rows else None

    async def insert(self, record: Record) -> int | None:
        """Insert one row and return its rowid."""
        result = await self._db.execute(compile_insert(self._table, record))
        return result.insert_id

    async def insert_many(
        self, fields: Sequence[str], rows: Sequence[Sequence[Any]]
    ) -> ExecutionResult:
        return await self._db.execute(compile_insert_many(self._table, fields, rows))

    async def update(self, record: Record) -> int:
        """Update the rows matching the current ``where``; returns rows affected."""
        where = self._spec.where
        request = compile_update(
            self._table,
            record,
            where.clause if where else None,
            where.args if where else (),
        )
        return (await self._db.execute(request)).rows_affected

    async def delete(self) -> int:
        """Delete the rows matching the current ``where`` (all rows without one)."""
        where = self._spec.where
        request = compile_delete(
            self._table,
            where.clause if where else None,
            where.args if where else (),
        )
        return (await self._db.execute(request)).rows_affected

    def __repr__(self) -> str:
        return f"QueryCursor(table={self._table!r}, sql={self.compile().sql!r})"
