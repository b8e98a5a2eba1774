"""Table-level schema operations used from migration hooks.

``Schema`` turns a table closure into DDL and runs it.  Every public call
issues its statements as a single batch, so a table and its indexes appear
(or fail) together.

``alter`` only ever adds columns: columns declared in the closure but absent
from the live table get one ``ALTER TABLE ... ADD COLUMN`` each.  Indexes are
not diffed; every declared index is dropped and recreated.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from itertools import groupby
from typing import TYPE_CHECKING, Any

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.compile.ddl import (
    compile_add_column,
    compile_create_statements,
    compile_drop_index,
    compile_drop_table,
    compile_index_def,
)
from sqlitemanager.engine.result import ExecutionResult
from sqlitemanager.errors import SchemaError
from sqlitemanager.migrate.migration import call_maybe_async
from sqlitemanager.schema.table_spec import IndexDef, TableSpec, TableSpecBuilder

if TYPE_CHECKING:
    from sqlitemanager.database import Database

logger = logging.getLogger(__name__)

#: A function declaring a table on the builder it receives; may be async.
TableClosure = Callable[[TableSpecBuilder], Any]


class Schema:
    """DDL helpers bound to one database.

    Args:
        database: Database the statements run against.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def build(self, name: str, closure: TableClosure) -> TableSpec:
        """Run ``closure`` on a fresh builder and return the resulting spec."""
        builder = TableSpecBuilder(name)
        await call_maybe_async(closure, builder)
        return builder.build()

    # ------------------------------------------------------------------
    # Create / alter
    # ------------------------------------------------------------------

    async def create(self, name: str, closure: TableClosure) -> TableSpec:
        """``CREATE TABLE IF NOT EXISTS`` plus every declared index."""
        return await self.create_spec(await self.build(name, closure))

    async def create_spec(self, spec: TableSpec) -> TableSpec:
        logger.debug("Creating table %s", spec.name)
        await self._db.execute_batch(*compile_create_statements(spec))
        return spec

    async def alter(self, name: str, closure: TableClosure) -> TableSpec:
        """Add missing columns, then drop and recreate every declared index."""
        return await self.alter_spec(await self.build(name, closure))

    async def alter_spec(self, spec: TableSpec) -> TableSpec:
        missing = await self._db.introspector.missing_columns(spec)
        statements = [StatementRequest(compile_add_column(spec.name, c)) for c in missing]
        for index in spec.indexes:
            statements.append(StatementRequest(compile_drop_index(index)))
            statements.append(StatementRequest(compile_index_def(index)))
        logger.debug(
            "Altering table %s: %d new column(s), %d index(es) recreated",
            spec.name, len(missing), len(spec.indexes),
        )
        await self._db.execute_batch(*statements)
        return spec

    async def create_or_alter(self, name: str, closure: TableClosure) -> TableSpec:
        return await self.create_or_alter_spec(await self.build(name, closure))

    async def create_or_alter_spec(self, spec: TableSpec) -> TableSpec:
        if await self._db.introspector.has_table(spec.name):
            return await self.alter_spec(spec)
        return await self.create_spec(spec)

    async def drop(self, name: str) -> None:
        await self._db.execute(StatementRequest(compile_drop_table(name)))

    async def has_table(self, name: str) -> bool:
        return await self._db.introspector.has_table(name)

    # ------------------------------------------------------------------
    # Structure / data copies
    # ------------------------------------------------------------------

    async def duplicate_table_structure(self, source: str, target: str) -> None:
        """Create ``target`` with the columns, foreign keys and indexes of
        ``source``, without copying any rows.

        Index names are global in SQLite, so copied indexes are named
        ``{index}_{target}``.

        Raises:
            SchemaError: If ``source`` does not exist.
        """
        introspector = self._db.introspector
        if not await introspector.has_table(source):
            raise SchemaError(f"The source table '{source}' does not exist.", table=source)

        columns = await introspector.table_info(source)
        pk_columns = [c.name for c in sorted(columns, key=lambda c: c.primary_key) if c.primary_key]

        definitions: list[str] = []
        for column in columns:
            definition = f"{column.name} {column.type}".rstrip()
            if not column.nullable:
                definition += " NOT NULL"
            if column.default is not None:
                # dflt_value is already SQL expression text.
                definition += f" DEFAULT {column.default}"
            if len(pk_columns) == 1 and column.primary_key:
                definition += " PRIMARY KEY"
            definitions.append(definition)
        if len(pk_columns) > 1:
            definitions.append(f"PRIMARY KEY ({', '.join(pk_columns)})")

        foreign_keys = sorted(await introspector.foreign_keys(source), key=lambda f: (f.id, f.seq))
        for _, group in groupby(foreign_keys, key=lambda f: f.id):
            rows = list(group)
            from_columns = ", ".join(f.from_column for f in rows)
            to_columns = ", ".join(f.to_column or "" for f in rows)
            definitions.append(
                f"FOREIGN KEY ({from_columns}) REFERENCES {rows[0].table} ({to_columns}) "
                f"ON DELETE {rows[0].on_delete} ON UPDATE {rows[0].on_update}"
            )

        statements = [
            StatementRequest(f"CREATE TABLE IF NOT EXISTS {target} ({', '.join(definitions)})")
        ]
        for index in await introspector.indexes(source):
            if index.origin != "c":
                continue
            copy = IndexDef(
                name=f"{index.name}_{target}",
                table=target,
                unique=index.unique,
                columns=tuple(index.columns),
            )
            statements.append(StatementRequest(compile_index_def(copy)))

        await self._db.execute_batch(*statements)

    async def copy_table_data(self, source: str, target: str) -> ExecutionResult:
        """Copy every row of ``source`` into ``target`` over their common columns.

        Raises:
            SchemaError: If either table is missing or they share no columns.
        """
        introspector = self._db.introspector
        if not await introspector.has_table(source):
            raise SchemaError(f"The source table '{source}' does not exist.", table=source)
        if not await introspector.has_table(target):
            raise SchemaError(
                f"The destination table '{target}' does not exist.", table=target
            )

        target_columns = set(await introspector.column_names(target))
        common = [c for c in await introspector.column_names(source) if c in target_columns]
        if not common:
            raise SchemaError(
                f"Tables '{source}' and '{target}' have no columns in common.", table=target
            )

        column_list = ", ".join(common)
        return await self._db.execute(
            StatementRequest(
                f"INSERT INTO {target} ({column_list}) SELECT {column_list} FROM {source}"
            )
        )
