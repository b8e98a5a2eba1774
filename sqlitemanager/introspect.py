"""Read-only catalog queries against a live database.

``SchemaIntrospector`` answers "does this table exist" and "what does it look
like right now" by running metadata statements through the
:class:`~sqlitemanager.engine.executor.TransactionExecutor`.  Nothing is
cached: the schema can change between two calls in the middle of a
migration.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.engine.executor import TransactionExecutor
from sqlitemanager.schema.table_spec import ColumnDef, TableSpec


class ColumnInfo(BaseModel):
    """One row of ``PRAGMA table_info``.

    Attributes:
        name: Column name.
        type: Declared type, as written in the DDL.
        nullable: ``False`` when the column is declared NOT NULL.
        default: Raw DEFAULT expression text, or ``None``.
        primary_key: 1-based position in the primary key, ``0`` if not part of it.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: str
    nullable: bool = True
    default: str | None = None
    primary_key: int = 0


class ForeignKeyInfo(BaseModel):
    """One row of ``PRAGMA foreign_key_list``.

    Multi-column keys span several rows sharing the same ``id``, ordered by
    ``seq``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int = 0
    seq: int = 0
    table: str
    from_column: str
    to_column: str | None = None
    on_update: str = "NO ACTION"
    on_delete: str = "NO ACTION"


class IndexInfo(BaseModel):
    """An index with its columns, from ``PRAGMA index_list`` / ``index_info``.

    Attributes:
        name: Index name.
        unique: Whether the index enforces uniqueness.
        origin: ``c`` for CREATE INDEX, ``u`` for UNIQUE constraints,
            ``pk`` for primary keys.
        columns: Indexed columns, in index order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    unique: bool = False
    origin: str = "c"
    columns: list[str] = Field(default_factory=list)


class SchemaIntrospector:
    """Catalog queries for one named database.

    Args:
        executor: Executor used to run the metadata statements.
        name: Database name.
    """

    def __init__(self, executor: TransactionExecutor, name: str) -> None:
        self._executor = executor
        self._name = name

    async def _rows(self, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        result = await self._executor.execute_single(self._name, StatementRequest(sql, params))
        return result.rows

    async def has_table(self, table: str) -> bool:
        rows = await self._rows(
            "SELECT COUNT(*) AS _count_ FROM sqlite_master WHERE type = 'table' AND name = ?",
            (table,),
        )
        return bool(rows) and rows[0]["_count_"] > 0

    async def table_names(self) -> list[str]:
        """Returns user table names, excluding SQLite's internal tables."""
        rows = await self._rows(
            "SELECT name FROM sqlite_master WHERE type = 'table' "
            "AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row["name"] for row in rows]

    async def table_info(self, table: str) -> list[ColumnInfo]:
        rows = await self._rows(f"PRAGMA table_info({table})")
        return [
            ColumnInfo(
                name=row["name"],
                type=row["type"] or "",
                nullable=not row["notnull"],
                default=row["dflt_value"],
                primary_key=row["pk"],
            )
            for row in rows
        ]

    async def column_names(self, table: str) -> list[str]:
        """Returns the current column names of ``table`` (empty if it does not exist)."""
        return [column.name for column in await self.table_info(table)]

    async def foreign_keys(self, table: str) -> list[ForeignKeyInfo]:
        rows = await self._rows(f"PRAGMA foreign_key_list({table})")
        return [
            ForeignKeyInfo(
                id=row["id"],
                seq=row["seq"],
                table=row["table"],
                from_column=row["from"],
                to_column=row["to"],
                on_update=row["on_update"],
                on_delete=row["on_delete"],
            )
            for row in rows
        ]

    async def indexes(self, table: str) -> list[IndexInfo]:
        indexes: list[IndexInfo] = []
        for row in await self._rows(f"PRAGMA index_list({table})"):
            details = await self._rows(f"PRAGMA index_info({row['name']})")
            indexes.append(
                IndexInfo(
                    name=row["name"],
                    unique=bool(row["unique"]),
                    origin=row["origin"],
                    columns=[d["name"] for d in sorted(details, key=lambda d: d["seqno"])],
                )
            )
        return indexes

    async def missing_columns(self, spec: TableSpec) -> list[ColumnDef]:
        """Columns declared in ``spec`` that do not exist physically yet."""
        existing = set(await self.column_names(spec.name))
        return [column for column in spec.columns if column.name not in existing]
