"""DDL compilation: TableSpec -> CREATE TABLE / CREATE INDEX / ALTER TABLE.

Rendered forms::

    CREATE TABLE IF NOT EXISTS name (col TYPE [PRIMARY KEY] [AUTOINCREMENT]
        NULL|NOT NULL [DEFAULT literal], ..., FOREIGN KEY (...) REFERENCES t (...)
        [ON DELETE action])
    CREATE [UNIQUE] INDEX IF NOT EXISTS name ON table (col, ...)

DEFAULT values are the only constants ever embedded in SQL text; strings go
through :func:`~sqlitemanager.compile.base.escape_string_literal`.
"""
from __future__ import annotations

import math
from typing import Any

from sqlitemanager.compile.base import StatementRequest, escape_string_literal
from sqlitemanager.errors import CompilationError
from sqlitemanager.schema.table_spec import ColumnDef, ForeignKeyDef, IndexDef, TableSpec


def compile_column_def(column: ColumnDef) -> str:
    """Render one column definition."""
    parts = [column.name, column.type]
    if column.primary_key:
        parts.append("PRIMARY KEY")
    if column.auto_increment:
        parts.append("AUTOINCREMENT")
    parts.append("NULL" if column.nullable else "NOT NULL")
    if column.default is not None:
        parts.append(f"DEFAULT {compile_default_literal(column.default)}")
    return " ".join(parts)


def compile_default_literal(value: Any) -> str:
    """Render a constant DEFAULT value.

    Booleans become ``1``/``0``, numbers are emitted as-is and everything
    else is rendered as an escaped string literal.

    Raises:
        CompilationError: If ``value`` is an infinite or NaN float.
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and not math.isfinite(value):
        raise CompilationError(
            f"DEFAULT value {value!r} has no SQL literal form.", statement="CREATE TABLE"
        )
    if isinstance(value, (int, float)):
        return repr(value)
    return escape_string_literal(str(value))


def compile_index_def(index: IndexDef) -> str:
    """Render a CREATE INDEX statement.

    Raises:
        CompilationError: If the index has no columns.
    """
    if not index.columns:
        raise CompilationError(
            f"Index '{index.name}' on table '{index.table}' has no columns.",
            statement="INDEX",
        )
    unique = "UNIQUE " if index.unique else ""
    return (
        f"CREATE {unique}INDEX IF NOT EXISTS {index.name} "
        f"ON {index.table} ({', '.join(index.columns)})"
    )


def compile_constraint_def(constraint: ForeignKeyDef) -> str:
    """Render a FOREIGN KEY table constraint.

    Raises:
        CompilationError: If the constraint lacks columns, a referenced
            table, or referenced columns.
    """
    if not constraint.columns or constraint.table is None or not constraint.references:
        raise CompilationError(
            "Foreign key constraint needs columns, a referenced table and "
            "referenced columns.",
            statement="CONSTRAINT",
        )
    sql = (
        f"FOREIGN KEY ({', '.join(constraint.columns)}) "
        f"REFERENCES {constraint.table} ({', '.join(constraint.references)})"
    )
    if constraint.on_delete is not None:
        sql += f" ON DELETE {constraint.on_delete}"
    return sql


def compile_create_table(spec: TableSpec) -> str:
    """Render ``CREATE TABLE IF NOT EXISTS`` for ``spec`` (indexes excluded).

    Raises:
        CompilationError: If ``spec`` declares no columns.
    """
    if not spec.columns:
        raise CompilationError(
            f"Table '{spec.name}' declares no columns.", statement="CREATE TABLE"
        )
    definitions = [compile_column_def(c) for c in spec.columns]
    definitions.extend(compile_constraint_def(c) for c in spec.constraints)
    return f"CREATE TABLE IF NOT EXISTS {spec.name} ({', '.join(definitions)})"


def compile_create_statements(spec: TableSpec) -> list[StatementRequest]:
    """CREATE TABLE followed by one CREATE INDEX per index, in declaration order."""
    statements = [StatementRequest(compile_create_table(spec))]
    statements.extend(StatementRequest(compile_index_def(i)) for i in spec.indexes)
    return statements


def compile_add_column(table: str, column: ColumnDef) -> str:
    """Render ``ALTER TABLE ... ADD COLUMN``."""
    return f"ALTER TABLE {table} ADD COLUMN {compile_column_def(column)}"


def compile_drop_index(index: IndexDef | str) -> str:
    name = index if isinstance(index, str) else index.name
    return f"DROP INDEX IF EXISTS {name}"


def compile_drop_table(table: str) -> str:
    return f"DROP TABLE IF EXISTS {table}"
