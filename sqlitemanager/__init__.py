"""sqlitemanager – Async SQLite access with versioned migrations.

Public API
----------
``ConnectionRegistry`` / ``Database``
    One lazily opened connection per database name; ``Database`` is the
    facade bound to a name.

``QueryCursor``
    Immutable builder over SELECT / INSERT / UPDATE / DELETE, obtained from
    ``Database.table(name)``.

``Migration`` / ``Schema``
    Hook base class run by ``Database.migrate(migration, version)`` against
    ``PRAGMA user_version``, plus the table helpers available as
    ``db.schema`` inside the hooks.

``Model``
    Active-record convenience base class.

Re-exported types
-----------------
``ConnectionConfig``, ``StatementRequest``, ``ExecutionResult``,
``QuerySpec``, ``TableSpec`` and its builders, and all error classes.

Optional SQLAlchemy integration
-------------------------------
``table_spec_from_sqlalchemy`` turns a ``sqlalchemy.Table`` into a
``TableSpec``; install the ``sqlalchemy`` extra to use it.
"""

from __future__ import annotations

import logging

from sqlitemanager.compile.base import StatementRequest, escape_string_literal, placeholders
from sqlitemanager.compile.statements import (
    compile_delete,
    compile_insert,
    compile_insert_many,
    compile_select,
    compile_update,
)
from sqlitemanager.config import MEMORY_DATABASE, ConnectionConfig
from sqlitemanager.cursor import QueryCursor
from sqlitemanager.database import Database
from sqlitemanager.engine.executor import TransactionExecutor
from sqlitemanager.engine.registry import Connection, ConnectionRegistry
from sqlitemanager.engine.result import ExecutionResult
from sqlitemanager.errors import (
    CompilationError,
    ConfigError,
    ConnectionOpenError,
    EmptyFieldsError,
    EmptyRecordError,
    EmptyRowsError,
    ExecutionError,
    MigrationError,
    NoResultError,
    SchemaError,
    SQLiteManagerError,
    StatementFailureError,
)
from sqlitemanager.introspect import ColumnInfo, ForeignKeyInfo, IndexInfo, SchemaIntrospector
from sqlitemanager.migrate import Migration, MigrationEngine, Schema, SchemaState
from sqlitemanager.model import Model
from sqlitemanager.schema.converters import table_spec_from_sqlalchemy, table_specs_from_metadata
from sqlitemanager.schema.query_spec import JoinClause, OrderByItem, QuerySpec, WhereClause
from sqlitemanager.schema.table_spec import (
    ColumnDef,
    ForeignKeyDef,
    IndexDef,
    TableSpec,
    TableSpecBuilder,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Entry points
    "ConnectionRegistry",
    "Connection",
    "Database",
    "QueryCursor",
    "TransactionExecutor",
    "SchemaIntrospector",
    "Migration",
    "MigrationEngine",
    "Schema",
    "SchemaState",
    "Model",
    # Compiler
    "StatementRequest",
    "compile_select",
    "compile_insert",
    "compile_insert_many",
    "compile_update",
    "compile_delete",
    "escape_string_literal",
    "placeholders",
    # Types
    "ConnectionConfig",
    "MEMORY_DATABASE",
    "ExecutionResult",
    "QuerySpec",
    "WhereClause",
    "JoinClause",
    "OrderByItem",
    "TableSpec",
    "TableSpecBuilder",
    "ColumnDef",
    "IndexDef",
    "ForeignKeyDef",
    "ColumnInfo",
    "ForeignKeyInfo",
    "IndexInfo",
    # Converters
    "table_spec_from_sqlalchemy",
    "table_specs_from_metadata",
    # Errors
    "SQLiteManagerError",
    "ConfigError",
    "CompilationError",
    "EmptyRecordError",
    "EmptyFieldsError",
    "EmptyRowsError",
    "ExecutionError",
    "NoResultError",
    "StatementFailureError",
    "ConnectionOpenError",
    "SchemaError",
    "MigrationError",
]
