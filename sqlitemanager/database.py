"""Database facade bound to one registry name.

``Database`` is the object migration hooks and application code hold on to.
It owns no connection of its own; every call goes through the shared
:class:`~sqlitemanager.engine.registry.ConnectionRegistry` and
:class:`~sqlitemanager.engine.executor.TransactionExecutor`.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.cursor import QueryCursor
from sqlitemanager.engine.executor import TransactionExecutor
from sqlitemanager.engine.registry import Connection, ConnectionRegistry
from sqlitemanager.engine.result import ExecutionResult
from sqlitemanager.introspect import SchemaIntrospector
from sqlitemanager.migrate.engine import MigrationEngine, SchemaState
from sqlitemanager.migrate.migration import Migration
from sqlitemanager.migrate.schema import Schema


class Database:
    """One named SQLite database.

    Example::

        registry = ConnectionRegistry(ConnectionConfig(directory="data"))
        db = Database("app.db", registry)
        await db.migrate(AppMigration(), version=1)
        rows = await db.table("tb_animals").where("id > ?", 1).get()

    Args:
        name: Database name; a file name resolved against the registry's
            configured directory, or ``":memory:"``.
        registry: Registry holding the connection for ``name``.
    """

    def __init__(self, name: str, registry: ConnectionRegistry) -> None:
        self._name = name
        self._registry = registry
        self._executor = TransactionExecutor(registry)
        self._introspector = SchemaIntrospector(self._executor, name)
        self._schema = Schema(self)
        self._migrations = MigrationEngine(self)

    @property
    def name(self) -> str:
        return self._name

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    @property
    def executor(self) -> TransactionExecutor:
        return self._executor

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def introspector(self) -> SchemaIntrospector:
        return self._introspector

    @property
    def is_open(self) -> bool:
        return self._name in self._registry and self._registry.get(self._name).is_open

    async def open(self) -> Connection:
        """Open the underlying connection if it is not open yet."""
        return await self._registry.open(self._name)

    async def close(self) -> None:
        await self._registry.close(self._name)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    async def execute_batch(self, *requests: StatementRequest) -> list[ExecutionResult]:
        """Run ``requests`` as one transaction; results in submission order."""
        return await self._executor.execute_batch(self._name, requests)

    async def execute(self, request: StatementRequest) -> ExecutionResult:
        return await self._executor.execute_single(self._name, request)

    async def execute_sql(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        return await self.execute(StatementRequest(sql, tuple(params)))

    def table(self, name: str) -> QueryCursor:
        return QueryCursor(self, name)

    # ------------------------------------------------------------------
    # Versioning
    # ------------------------------------------------------------------

    async def get_version(self) -> int:
        return await self._migrations.read_version()

    async def set_version(self, version: int) -> None:
        await self._migrations.write_version(version)

    async def migrate(self, migration: Migration, version: int) -> SchemaState:
        """See :meth:`~sqlitemanager.migrate.engine.MigrationEngine.migrate`."""
        return await self._migrations.migrate(migration, version)

    def __repr__(self) -> str:
        return f"Database(name={self._name!r})"
