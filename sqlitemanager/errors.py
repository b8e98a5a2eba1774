"""Custom exception hierarchy for sqlitemanager.

All public errors inherit from SQLiteManagerError so callers can catch the
base class for any sqlitemanager-specific failure.  Errors raised by the
underlying driver (``sqlite3.Error``) never escape unwrapped from the
executor or the registry; they are chained as ``__cause__``.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class SQLiteManagerError(Exception):
    """Base exception for all sqlitemanager errors."""


class ConfigError(SQLiteManagerError):
    """Raised when a :class:`~sqlitemanager.config.ConnectionConfig` cannot be built.

    Args:
        message: Human-readable description.
        key: The configuration key (or environment variable) at fault.
    """

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class CompilationError(SQLiteManagerError):
    """Raised when a statement description cannot be compiled to SQL.

    Args:
        message: Human-readable description.
        statement: The kind of statement being compiled when the error
            occurred (e.g. ``"INSERT"``, ``"UPDATE"``, ``"CONSTRAINT"``).
    """

    def __init__(self, message: str, statement: str | None = None) -> None:
        super().__init__(message)
        self.statement = statement


class EmptyRecordError(CompilationError):
    """Raised when an INSERT or UPDATE record has no fields."""

    def __init__(self, table: str, statement: str) -> None:
        super().__init__(
            f"Record for {statement} on table '{table}' is empty.",
            statement=statement,
        )
        self.table = table


class EmptyFieldsError(CompilationError):
    """Raised when a multi-row INSERT is given no field names."""

    def __init__(self, table: str) -> None:
        super().__init__(
            f"Field list for multi-row INSERT on table '{table}' is empty.",
            statement="INSERT",
        )
        self.table = table


class EmptyRowsError(CompilationError):
    """Raised when a multi-row INSERT is given no rows."""

    def __init__(self, table: str) -> None:
        super().__init__(
            f"Row list for multi-row INSERT on table '{table}' is empty.",
            statement="INSERT",
        )
        self.table = table


class ExecutionError(SQLiteManagerError):
    """Base class for failures while executing statements."""


class NoResultError(ExecutionError):
    """Raised when the driver returns no result for a submitted statement.

    This indicates driver misbehaviour rather than an expected outcome.
    """


class StatementFailureError(ExecutionError):
    """Raised when the engine rejects a statement inside a batch.

    The whole batch has been rolled back by the time this is raised.

    Args:
        message: Human-readable description (usually the engine's message).
        index: Position of the failing statement within the batch.
        sql: SQL text of the failing statement.
        params: Bind parameters of the failing statement.
    """

    def __init__(
        self,
        message: str,
        index: int,
        sql: str,
        params: Sequence[Any] = (),
    ) -> None:
        super().__init__(message)
        self.index = index
        self.sql = sql
        self.params = tuple(params)


class ConnectionOpenError(SQLiteManagerError):
    """Raised when the engine cannot open a database handle.

    The connection entry is left unopened, so a later call may retry.

    Args:
        message: Human-readable description.
        name: Name of the database that failed to open.
    """

    def __init__(self, message: str, name: str) -> None:
        super().__init__(message)
        self.name = name


class SchemaError(SQLiteManagerError):
    """Raised when a table-level schema operation cannot proceed.

    Args:
        message: Human-readable description.
        table: The table the operation was acting on.
    """

    def __init__(self, message: str, table: str | None = None) -> None:
        super().__init__(message)
        self.table = table


class MigrationError(SQLiteManagerError):
    """Raised when a migration aborts.

    Unless the failing hook is ``after_migration``, the stored schema
    version is left unchanged, so running the same migration again
    re-enters the same state.

    Args:
        message: Human-readable description.
        hook: Name of the hook that failed, if any.
        from_version: Stored version read at the start of the migration.
        to_version: Target version of the migration.
    """

    def __init__(
        self,
        message: str,
        hook: str | None = None,
        from_version: int | None = None,
        to_version: int | None = None,
    ) -> None:
        super().__init__(message)
        self.hook = hook
        self.from_version = from_version
        self.to_version = to_version

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured description of the failed migration."""
        return {
            "error": "MIGRATION_FAILED",
            "message": str(self),
            "details": {
                "hook": self.hook,
                "from_version": self.from_version,
                "to_version": self.to_version,
            },
        }
