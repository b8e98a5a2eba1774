"""sqlitemanager migrations: version state machine and schema helpers."""
from sqlitemanager.migrate.engine import MigrationEngine, SchemaState
from sqlitemanager.migrate.migration import Migration
from sqlitemanager.migrate.schema import Schema, TableClosure

__all__ = [
    "Migration",
    "MigrationEngine",
    "Schema",
    "SchemaState",
    "TableClosure",
]
