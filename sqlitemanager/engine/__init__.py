"""sqlitemanager execution layer: connections, transactions, results."""
from sqlitemanager.engine.driver import SQLiteHandle, Transaction, open_database
from sqlitemanager.engine.executor import TransactionExecutor
from sqlitemanager.engine.registry import Connection, ConnectionRegistry
from sqlitemanager.engine.result import ExecutionResult

__all__ = [
    "Connection",
    "ConnectionRegistry",
    "ExecutionResult",
    "SQLiteHandle",
    "Transaction",
    "TransactionExecutor",
    "open_database",
]
