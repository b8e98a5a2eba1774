"""aiosqlite adapter: the embedded-engine primitives the executor builds on.

The executor only relies on three things, all provided here:

* :func:`open_database`: open a handle for a path, applying the pragmas in
  :class:`~sqlitemanager.config.ConnectionConfig`;
* :meth:`SQLiteHandle.transaction`: a serialized transaction.  Requests
  queue on the handle and run strictly one at a time, in the order they
  were made; the transaction commits when the block exits normally and
  rolls back when it raises;
* :meth:`Transaction.execute`: run one parameterized statement and return
  an :class:`~sqlitemanager.engine.result.ExecutionResult`.

Driver errors (``sqlite3.Error``, re-exported as ``aiosqlite.Error``) are
not translated here; that is the executor's and registry's job.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import aiosqlite

from sqlitemanager.config import ConnectionConfig
from sqlitemanager.engine.result import ExecutionResult

logger = logging.getLogger(__name__)

# Temp table whose fixed row is rewritten before every INSERT, so that
# last_insert_rowid() only moves away from _NO_ROWID when the statement
# itself assigned a new rowid.
_ROWID_MARK = "_sqlitemanager_rowid_mark"
_NO_ROWID = -(2**63 - 1)


class Transaction:
    """Statement execution inside an open transaction."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> ExecutionResult:
        is_insert = _is_insert(sql)
        if is_insert:
            await self._conn.execute(
                f"REPLACE INTO temp.{_ROWID_MARK} (rowid) VALUES ({_NO_ROWID})"
            )
        async with self._conn.execute(sql, tuple(params)) as cursor:
            rows = [dict(row) for row in await cursor.fetchall()]
            rows_affected = max(cursor.rowcount, 0)
            insert_id = None
            # WITHOUT ROWID tables and UPSERTs taking DO UPDATE leave the marker in place.
            if rows_affected == 1 and is_insert and cursor.lastrowid != _NO_ROWID:
                insert_id = cursor.lastrowid
        return ExecutionResult(rows=rows, rows_affected=rows_affected, insert_id=insert_id)


class SQLiteHandle:
    """An open database handle with a FIFO transaction queue."""

    def __init__(self, conn: aiosqlite.Connection, path: str) -> None:
        self._conn = conn
        self._path = path
        self._queue = asyncio.Lock()

    @property
    def path(self) -> str:
        return self._path

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Run the block as one transaction, after every earlier request.

        Commits when the block exits normally; rolls back and re-raises
        otherwise.
        """
        async with self._queue:
            await self._conn.execute("BEGIN IMMEDIATE")
            try:
                yield Transaction(self._conn)
                await self._conn.execute("COMMIT")
            except BaseException:
                if self._conn.in_transaction:
                    await self._conn.execute("ROLLBACK")
                logger.debug("Rolled back transaction on %s", self._path)
                raise

    async def close(self) -> None:
        async with self._queue:
            await self._conn.close()


async def open_database(path: str, config: ConnectionConfig) -> SQLiteHandle:
    """Open ``path`` and apply the configured pragmas.

    Raises:
        aiosqlite.Error: If SQLite cannot open the file or apply a pragma.
        OSError: If the file cannot be reached.
    """
    conn = await aiosqlite.connect(path, timeout=config.timeout, isolation_level=None)
    try:
        conn.row_factory = aiosqlite.Row
        await conn.execute(f"PRAGMA foreign_keys = {'ON' if config.foreign_keys else 'OFF'}")
        if config.journal_mode is not None:
            await conn.execute(f"PRAGMA journal_mode = {config.journal_mode}")
        await conn.execute(f"CREATE TEMP TABLE IF NOT EXISTS {_ROWID_MARK} (mark INTEGER)")
    except BaseException:
        await conn.close()
        raise
    logger.debug("Opened database %s", path)
    return SQLiteHandle(conn, path)


def _is_insert(sql: str) -> bool:
    keyword = sql.lstrip().split(None, 1)[0].upper() if sql.strip() else ""
    return keyword in {"INSERT", "REPLACE"}
