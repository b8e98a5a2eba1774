"""Transactional statement execution.

``TransactionExecutor`` runs an ordered batch of
:class:`~sqlitemanager.compile.base.StatementRequest` objects as one atomic
unit against a named database and returns their results in submission
order.

The executor holds no lock of its own.  Batches on the same database are
serialized by the handle's transaction queue (see
:meth:`~sqlitemanager.engine.driver.SQLiteHandle.transaction`), so two
concurrent batches never interleave their statements.  Nothing here retries
and nothing imposes a timeout.
"""
from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.engine.registry import ConnectionRegistry
from sqlitemanager.engine.result import ExecutionResult
from sqlitemanager.errors import ExecutionError, NoResultError, StatementFailureError

logger = logging.getLogger(__name__)


class TransactionExecutor:
    """Executes statement batches through a :class:`ConnectionRegistry`.

    Args:
        registry: Registry owning the connections this executor uses.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ConnectionRegistry:
        return self._registry

    async def execute_batch(
        self,
        name: str,
        requests: Sequence[StatementRequest],
    ) -> list[ExecutionResult]:
        """Run ``requests`` in one transaction on database ``name``.

        The connection is opened on first use.  The batch commits only if
        every statement succeeds; otherwise the engine rolls the whole
        transaction back.

        Args:
            name: Database name registered in (or new to) the registry.
            requests: Statements to run, in order.

        Returns:
            One :class:`ExecutionResult` per request, in submission order.
            An empty batch returns ``[]`` without touching the database.

        Raises:
            ConnectionOpenError: If the database cannot be opened.
            StatementFailureError: If the engine rejects a statement.
            ExecutionError: If the transaction itself cannot begin or commit.
        """
        if not requests:
            return []

        handle = await self._registry.get(name).open()
        results: list[ExecutionResult] = []
        try:
            async with handle.transaction() as tx:
                for index, request in enumerate(requests):
                    logger.debug("[%s] %s %r", name, request.sql, request.params)
                    try:
                        results.append(await tx.execute(request.sql, request.params))
                    except sqlite3.Error as exc:
                        logger.warning(
                            "[%s] statement %d of %d failed, batch rolled back: %s",
                            name, index + 1, len(requests), exc,
                        )
                        raise StatementFailureError(
                            str(exc), index=index, sql=request.sql, params=request.params
                        ) from exc
        except sqlite3.Error as exc:
            logger.warning("[%s] transaction failed: %s", name, exc)
            raise ExecutionError(f"Transaction on '{name}' failed: {exc}") from exc
        return results

    async def execute_single(self, name: str, request: StatementRequest) -> ExecutionResult:
        """Run one statement in its own transaction and return its result.

        Raises:
            NoResultError: If the driver produced no result for the statement.
            StatementFailureError: If the engine rejects the statement.
        """
        results = await self.execute_batch(name, [request])
        if not results:
            raise NoResultError(f"No result returned for statement: {request.sql}")
        return results[0]
