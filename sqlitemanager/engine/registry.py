"""Connection registry: one Connection object per database name.

The registry is an explicit object owned by the application and handed to
every component that needs database access; there is no module-level
connection cache.  Entries are never evicted: each named database is
expected to be opened once per application lifetime and closed at
shutdown via :meth:`ConnectionRegistry.close_all`.
"""
from __future__ import annotations

import asyncio
import logging
import sqlite3
from collections.abc import Iterator

from sqlitemanager.config import ConnectionConfig
from sqlitemanager.engine.driver import SQLiteHandle, open_database
from sqlitemanager.errors import ConnectionOpenError

logger = logging.getLogger(__name__)


class Connection:
    """A named database whose handle is opened lazily.

    Args:
        name: Database name; resolved to a path by ``config``.
        config: Connection settings shared with the owning registry.
    """

    def __init__(self, name: str, config: ConnectionConfig) -> None:
        self.name = name
        self.path = config.resolve_path(name)
        self.handle: SQLiteHandle | None = None
        self._config = config
        self._open_guard = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self.handle is not None

    async def open(self) -> SQLiteHandle:
        """Open the handle if needed and return it.

        Concurrent first callers wait on a per-connection guard, so exactly
        one handle is ever created for this name.

        Raises:
            ConnectionOpenError: If SQLite cannot open the database.  The
                connection stays unopened so a later call may retry.
        """
        if self.handle is not None:
            return self.handle
        async with self._open_guard:
            if self.handle is None:
                try:
                    self.handle = await open_database(self.path, self._config)
                except (sqlite3.Error, OSError) as exc:
                    logger.warning("Could not open database %s: %s", self.name, exc)
                    raise ConnectionOpenError(
                        f"Could not open database '{self.name}': {exc}", name=self.name
                    ) from exc
        return self.handle

    async def close(self) -> None:
        """Release the handle.  Closing an unopened connection is a no-op."""
        async with self._open_guard:
            if self.handle is None:
                return
            handle, self.handle = self.handle, None
            await handle.close()
            logger.debug("Closed database %s", self.name)

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"Connection(name={self.name!r}, {state})"


class ConnectionRegistry:
    """Maps database names to exactly one :class:`Connection` each.

    Args:
        config: Settings applied to every connection this registry creates.
            Defaults to ``ConnectionConfig()``.
    """

    def __init__(self, config: ConnectionConfig | None = None) -> None:
        self._config = config or ConnectionConfig()
        self._connections: dict[str, Connection] = {}

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    def get(self, name: str) -> Connection:
        """Return the connection for ``name``, registering a new unopened one
        on first request.  Never opens the handle."""
        connection = self._connections.get(name)
        if connection is None:
            connection = Connection(name, self._config)
            self._connections[name] = connection
        return connection

    async def open(self, name: str) -> Connection:
        """``get`` followed by an explicit open, for pre-warming."""
        connection = self.get(name)
        await connection.open()
        return connection

    async def close(self, name: str) -> None:
        connection = self._connections.get(name)
        if connection is not None:
            await connection.close()

    async def close_all(self) -> None:
        for connection in list(self._connections.values()):
            await connection.close()

    @property
    def names(self) -> list[str]:
        """Returns the registered database names, in registration order."""
        return list(self._connections)

    def __contains__(self, name: object) -> bool:
        return name in self._connections

    def __iter__(self) -> Iterator[Connection]:
        return iter(list(self._connections.values()))

    def __len__(self) -> int:
        return len(self._connections)
