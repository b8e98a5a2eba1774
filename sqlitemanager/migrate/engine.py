"""Schema version state machine.

The stored version lives in SQLite's own ``PRAGMA user_version`` slot, not in
a user table.  ``0`` means the database has never been initialized by this
layer.

States, given a target version ``V``:

============== =============================== =============================
State          Stored version                  Hooks run
============== =============================== =============================
UNINITIALIZED  ``0``                           on_create, on_post_create
STALE          not ``0`` and not ``V``         on_update, on_post_update
CURRENT        ``V``                           none
============== =============================== =============================

``before_migration`` runs before and ``after_migration`` runs after the
table above on every path.  The version write happens once, after the
create/update hooks.  If ``before_migration`` or a create/update hook fails,
the version is not written and a retry re-enters the same state.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.errors import MigrationError
from sqlitemanager.migrate.migration import Migration, call_maybe_async

if TYPE_CHECKING:
    from sqlitemanager.database import Database

logger = logging.getLogger(__name__)


class SchemaState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CURRENT = "current"
    STALE = "stale"

    @classmethod
    def classify(cls, stored: int, target: int) -> SchemaState:
        if stored == 0:
            return cls.UNINITIALIZED
        if stored == target:
            return cls.CURRENT
        return cls.STALE


class MigrationEngine:
    """Reads and advances the stored schema version of one database.

    Args:
        database: The database to migrate; passed to every hook.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def read_version(self) -> int:
        result = await self._db.execute(StatementRequest("PRAGMA user_version"))
        row = result.first()
        if row is None:
            return 0
        return int(row.get("user_version") or 0)

    async def write_version(self, version: int) -> None:
        # PRAGMA values cannot be bound; int() keeps the text a plain integer.
        await self._db.execute(StatementRequest(f"PRAGMA user_version = {int(version)}"))

    async def migrate(self, migration: Migration, version: int) -> SchemaState:
        """Bring the database to ``version`` by running ``migration``'s hooks.

        Args:
            migration: Hook implementation.
            version: Target schema version; must be at least 1.

        Returns:
            The state the database was in before the migration.

        Raises:
            MigrationError: If ``version`` is invalid or a hook fails.
            ConnectionOpenError: If the database cannot be opened.
        """
        if version < 1:
            raise MigrationError(
                f"Target schema version must be >= 1, got {version}.", to_version=version
            )

        await self._db.open()
        stored = await self.read_version()
        state = SchemaState.classify(stored, version)
        logger.info(
            "Migrating %s: stored version %d, target %d (%s)",
            self._db.name, stored, version, state.value,
        )

        await self._hook(migration.before_migration, "before_migration", stored, version,
                         self._db, stored, version)

        if state is SchemaState.UNINITIALIZED:
            await self._hook(migration.on_create, "on_create", stored, version, self._db)
            await self._hook(migration.on_post_create, "on_post_create", stored, version,
                             self._db)
        elif state is SchemaState.STALE:
            await self._hook(migration.on_update, "on_update", stored, version,
                             self._db, stored, version)
            await self._hook(migration.on_post_update, "on_post_update", stored, version,
                             self._db, stored, version)

        await self.write_version(version)

        await self._hook(migration.after_migration, "after_migration", stored, version,
                         self._db, stored, version)
        return state

    async def _hook(
        self,
        fn: Callable[..., Any],
        hook: str,
        stored: int,
        version: int,
        *args: Any,
    ) -> None:
        logger.debug("Running %s on %s", hook, self._db.name)
        try:
            await call_maybe_async(fn, *args)
        except MigrationError:
            raise
        except Exception as exc:
            logger.warning("Migration hook %s failed on %s: %s", hook, self._db.name, exc)
            raise MigrationError(
                f"Migration hook '{hook}' failed: {exc}",
                hook=hook,
                from_version=stored,
                to_version=version,
            ) from exc
