"""Migration hook base class.

Subclass :class:`Migration`, implement :meth:`~Migration.on_create` and
override whichever other hooks you need::

    class AppMigration(Migration):
        async def on_create(self, db):
            await db.schema.create("tb_animals", lambda t: (
                t.increments("id"),
                t.text("name"),
            ))

        async def on_update(self, db, old_version, new_version):
            if old_version < 2:
                await db.schema.alter("tb_animals", lambda t: t.text("color").nullable())

    await db.migrate(AppMigration(), version=2)

Hooks may be plain functions or coroutines.
"""
from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlitemanager.database import Database


class Migration(ABC):
    """Hooks invoked by :class:`~sqlitemanager.migrate.engine.MigrationEngine`.

    Order on every run: ``before_migration``, then either
    ``on_create`` + ``on_post_create`` (fresh database) or ``on_update`` +
    ``on_post_update`` (older version), then the version write, then
    ``after_migration``.
    """

    def before_migration(self, db: Database, old_version: int, new_version: int) -> Any:
        return None

    @abstractmethod
    def on_create(self, db: Database) -> Any:
        """Create the schema on a database that has never been initialized."""

    def on_post_create(self, db: Database) -> Any:
        """Runs right after :meth:`on_create`; typically seeds data."""
        return None

    def on_update(self, db: Database, old_version: int, new_version: int) -> Any:
        return None

    def on_post_update(self, db: Database, old_version: int, new_version: int) -> Any:
        return None

    def after_migration(self, db: Database, old_version: int, new_version: int) -> Any:
        return None


async def call_maybe_async(fn: Callable[..., Any], *args: Any) -> Any:
    """Call ``fn`` and await the result when it is awaitable."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
