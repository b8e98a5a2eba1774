"""Test fixtures: sample animals data, a recording migration and a runner."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

from sqlitemanager.config import ConnectionConfig
from sqlitemanager.database import Database
from sqlitemanager.engine.registry import ConnectionRegistry
from sqlitemanager.migrate.migration import Migration

_FIXTURES_DIR = Path(__file__).parent

T = TypeVar("T")


def load_animals() -> list[dict[str, Any]]:
    """Load the sample ``tb_animals`` rows from animals.json."""
    return json.loads((_FIXTURES_DIR / "animals.json").read_text())


def run_scenario(
    config: ConnectionConfig,
    scenario: Callable[[Database], Awaitable[T]],
    name: str = "app.db",
) -> T:
    """Run ``scenario`` against a fresh registry and close it afterwards.

    Every call uses a new event loop and a new registry, so two calls on the
    same ``config`` behave like two application runs against one file.
    """

    async def main() -> T:
        registry = ConnectionRegistry(config)
        try:
            return await scenario(Database(name, registry))
        finally:
            await registry.close_all()

    return asyncio.run(main())


def animals_table(table) -> None:
    """Declare the canonical ``tb_animals`` table on a TableSpecBuilder."""
    table.increments("id")
    table.text("name")
    table.text("color").nullable()
    table.integer("age").default(0)
    table.index("idx_animals_name").columns("name")


class RecordingMigration(Migration):
    """Creates ``tb_animals`` and records every hook call in ``calls``.

    Args:
        fail_on: Name of a hook that raises ``RuntimeError`` instead of running.
        seed: Insert the fixture rows from ``on_post_create``.
    """

    def __init__(self, fail_on: str | None = None, seed: bool = False) -> None:
        self.calls: list[tuple[Any, ...]] = []
        self._fail_on = fail_on
        self._seed = seed

    def _record(self, hook: str, *args: Any) -> None:
        self.calls.append((hook, *args))
        if hook == self._fail_on:
            raise RuntimeError(f"{hook} exploded")

    @property
    def hooks(self) -> list[str]:
        return [call[0] for call in self.calls]

    def before_migration(self, db, old_version, new_version):
        self._record("before_migration", old_version, new_version)

    async def on_create(self, db):
        self._record("on_create")
        await db.schema.create("tb_animals", animals_table)

    async def on_post_create(self, db):
        self._record("on_post_create")
        if self._seed:
            rows = load_animals()
            fields = list(rows[0])
            await db.table("tb_animals").insert_many(
                fields, [[row[f] for f in fields] for row in rows]
            )

    async def on_update(self, db, old_version, new_version):
        self._record("on_update", old_version, new_version)
        await db.schema.alter("tb_animals", lambda table: (
            animals_table(table),
            table.text("owner").nullable(),
        ))

    def on_post_update(self, db, old_version, new_version):
        self._record("on_post_update", old_version, new_version)

    def after_migration(self, db, old_version, new_version):
        self._record("after_migration", old_version, new_version)
