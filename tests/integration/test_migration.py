"""Integration tests for the schema version state machine."""
from __future__ import annotations

import pytest

from sqlitemanager import MigrationError, SchemaState
from tests.fixtures import RecordingMigration


def test_classify():
    assert SchemaState.classify(0, 3) is SchemaState.UNINITIALIZED
    assert SchemaState.classify(3, 3) is SchemaState.CURRENT
    assert SchemaState.classify(2, 3) is SchemaState.STALE
    assert SchemaState.classify(5, 3) is SchemaState.STALE


def test_migration_error_response():
    error = MigrationError("boom", hook="on_create", from_version=0, to_version=2)
    assert error.to_error_response() == {
        "error": "MIGRATION_FAILED",
        "message": "boom",
        "details": {"hook": "on_create", "from_version": 0, "to_version": 2},
    }


@pytest.mark.integration
def test_migrate_twice_creates_once(run_db):
    migration = RecordingMigration()

    async def scenario(db):
        first = await db.migrate(migration, 3)
        after_first = await db.get_version()
        second = await db.migrate(migration, 3)
        after_second = await db.get_version()
        return first, after_first, second, after_second

    first, after_first, second, after_second = run_db(scenario)
    assert first is SchemaState.UNINITIALIZED
    assert second is SchemaState.CURRENT
    assert after_first == after_second == 3
    assert migration.calls == [
        ("before_migration", 0, 3),
        ("on_create",),
        ("on_post_create",),
        ("after_migration", 0, 3),
        ("before_migration", 3, 3),
        ("after_migration", 3, 3),
    ]


@pytest.mark.integration
def test_update_path_on_next_run(run_db):
    run_db(lambda db: db.migrate(RecordingMigration(seed=True), 1))

    migration = RecordingMigration()

    async def scenario(db):
        state = await db.migrate(migration, 2)
        columns = await db.introspector.column_names("tb_animals")
        rows = await db.table("tb_animals").select("COUNT(*) AS n").first()
        return state, columns, rows["n"], await db.get_version()

    state, columns, count, version = run_db(scenario)
    assert state is SchemaState.STALE
    assert migration.hooks == [
        "before_migration", "on_update", "on_post_update", "after_migration",
    ]
    assert ("on_update", 1, 2) in migration.calls
    assert columns == ["id", "name", "color", "age", "owner"]
    assert count == 4
    assert version == 2


@pytest.mark.integration
def test_lower_target_runs_update_hooks(run_db):
    run_db(lambda db: db.migrate(RecordingMigration(), 5))

    migration = RecordingMigration()
    state = run_db(lambda db: db.migrate(migration, 2))
    assert state is SchemaState.STALE
    assert ("on_update", 5, 2) in migration.calls
    assert run_db(lambda db: db.get_version()) == 2


@pytest.mark.integration
def test_failed_hook_leaves_version_unwritten(run_db):
    for hook in ("before_migration", "on_create", "on_post_create"):
        name = f"{hook}.db"
        with pytest.raises(MigrationError) as exc_info:
            run_db(lambda db: db.migrate(RecordingMigration(fail_on=hook), 1), name)

        error = exc_info.value
        assert error.hook == hook
        assert (error.from_version, error.to_version) == (0, 1)
        assert isinstance(error.__cause__, RuntimeError)
        assert run_db(lambda db: db.get_version(), name) == 0

        # A retry re-enters the create path.
        retry = RecordingMigration()
        assert run_db(lambda db: db.migrate(retry, 1), name) is SchemaState.UNINITIALIZED
        assert "on_create" in retry.hooks
        assert run_db(lambda db: db.get_version(), name) == 1


@pytest.mark.integration
def test_failed_update_keeps_old_version(run_db):
    run_db(lambda db: db.migrate(RecordingMigration(), 1))

    failing = RecordingMigration(fail_on="on_post_update")
    with pytest.raises(MigrationError) as exc_info:
        run_db(lambda db: db.migrate(failing, 2))
    assert exc_info.value.hook == "on_post_update"
    assert run_db(lambda db: db.get_version()) == 1


@pytest.mark.integration
def test_failed_after_migration_keeps_new_version(run_db):
    failing = RecordingMigration(fail_on="after_migration")
    with pytest.raises(MigrationError) as exc_info:
        run_db(lambda db: db.migrate(failing, 1))
    assert exc_info.value.hook == "after_migration"
    assert run_db(lambda db: db.get_version()) == 1


@pytest.mark.integration
def test_invalid_target_version(run_db):
    migration = RecordingMigration()

    async def scenario(db):
        with pytest.raises(MigrationError) as exc_info:
            await db.migrate(migration, 0)
        return exc_info.value, db.is_open

    error, is_open = run_db(scenario)
    assert error.to_version == 0
    assert is_open is False
    assert migration.calls == []
