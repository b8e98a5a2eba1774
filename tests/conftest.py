"""Shared pytest fixtures for sqlitemanager unit and integration tests."""
from __future__ import annotations

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest

from sqlitemanager.config import ConnectionConfig
from sqlitemanager.database import Database
from tests.fixtures import run_scenario


@pytest.fixture()
def db_config(tmp_path: Path) -> ConnectionConfig:
    """Config placing database files in the test's temporary directory."""
    return ConnectionConfig(directory=tmp_path)


@pytest.fixture()
def run_db(db_config: ConnectionConfig) -> Callable[..., Any]:
    """Run an async ``scenario(db)`` against ``app.db`` in ``tmp_path``.

    Calling it twice in one test reuses the same file with a new registry.
    """

    def _run(scenario: Callable[[Database], Awaitable[Any]], name: str = "app.db") -> Any:
        return run_scenario(db_config, scenario, name)

    return _run
