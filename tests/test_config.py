"""Unit tests for ConnectionConfig."""

from __future__ import annotations

from pathlib import Path

import pydantic
import pytest

from sqlitemanager.config import MEMORY_DATABASE, ConnectionConfig
from sqlitemanager.errors import ConfigError


def test_defaults():
    config = ConnectionConfig()
    assert config.directory is None
    assert config.foreign_keys is True
    assert config.journal_mode is None
    assert config.timeout == 5.0


def test_resolve_path(tmp_path: Path):
    config = ConnectionConfig(directory=tmp_path)
    assert config.resolve_path("app.db") == str(tmp_path / "app.db")
    assert config.resolve_path(MEMORY_DATABASE) == ":memory:"
    assert ConnectionConfig().resolve_path("app.db") == "app.db"


def test_unknown_field_rejected():
    with pytest.raises(pydantic.ValidationError):
        ConnectionConfig(cache_size=10)


def test_from_env():
    config = ConnectionConfig.from_env(environ={
        "SQLITEMANAGER_DIRECTORY": "/var/db",
        "SQLITEMANAGER_FOREIGN_KEYS": "off",
        "SQLITEMANAGER_JOURNAL_MODE": "wal",
        "SQLITEMANAGER_TIMEOUT": "2.5",
    })
    assert config.directory == Path("/var/db")
    assert config.foreign_keys is False
    assert config.journal_mode == "WAL"
    assert config.timeout == 2.5


def test_from_env_custom_prefix_and_defaults():
    config = ConnectionConfig.from_env(prefix="APP_DB_", environ={"APP_DB_FOREIGN_KEYS": "1"})
    assert config == ConnectionConfig()


def test_from_env_invalid_bool():
    with pytest.raises(ConfigError) as exc_info:
        ConnectionConfig.from_env(environ={"SQLITEMANAGER_FOREIGN_KEYS": "maybe"})
    assert exc_info.value.key == "SQLITEMANAGER_FOREIGN_KEYS"


def test_from_env_invalid_values():
    with pytest.raises(ConfigError):
        ConnectionConfig.from_env(environ={"SQLITEMANAGER_JOURNAL_MODE": "sideways"})
    with pytest.raises(ConfigError):
        ConnectionConfig.from_env(environ={"SQLITEMANAGER_TIMEOUT": "-1"})
    with pytest.raises(ConfigError):
        ConnectionConfig.from_env(environ={"SQLITEMANAGER_TIMEOUT": "soon"})
