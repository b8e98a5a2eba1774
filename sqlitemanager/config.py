"""Connection configuration.

``ConnectionConfig`` decides where database files live and which pragmas are
applied when a handle is opened.  It is shared by every connection created
through one :class:`~sqlitemanager.engine.registry.ConnectionRegistry`::

    config = ConnectionConfig(directory=Path("var/db"), journal_mode="WAL")
    registry = ConnectionRegistry(config)

or, for deployments driven by the environment::

    config = ConnectionConfig.from_env()   # SQLITEMANAGER_DIRECTORY, ...
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sqlitemanager.errors import ConfigError

#: Name that SQLite treats as a private in-memory database.
MEMORY_DATABASE = ":memory:"

JournalMode = Literal["DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"]

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


class ConnectionConfig(BaseModel):
    """Settings applied to every handle opened by a registry.

    Attributes:
        directory: Base directory for database files.  ``None`` resolves
            names relative to the current working directory.
        foreign_keys: Enable ``PRAGMA foreign_keys`` on open.
        journal_mode: Optional ``PRAGMA journal_mode`` applied on open.
        timeout: Seconds SQLite waits on a locked database file.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    directory: Path | None = None
    foreign_keys: bool = True
    journal_mode: JournalMode | None = None
    timeout: float = Field(default=5.0, ge=0)

    def resolve_path(self, name: str) -> str:
        """Return the filesystem path (or ``":memory:"``) for database ``name``."""
        if name == MEMORY_DATABASE or self.directory is None:
            return name
        return str(self.directory / name)

    @classmethod
    def from_env(
        cls,
        prefix: str = "SQLITEMANAGER_",
        environ: Mapping[str, str] | None = None,
    ) -> ConnectionConfig:
        """Build a config from ``{prefix}DIRECTORY``, ``{prefix}FOREIGN_KEYS``,
        ``{prefix}JOURNAL_MODE`` and ``{prefix}TIMEOUT``.

        Unset variables keep their defaults.

        Raises:
            ConfigError: If a variable holds a value that cannot be used.
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}

        directory = env.get(f"{prefix}DIRECTORY")
        if directory:
            values["directory"] = Path(directory)

        foreign_keys = env.get(f"{prefix}FOREIGN_KEYS")
        if foreign_keys is not None:
            values["foreign_keys"] = _parse_bool(f"{prefix}FOREIGN_KEYS", foreign_keys)

        journal_mode = env.get(f"{prefix}JOURNAL_MODE")
        if journal_mode:
            values["journal_mode"] = journal_mode.upper()

        timeout = env.get(f"{prefix}TIMEOUT")
        if timeout is not None:
            values["timeout"] = timeout

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid connection configuration: {exc}") from exc


def _parse_bool(key: str, raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    raise ConfigError(f"Expected a boolean for {key}, got '{raw}'.", key=key)
