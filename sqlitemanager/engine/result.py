"""Execution result value object."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExecutionResult:
    """The outcome of one executed statement.

    Attributes:
        rows: Result rows as column-name -> value mappings, in engine order.
        rows_affected: Rows changed by an INSERT / UPDATE / DELETE; ``0`` for
            everything else.
        insert_id: Rowid of the inserted row.  Set only when the statement is
            an INSERT that inserted exactly one row.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    rows_affected: int = 0
    insert_id: int | None = None

    def first(self) -> dict[str, Any] | None:
        """Returns the first row, or ``None`` when the result is empty."""
        return self.rows[0] if self.rows else None

    def __len__(self) -> int:
        return len(self.rows)
