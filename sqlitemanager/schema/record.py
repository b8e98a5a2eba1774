"""Record inputs for INSERT and UPDATE.

The column order of a record decides the placeholder order of the compiled
statement, so a record is either a mapping (insertion order) or an explicit
sequence of ``(column, value)`` pairs.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

Record = Union[Mapping[str, Any], Sequence[tuple[str, Any]]]


def record_items(record: Record) -> list[tuple[str, Any]]:
    """Return ``record`` as an ordered list of ``(column, value)`` pairs."""
    if isinstance(record, Mapping):
        return list(record.items())
    return [(str(column), value) for column, value in record]
