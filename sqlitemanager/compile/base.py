"""Compiler value object and shared literal helpers.

``StatementRequest`` is what every compile function returns and what the
executor consumes: SQL text with positional ``?`` placeholders plus the bind
parameters for them, left to right.
"""
from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StatementRequest:
    """One SQL statement with its ordered bind parameters.

    Attributes:
        sql: SQL text using positional ``?`` placeholders.
        params: Values for the placeholders, in placeholder order.
    """

    sql: str
    params: tuple[Any, ...] = field(default=())

    def __post_init__(self) -> None:
        if not isinstance(self.params, tuple):
            object.__setattr__(self, "params", tuple(self.params))

    @property
    def placeholder_count(self) -> int:
        """Number of ``?`` placeholders outside single-quoted literals.

        A quick check for the statements this package compiles; ``?`` inside
        double-quoted identifiers or comments is counted too.
        """
        count = 0
        in_literal = False
        for char in self.sql:
            if char == "'":
                in_literal = not in_literal
            elif char == "?" and not in_literal:
                count += 1
        return count


def escape_string_literal(value: str, quote: str = "'") -> str:
    """Return ``value`` as a SQL string literal.

    Every ``quote`` inside ``value`` is doubled and the result is wrapped in
    ``quote``::

        >>> escape_string_literal("O'Brien")
        "'O''Brien'"

    Only for constants embedded in DDL (DEFAULT values).  Runtime values
    always travel as bind parameters.
    """
    escaped = value.replace(quote, quote + quote)
    return f"{quote}{escaped}{quote}"


def placeholders(values: Sized) -> str:
    """Return a ``(?, ?, ...)`` group with one placeholder per value.

    Useful for ``IN`` predicates::

        where = f"id IN {placeholders(ids)}"
    """
    return f"({', '.join('?' for _ in range(len(values)))})"
