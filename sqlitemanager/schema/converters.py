"""Utilities for building a TableSpec from external sources.

SQLAlchemy converter
--------------------
:func:`table_spec_from_sqlalchemy` turns a declared
:class:`sqlalchemy.Table` into a :class:`~sqlitemanager.schema.table_spec.TableSpec`
so applications that already describe their tables with SQLAlchemy can feed
them straight into :meth:`~sqlitemanager.migrate.schema.Schema.create_or_alter`.

Install the optional dependency before using this module::

    pip install "sqlitemanager[sqlalchemy]"

Example::

    from sqlalchemy import Column, Integer, MetaData, Table, Text
    from sqlitemanager.schema.converters import table_spec_from_sqlalchemy

    animals = Table(
        "tb_animals", MetaData(),
        Column("id", Integer, primary_key=True),
        Column("name", Text, nullable=False),
        sqlite_autoincrement=True,
    )
    await db.schema.create_spec(table_spec_from_sqlalchemy(animals))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlitemanager.schema.table_spec import ColumnDef, ForeignKeyDef, IndexDef, TableSpec

if TYPE_CHECKING:
    from sqlalchemy import Column, MetaData, Table


def table_spec_from_sqlalchemy(table: Table) -> TableSpec:
    """Build a :class:`TableSpec` from a SQLAlchemy :class:`~sqlalchemy.Table`.

    Column types are compiled with the SQLite dialect, so ``String(50)``
    becomes ``VARCHAR(50)`` and ``Integer`` becomes ``INTEGER``.  A single
    integer primary key is marked ``AUTOINCREMENT`` only when the table was
    declared with ``sqlite_autoincrement=True``, matching what SQLAlchemy
    itself would emit.  Composite primary keys have no column-level form and
    are not carried over.

    Only constant defaults are carried over: a scalar ``default=`` or a
    string ``server_default=``.  Callables and SQL expressions are dropped
    because they cannot be rendered as a DDL literal.

    Args:
        table: A declared (or reflected) SQLAlchemy table.

    Returns:
        A fully populated :class:`TableSpec`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy.dialects import sqlite as _sqlite
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for table_spec_from_sqlalchemy(). "
            'Install it with: pip install "sqlitemanager[sqlalchemy]"'
        ) from exc

    dialect = _sqlite.dialect()
    autoincrement = bool(table.kwargs.get("sqlite_autoincrement", False))
    pk_columns = list(table.primary_key.columns)

    columns = tuple(
        ColumnDef(
            name=col.name,
            type=str(col.type.compile(dialect=dialect)),
            primary_key=len(pk_columns) == 1 and col.primary_key,
            auto_increment=autoincrement and len(pk_columns) == 1 and col.primary_key,
            # Reflected columns may leave nullable unset; treat that as nullable.
            nullable=col.nullable is not False,
            default=_constant_default(col),
        )
        for col in table.columns
    )

    constraints = tuple(
        ForeignKeyDef(
            columns=tuple(fk.column_keys),
            table=fk.referred_table.name,
            references=tuple(element.column.name for element in fk.elements),
            on_delete=fk.ondelete,
        )
        for fk in sorted(table.foreign_key_constraints, key=lambda c: tuple(c.column_keys))
    )

    indexes = tuple(
        IndexDef(
            name=str(index.name),
            table=table.name,
            unique=bool(index.unique),
            columns=tuple(col.name for col in index.columns),
        )
        for index in sorted(table.indexes, key=lambda i: str(i.name))
    )

    return TableSpec(
        name=table.name,
        columns=columns,
        constraints=constraints,
        indexes=indexes,
    )


def table_specs_from_metadata(metadata: MetaData) -> list[TableSpec]:
    """Convert every table of ``metadata`` in dependency order.

    Referenced tables come before the tables whose foreign keys point at
    them, so creating the specs in list order satisfies every constraint.
    """
    return [table_spec_from_sqlalchemy(table) for table in metadata.sorted_tables]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _constant_default(col: Column) -> Any:
    """Return a literal DEFAULT for ``col``, or ``None`` when there is none."""
    default = col.default
    if default is not None and getattr(default, "is_scalar", False):
        return default.arg
    server_default = col.server_default
    if server_default is not None:
        arg = getattr(server_default, "arg", None)
        if isinstance(arg, str):
            return arg
    return None
