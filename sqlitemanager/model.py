"""Active-record style convenience base class.

Example::

    class Animal(Model):
        table_name = "tb_animals"

    Animal.bind(db)
    bob = await Animal.create({"name": "Bob", "color": "brown"})
    bob.color = "grey"
    await bob.save()
    brown = await Animal.find_by("color", "LIKE", "%brown%")

Instances are thin attribute bags built from result rows; values are stored
exactly as SQLite returns them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

from sqlitemanager.compile.base import StatementRequest
from sqlitemanager.compile.statements import compile_delete, compile_insert, compile_update
from sqlitemanager.cursor import QueryCursor
from sqlitemanager.errors import ConfigError
from sqlitemanager.schema.query_spec import QuerySpec
from sqlitemanager.schema.record import Record, record_items

if TYPE_CHECKING:
    from sqlitemanager.database import Database

M = TypeVar("M", bound="Model")

_COMPARISON_OPERATORS = frozenset({
    "=", "==", "<>", "!=", "<", "<=", ">", ">=", "LIKE", "GLOB", "IS", "IS NOT",
})


class Model:
    """Base class for table-backed records.

    Subclasses set :attr:`table_name` (and :attr:`primary_key` when it is not
    ``id``) and are bound to a :class:`~sqlitemanager.database.Database` with
    :meth:`bind` before use.
    """

    table_name: ClassVar[str] = ""
    primary_key: ClassVar[str] = "id"
    _database: ClassVar[Database | None] = None

    def __init__(self, **fields: Any) -> None:
        self.__dict__.update(fields)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    @classmethod
    def bind(cls, database: Database) -> None:
        cls._database = database

    @classmethod
    def database(cls) -> Database:
        if not cls.table_name:
            raise ConfigError(f"{cls.__name__}.table_name is not set.", key="table_name")
        if cls._database is None:
            raise ConfigError(f"{cls.__name__} is not bound to a database.", key="database")
        return cls._database

    @classmethod
    def cursor(cls) -> QueryCursor:
        return cls.database().table(cls.table_name).row_factory(cls._from_row)

    @classmethod
    def _from_row(cls: type[M], row: dict[str, Any]) -> M:
        return cls(**row)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @classmethod
    async def find_by(cls: type[M], column: str, op: str, value: Any) -> M | None:
        """First row where ``column op value``.

        ``op`` is one of ``=``, ``<>``, ``<``, ``<=``, ``>``, ``>=``, ``LIKE``,
        ``IS``, ``IS NOT`` (and their common spellings).  ``IS`` matches NULL::

            await Animal.find_by("color", "IS", None)

        Raises:
            ValueError: If ``op`` is not a supported comparison operator.
        """
        operator = " ".join(op.split()).upper()
        if operator not in _COMPARISON_OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {op!r}")
        return await cls.cursor().where(f"{column} {operator} ?", value).first()

    @classmethod
    async def find(cls: type[M], key: Any) -> M | None:
        return await cls.find_by(cls.primary_key, "=", key)

    @classmethod
    async def first(cls: type[M]) -> M | None:
        return await cls.cursor().order_by("ROWID", "ASC").first()

    @classmethod
    async def last(cls: type[M]) -> M | None:
        return await cls.cursor().order_by("ROWID", "DESC").first()

    @classmethod
    async def count(cls) -> int:
        result = await cls.database().execute(
            StatementRequest(f"SELECT COUNT(*) AS _count_ FROM {cls.table_name}")
        )
        row = result.first()
        return int(row["_count_"]) if row else 0

    @classmethod
    async def all(cls: type[M]) -> list[M]:
        return await cls.cursor().get()

    @classmethod
    async def query(cls: type[M], spec: QuerySpec | None = None) -> list[M]:
        """Run a full :class:`QuerySpec` against the model's table."""
        return await QueryCursor(cls.database(), cls.table_name, spec, cls._from_row).get()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @classmethod
    async def create(cls: type[M], record: Record) -> M | None:
        """Insert ``record`` and return the stored row."""
        result = await cls.database().execute(compile_insert(cls.table_name, record))
        if result.insert_id is None:
            return None
        return await cls.find(_rowid_key(cls, record, result.insert_id))

    @classmethod
    async def update(cls: type[M], record: Record) -> M | None:
        """Update the row identified by ``record``'s primary key; return it re-read.

        Raises:
            KeyError: If ``record`` does not carry the primary key.
        """
        items = record_items(record)
        keys = [value for column, value in items if column == cls.primary_key]
        if not keys:
            raise KeyError(cls.primary_key)
        key = keys[0]
        fields = [(column, value) for column, value in items if column != cls.primary_key]
        if fields:
            await cls.database().execute(
                compile_update(cls.table_name, fields, f"{cls.primary_key} = ?", (key,))
            )
        return await cls.find(key)

    @classmethod
    async def destroy(cls, key: Any) -> int:
        result = await cls.database().execute(
            compile_delete(cls.table_name, f"{cls.primary_key} = ?", (key,))
        )
        return result.rows_affected

    @classmethod
    async def destroy_all(cls) -> int:
        result = await cls.database().execute(compile_delete(cls.table_name))
        return result.rows_affected

    # ------------------------------------------------------------------
    # Instance methods
    # ------------------------------------------------------------------

    def to_record(self) -> dict[str, Any]:
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    async def save(self: M) -> M | None:
        """Insert when the primary key is unset, update otherwise.

        The instance is refreshed in place from the stored row.
        """
        cls = type(self)
        record = self.to_record()
        if record.get(cls.primary_key) is None:
            record.pop(cls.primary_key, None)
            stored = await cls.create(record)
        else:
            stored = await cls.update(record)
        if stored is not None:
            self.__dict__.update(stored.to_record())
        return stored

    async def destroy_instance(self) -> int:
        cls = type(self)
        return await cls.destroy(getattr(self, cls.primary_key, None))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_record() == other.to_record()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.to_record().items())
        return f"{type(self).__name__}({fields})"


def _rowid_key(cls: type[Model], record: Record, rowid: int) -> Any:
    # An explicit non-rowid primary key wins over the rowid.
    for column, value in record_items(record):
        if column == cls.primary_key:
            return value
    return rowid
