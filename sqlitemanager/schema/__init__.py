"""sqlitemanager schema models: QuerySpec, TableSpec, records."""
from sqlitemanager.schema.query_spec import (
    JoinClause,
    OrderByItem,
    QuerySpec,
    WhereClause,
)
from sqlitemanager.schema.record import Record, record_items
from sqlitemanager.schema.table_spec import (
    ColumnBuilder,
    ColumnDef,
    ForeignKeyBuilder,
    ForeignKeyDef,
    IndexBuilder,
    IndexDef,
    TableSpec,
    TableSpecBuilder,
)

__all__ = [
    "JoinClause",
    "OrderByItem",
    "QuerySpec",
    "WhereClause",
    "Record",
    "record_items",
    "ColumnBuilder",
    "ColumnDef",
    "ForeignKeyBuilder",
    "ForeignKeyDef",
    "IndexBuilder",
    "IndexDef",
    "TableSpec",
    "TableSpecBuilder",
]
