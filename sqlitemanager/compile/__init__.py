"""sqlitemanager compilation layer: descriptions -> parameterized SQL."""
from sqlitemanager.compile.base import (
    StatementRequest,
    escape_string_literal,
    placeholders,
)
from sqlitemanager.compile.ddl import (
    compile_add_column,
    compile_column_def,
    compile_constraint_def,
    compile_create_statements,
    compile_create_table,
    compile_drop_index,
    compile_drop_table,
    compile_index_def,
)
from sqlitemanager.compile.statements import (
    compile_delete,
    compile_insert,
    compile_insert_many,
    compile_select,
    compile_update,
)

__all__ = [
    "StatementRequest",
    "escape_string_literal",
    "placeholders",
    "compile_add_column",
    "compile_column_def",
    "compile_constraint_def",
    "compile_create_statements",
    "compile_create_table",
    "compile_drop_index",
    "compile_drop_table",
    "compile_index_def",
    "compile_delete",
    "compile_insert",
    "compile_insert_many",
    "compile_select",
    "compile_update",
]
