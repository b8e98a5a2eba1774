"""Unit tests for the statement compiler (SELECT / INSERT / UPDATE / DELETE)."""

from __future__ import annotations

import sqlite3

import pydantic
import pytest

from sqlitemanager.compile.base import StatementRequest, escape_string_literal, placeholders
from sqlitemanager.compile.statements import (
    compile_delete,
    compile_insert,
    compile_insert_many,
    compile_select,
    compile_update,
)
from sqlitemanager.errors import (
    CompilationError,
    EmptyFieldsError,
    EmptyRecordError,
    EmptyRowsError,
)
from sqlitemanager.schema.query_spec import (
    JoinClause,
    OrderByItem,
    QuerySpec,
    WhereClause,
)


# ---------------------------------------------------------------------------
# INSERT
# ---------------------------------------------------------------------------


def test_insert_animal():
    r = compile_insert("tb_animals", {"name": "Bob"})
    assert r.sql == "INSERT INTO tb_animals (name) VALUES (?);"
    assert r.params == ("Bob",)


def test_insert_placeholders_follow_record_order():
    records = [
        {"name": "Bob", "age": 3},
        {"age": 3, "name": "Bob", "color": None},
        {"a": 1, "b": 2, "c": 3, "d": 4, "e": 5},
    ]
    for record in records:
        r = compile_insert("t", record)
        assert r.placeholder_count == len(record)
        assert r.params == tuple(record.values())
        assert r.sql.startswith(f"INSERT INTO t ({', '.join(record)})")


def test_insert_accepts_pairs():
    r = compile_insert("t", [("b", 2), ("a", 1)])
    assert r.sql == "INSERT INTO t (b, a) VALUES (?, ?);"
    assert r.params == (2, 1)


def test_insert_empty_record_raises():
    with pytest.raises(EmptyRecordError) as exc_info:
        compile_insert("tb_animals", {})
    assert exc_info.value.table == "tb_animals"
    assert exc_info.value.statement == "INSERT"


def test_insert_many_params_are_row_major():
    r = compile_insert_many("t", ["name", "age"], [["Bob", 3], ["Luna", 2]])
    assert r.sql == "INSERT INTO t (name, age) VALUES (?, ?), (?, ?);"
    assert r.params == ("Bob", 3, "Luna", 2)


def test_insert_many_empty_inputs_raise():
    with pytest.raises(EmptyFieldsError):
        compile_insert_many("t", [], [[1]])
    with pytest.raises(EmptyRowsError):
        compile_insert_many("t", ["a"], [])


def test_insert_many_row_length_mismatch():
    with pytest.raises(CompilationError) as exc_info:
        compile_insert_many("t", ["a", "b"], [[1, 2], [3]])
    assert "Row 1" in str(exc_info.value)


# ---------------------------------------------------------------------------
# UPDATE / DELETE
# ---------------------------------------------------------------------------


def test_update_with_where():
    r = compile_update("t", {"name": "Bob", "age": 4}, "id = ?", [7])
    assert r.sql == "UPDATE t SET name = ?, age = ? WHERE id = ?;"
    assert r.params == ("Bob", 4, 7)


def test_update_blank_where_is_dropped():
    r = compile_update("t", {"age": 1}, "   ")
    assert r.sql == "UPDATE t SET age = ?;"


def test_update_empty_record_raises():
    with pytest.raises(EmptyRecordError) as exc_info:
        compile_update("t", {}, "id = ?", [1])
    assert exc_info.value.statement == "UPDATE"


def test_delete():
    assert compile_delete("t").sql == "DELETE FROM t;"
    r = compile_delete("t", "age > ? AND age < ?", (2, 10))
    assert r.sql == "DELETE FROM t WHERE age > ? AND age < ?;"
    assert r.params == (2, 10)


# ---------------------------------------------------------------------------
# SELECT
# ---------------------------------------------------------------------------


def test_select_defaults():
    r = compile_select("tb_animals")
    assert r.sql == "SELECT * FROM tb_animals"
    assert r.params == ()


def test_select_every_clause_in_order():
    spec = QuerySpec(
        distinct=True,
        columns=("a.id", "a.name", "COUNT(v.id) AS visits"),
        joins=(JoinClause(table="tb_visits v", on="v.animal_id = a.id", type="left"),),
        where=WhereClause(clause="a.age > ?", args=(2,)),
        group_by=("a.id", "a.name"),
        having=WhereClause(clause="COUNT(v.id) >= ?", args=(3,)),
        order_by=(OrderByItem(column="visits", direction="desc"), OrderByItem(column="a.name")),
        limit=10,
        page=3,
    )
    r = compile_select("tb_animals a", spec)
    assert r.sql == (
        "SELECT DISTINCT a.id, a.name, COUNT(v.id) AS visits FROM tb_animals a "
        "LEFT JOIN tb_visits v ON v.animal_id = a.id "
        "WHERE a.age > ? GROUP BY a.id, a.name HAVING COUNT(v.id) >= ? "
        "ORDER BY visits DESC, a.name LIMIT 10 OFFSET 20"
    )
    assert r.params == (2, 3)


def test_select_where_by_id():
    spec = QuerySpec(where=WhereClause(clause="id = ?", args=(1,)))
    r = compile_select("tb_animals", spec)
    assert r.sql == "SELECT * FROM tb_animals WHERE id = ?"
    assert r.params == (1,)


def test_select_blank_where_is_dropped():
    r = compile_select("t", QuerySpec(where=WhereClause(clause="  ")))
    assert "WHERE" not in r.sql


def test_offset_only_with_limit():
    for limit, page in [(1, 2), (20, 2), (30, 5)]:
        r = compile_select("t", QuerySpec(limit=limit, page=page))
        assert r.sql.endswith(f"LIMIT {limit} OFFSET {limit * (page - 1)}")
    for page in (1, 2, 50):
        assert "OFFSET" not in compile_select("t", QuerySpec(page=page)).sql
    assert "OFFSET" not in compile_select("t", QuerySpec(limit=5)).sql


def test_first_page_emits_offset_zero():
    assert compile_select("t", QuerySpec(limit=5, page=1)).sql == "SELECT * FROM t LIMIT 5 OFFSET 0"


def test_query_spec_rejects_bad_paging():
    with pytest.raises(pydantic.ValidationError):
        QuerySpec(limit=0)
    with pytest.raises(pydantic.ValidationError):
        QuerySpec(page=0)


def test_query_spec_rejects_unknown_direction():
    with pytest.raises(pydantic.ValidationError):
        OrderByItem(column="name", direction="sideways")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_escape_string_literal():
    assert escape_string_literal("O'Brien") == "'O''Brien'"
    assert escape_string_literal("plain") == "'plain'"
    assert escape_string_literal('say "hi"', quote='"') == '"say ""hi"""'


def test_escaped_literal_round_trips_through_sqlite():
    conn = sqlite3.connect(":memory:")
    try:
        for value in ["O'Brien", "''", "it's a 'test'", ""]:
            (parsed,) = conn.execute(f"SELECT {escape_string_literal(value)}").fetchone()
            assert parsed == value
    finally:
        conn.close()


def test_placeholders():
    assert placeholders([1, 3, 4, 2]) == "(?, ?, ?, ?)"
    assert placeholders(["x"]) == "(?)"


def test_statement_request_normalises_params():
    r = StatementRequest("SELECT * FROM t WHERE a = ? AND b = '?'", [1])
    assert r.params == (1,)
    assert r.placeholder_count == 1


def test_placeholder_count_matches_compiled_params():
    for request in (
        compile_insert("tb_animals", {"name": "O'Malley", "age": 7}),
        compile_update("tb_animals", {"color": "?"}, "name = ? AND age > ?", ("Bob", 2)),
    ):
        assert request.placeholder_count == len(request.params)
    assert StatementRequest('SELECT "a?" FROM t').placeholder_count == 1
