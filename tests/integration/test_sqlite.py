"""Integration tests: compile → execute against a real SQLite in-memory DB.

The LIMIT/OFFSET family and the ROW_NUMBER() window layout are both
executable by SQLite, so the same table is read through ``sqlite`` and
``oracle`` aliases.  SQLite rejects table-qualified columns in ``SET``, so
updates are not executed here.
"""
from __future__ import annotations

import sqlite3

import pytest

from crudql.compile.base import CompiledSQL
from crudql.compile.builder import StatementCompiler
from crudql.config import CompilerSettings
from crudql.schema.statements import (
    Connector,
    Delete,
    Insert,
    Limit,
    Operator,
    Order,
    Predicate,
    PredicateGroup,
    Select,
)
from crudql.schema.table import Column, Table
from tests.fixtures import load_ddl

pytestmark = pytest.mark.integration

EMPLOYEES = Table(
    schema="main",
    name="employees",
    primary_key="employee_id",
    columns=(
        Column(name="employee_id", sql_type="INTEGER", nullable=False),
        Column(name="name", sql_type="TEXT", nullable=False),
        Column(name="age", sql_type="INTEGER"),
        Column(name="email", sql_type="TEXT"),
    ),
)


@pytest.fixture()
def conn():
    connection = sqlite3.connect(":memory:")
    connection.executescript(load_ddl())
    yield connection
    connection.close()


@pytest.fixture()
def sql_compiler() -> StatementCompiler:
    settings = CompilerSettings(
        page_size=2,
        dialects={"lite": "sqlite", "win": "oracle"},
    )
    return StatementCompiler.from_settings(settings, validate_columns=True)


def _run(conn: sqlite3.Connection, compiled: CompiledSQL) -> list[tuple]:
    return conn.execute(compiled.sql, compiled.params).fetchall()


def _names(rows: list[tuple]) -> list[str]:
    return [r[1] for r in rows]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


def test_select_all(conn, sql_compiler):
    rows = _run(conn, sql_compiler.compile("lite", Select(table=EMPLOYEES)))
    assert len(rows) == 6


def test_select_pages_in_primary_key_order(conn, sql_compiler):
    select = Select(table=EMPLOYEES, order=Order(column="employee_id"))
    first = _run(conn, sql_compiler.compile("lite", select, limit=Limit(start=0, rows=2)))
    second = _run(conn, sql_compiler.compile("lite", select, limit=Limit(start=2, rows=2)))
    assert _names(first) == ["Alice", "Bob"]
    assert _names(second) == ["Carol", "Dave"]


def test_select_explicit_columns(conn, sql_compiler):
    select = Select(table=EMPLOYEES, columns=("name", "age"), predicate=Predicate.equals("name", "Eve"))
    assert _run(conn, sql_compiler.compile("lite", select)) == [("Eve", 23)]


def test_predicate_group(conn, sql_compiler):
    group = PredicateGroup.of(
        Predicate(column="age", operator=Operator.BETWEEN, values=("30", "45"))
    ).add(Predicate(column="email", operator=Operator.IS_NULL))
    select = Select(table=EMPLOYEES, predicate_group=group, order=Order(column="employee_id"))
    assert _names(_run(conn, sql_compiler.compile("lite", select))) == ["Bob"]


def test_or_connector(conn, sql_compiler):
    group = PredicateGroup.of(Predicate.equals("name", "Alice")).add(
        Predicate(column="age", operator=Operator.BETWEEN, values=("50", "60")), Connector.OR
    )
    select = Select(table=EMPLOYEES, predicate_group=group, order=Order(column="name"))
    assert _names(_run(conn, sql_compiler.compile("lite", select))) == ["Alice", "Dave"]


def test_windowed_layout_executes(conn, sql_compiler):
    select = Select(table=EMPLOYEES, predicate=Predicate(column="email", operator=Operator.IS_NOT_NULL))
    compiled = sql_compiler.compile("win", select, limit=Limit(start=0, rows=25))
    assert compiled.sql.startswith("SELECT * FROM ( SELECT ROW_NUMBER() OVER")
    rows = _run(conn, compiled)
    # Leading ROW_NUMBER column, then the table's columns.
    assert [r[2] for r in rows] == ["Alice", "Carol", "Eve", "Bobby"]


# ---------------------------------------------------------------------------
# Finders
# ---------------------------------------------------------------------------


def test_find_all_by_like_uses_default_page(conn, sql_compiler):
    compiled = sql_compiler.compile_finder("lite", EMPLOYEES, "findAllByNameLike", ["%o%"])
    assert _names(_run(conn, compiled)) == ["Bob", "Carol"]


def test_find_all_by_next_page(conn, sql_compiler):
    compiled = sql_compiler.compile_finder(
        "lite", EMPLOYEES, "findAllByNameLike", ["%o%"], limit=Limit(start=2, rows=2)
    )
    assert _names(_run(conn, compiled)) == ["Bobby"]


def test_find_by_returns_one_row(conn, sql_compiler):
    compiled = sql_compiler.compile_finder("lite", EMPLOYEES, "findByEmailIsNull", [])
    assert _names(_run(conn, compiled)) == ["Bob"]


def test_find_by_descending_order(conn, sql_compiler):
    compiled = sql_compiler.compile_finder(
        "lite",
        EMPLOYEES,
        "findAllByAgeBetween",
        ["20", "40"],
        limit=Limit(rows=10),
        order=Order(column="age", direction="DESC"),
    )
    assert _names(_run(conn, compiled)) == ["Bobby", "Alice", "Carol", "Eve"]


# ---------------------------------------------------------------------------
# Writes and row count
# ---------------------------------------------------------------------------


def test_insert_then_count(conn, sql_compiler):
    insert = Insert(table=EMPLOYEES, values={"name": "Frank", "age": "61"})
    compiled = sql_compiler.compile("lite", insert)
    conn.execute(compiled.sql, compiled.params)
    total = conn.execute(sql_compiler.row_count_statement(EMPLOYEES)).fetchone()[0]
    assert total == 7
    found = sql_compiler.compile_finder("lite", EMPLOYEES, "findByName", ["Frank"])
    assert _run(conn, found)[0][2] == 61


def test_delete_by_primary_key(conn, sql_compiler):
    compiled = sql_compiler.compile("lite", Delete(table=EMPLOYEES, id="3"))
    conn.execute(compiled.sql, compiled.params)
    assert conn.execute(sql_compiler.row_count_statement(EMPLOYEES)).fetchone()[0] == 5
    remaining = _run(conn, sql_compiler.compile_finder("lite", EMPLOYEES, "findByName", ["Carol"]))
    assert remaining == []
