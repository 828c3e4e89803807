"""Unit tests for the table metadata and statement models."""

from __future__ import annotations

import pytest

from crudql.errors import ConfigurationError, InvalidStatementError
from crudql.schema.statements import (
    Connector,
    Delete,
    Direction,
    Insert,
    Limit,
    Operator,
    Order,
    Predicate,
    PredicateGroup,
    Select,
    StoredProcedureCall,
    Update,
)
from crudql.schema.table import Column, Table

# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


def test_table_defaults_primary_key_to_id():
    assert Table(schema="demo1", name="grrr").primary_key == "id"
    assert Table(schema="demo1", name="grrr", primary_key=None).primary_key == "id"
    assert Table(schema="demo1", name="grrr", primary_key="").primary_key == "id"


def test_table_accepts_field_name_or_alias():
    by_alias = Table(schema="demo1", name="a_table")
    by_name = Table(schema_name="demo1", name="a_table")
    assert by_alias == by_name
    assert by_alias.qualified_name == "demo1.a_table"


@pytest.mark.parametrize("schema,name", [("", "a_table"), ("  ", "a_table"), ("demo1", "")])
def test_table_requires_schema_and_name(schema, name):
    with pytest.raises(ConfigurationError) as exc_info:
        Table(schema=schema, name=name)
    assert exc_info.value.code == "CONFIGURATION_ERROR"


def test_table_column_lookup(a_table):
    assert a_table.column_names == ["tableId", "name", "age"]
    assert a_table.get_column("name") == Column(name="name", sql_type="VARCHAR", size=50)
    assert a_table.get_column("missing") is None
    assert a_table.has_column("TABLEID")


def test_table_is_immutable(a_table):
    with pytest.raises(Exception):
        a_table.name = "other"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "operator,arity",
    [
        (Operator.EQUALS, 1),
        (Operator.LIKE, 1),
        (Operator.BETWEEN, 2),
        (Operator.IS_NULL, 0),
        (Operator.IS_NOT_NULL, 0),
    ],
)
def test_operator_arity(operator, arity):
    assert operator.arity == arity


def test_predicate_group_keeps_order_and_connectors():
    group = PredicateGroup.of(Predicate.equals("name", "x")).add(
        Predicate(column="age", operator=Operator.BETWEEN, values=("1", "9")),
        Connector.OR,
    )
    assert [p.column for p in group.predicates] == ["name", "age"]
    assert [i.connector for i in group.items] == [Connector.AND, Connector.OR]
    assert group.required_values == 3
    assert len(group) == 2


def test_predicate_group_add_returns_new_group():
    group = PredicateGroup()
    extended = group.add(Predicate.equals("name", "x"))
    assert len(group) == 0
    assert len(extended) == 1


# ---------------------------------------------------------------------------
# Limit and Order
# ---------------------------------------------------------------------------


def test_limit_defaults():
    limit = Limit()
    assert (limit.start, limit.rows, limit.end) == (0, 25, 25)


@pytest.mark.parametrize("start,rows", [(-1, 10), (0, 0), (0, -5)])
def test_limit_rejects_invalid_bounds(start, rows):
    with pytest.raises(InvalidStatementError):
        Limit(start=start, rows=rows)


def test_limit_clamp():
    limit = Limit(start=50, rows=1000)
    clamped = limit.clamp(500)
    assert (clamped.start, clamped.rows) == (50, 500)
    small = Limit(rows=10)
    assert small.clamp(500) is small


@pytest.mark.parametrize("raw", ["desc", "DESC", " Desc "])
def test_order_direction_is_case_insensitive(raw):
    assert Order(column="name", direction=raw).direction is Direction.DESC


def test_order_rejects_unknown_direction():
    with pytest.raises(InvalidStatementError) as exc_info:
        Order(column="name", direction="sideways")
    assert exc_info.value.details["direction"] == "sideways"


def test_order_by_primary_key(a_table):
    assert Order.by_primary_key(a_table) == Order(column="tableId", direction=Direction.ASC)


# ---------------------------------------------------------------------------
# Select / Insert / Update / Delete
# ---------------------------------------------------------------------------


def test_select_rejects_both_filter_shapes(a_table):
    with pytest.raises(InvalidStatementError):
        Select(
            table=a_table,
            predicate=Predicate.equals("name", "x"),
            predicate_group=PredicateGroup.of(Predicate.equals("age", "1")),
        )


def test_select_where_views(a_table):
    assert Select(table=a_table).where is None
    assert Select(table=a_table, predicate_group=PredicateGroup()).where is None
    single = Select(table=a_table, predicate=Predicate.equals("name", "x"))
    assert single.where == PredicateGroup.of(Predicate.equals("name", "x"))


def test_select_paginate_replaces_only_given_parts(a_table):
    select = Select(table=a_table, order=Order(column="name"))
    paged = select.paginate(limit=Limit(rows=5))
    assert paged.limit == Limit(rows=5)
    assert paged.order == Order(column="name")
    assert select.paginate() is select


def test_insert_requires_values(a_table):
    with pytest.raises(InvalidStatementError):
        Insert(table=a_table, values={})


def test_insert_preserves_mapping_order(a_table):
    insert = Insert(table=a_table, values={"name": "foo bar", "age": "50"})
    assert list(insert.values) == ["name", "age"]


@pytest.mark.parametrize("kind", ["insert", "update"])
def test_values_are_read_only_after_validation(a_table, kind):
    given = {"name": "foo"}
    if kind == "insert":
        statement = Insert(table=a_table, values=given)
    else:
        statement = Update(table=a_table, id="1", values=given)
    with pytest.raises(AttributeError):
        statement.values.clear()
    with pytest.raises(TypeError):
        statement.values["age"] = "1"
    given.clear()
    assert dict(statement.values) == {"name": "foo"}


@pytest.mark.parametrize("id_value", ["", None])
def test_update_and_delete_require_id(a_table, id_value):
    with pytest.raises(Exception):
        Update(table=a_table, id=id_value, values={"name": "x"})
    with pytest.raises(Exception):
        Delete(table=a_table, id=id_value)


def test_update_requires_values(a_table):
    with pytest.raises(InvalidStatementError):
        Update(table=a_table, id="1", values={})


# ---------------------------------------------------------------------------
# Stored procedures
# ---------------------------------------------------------------------------


def test_procedure_parameters_sorted_by_index():
    call = StoredProcedureCall(
        name="demo1.raise_salary",
        payload='[{"value": "10", "index": 2}, {"value": "7", "index": 1}]',
    )
    assert [p.value for p in call.parameters] == ["7", "10"]


def test_procedure_parameters_keep_payload_order_without_indices():
    call = StoredProcedureCall(name="p", payload='[{"value": 3, "index": 2}, "x", true]')
    assert [p.value for p in call.parameters] == ["3", "x", "True"]


def test_procedure_out_parameter():
    call = StoredProcedureCall(name="p", payload='[{"name": "total", "type": "INTEGER", "out": true}]')
    (param,) = call.parameters
    assert param.out and param.value is None and param.type == "INTEGER"


@pytest.mark.parametrize("payload", ["{not json", '{"value": 1}'])
def test_procedure_rejects_bad_payload(payload):
    with pytest.raises(InvalidStatementError):
        StoredProcedureCall(name="p", payload=payload)


def test_procedure_requires_name():
    with pytest.raises(InvalidStatementError):
        StoredProcedureCall(name=" ")
