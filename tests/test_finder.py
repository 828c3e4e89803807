"""Unit tests for the dynamic finder lexer and parser."""

from __future__ import annotations

import logging

import pytest

from crudql.errors import InvalidFinderError
from crudql.finder.lexer import FinderLexer, TokenType
from crudql.finder.parser import FieldExpr, parse_finder
from crudql.schema.statements import (
    Connector,
    Direction,
    Limit,
    Operator,
    Order,
    Predicate,
    PredicateGroup,
)

# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


def test_tokenize_splits_on_capitals():
    tokens = FinderLexer("findAllByNameAndAgeBetween").tokenize()
    assert [(t.type, t.value, t.position) for t in tokens] == [
        (TokenType.FIND_ALL_BY, "findAllBy", 0),
        (TokenType.WORD, "Name", 9),
        (TokenType.AND, "And", 13),
        (TokenType.WORD, "Age", 16),
        (TokenType.BETWEEN, "Between", 19),
        (TokenType.EOF, "", 26),
    ]


def test_tokenize_keeps_digits_and_underscores_in_words():
    tokens = FinderLexer("findByAddress2_line").tokenize()
    assert [t.value for t in tokens] == ["findBy", "Address2_line", ""]


@pytest.mark.parametrize(
    "descriptor",
    ["findName", "", "getByName", "findByname", "findBy_name", "findByName-x", "findByName Or"],
)
def test_tokenize_rejects_malformed_descriptors(descriptor):
    with pytest.raises(InvalidFinderError) as exc_info:
        FinderLexer(descriptor).tokenize()
    assert exc_info.value.code == "INVALID_FINDER"
    assert exc_info.value.descriptor == descriptor


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def test_parse_single_field():
    parsed = parse_finder("findAllByName")
    assert parsed.all_rows is True
    assert parsed.fields == (FieldExpr(column="name", operator=Operator.EQUALS),)
    assert parsed.required_arguments == 1


def test_parse_suffixes_and_connectors():
    parsed = parse_finder("findByFirstNameLikeOrAgeBetweenAndEmailIsNullAndPhoneIsNotNull")
    assert parsed.all_rows is False
    assert parsed.fields == (
        FieldExpr("firstname", Operator.LIKE, Connector.AND),
        FieldExpr("age", Operator.BETWEEN, Connector.OR),
        FieldExpr("email", Operator.IS_NULL, Connector.AND),
        FieldExpr("phone", Operator.IS_NOT_NULL, Connector.AND),
    )
    assert parsed.required_arguments == 3


@pytest.mark.parametrize(
    "descriptor,column",
    [
        ("findByIsActive", "isactive"),
        ("findByBetweenDate", "betweendate"),
        ("findByLikeCount", "likecount"),
        ("findByIsNotNullable", "isnotnullable"),
    ],
)
def test_keywords_inside_field_names(descriptor, column):
    (field_expr,) = parse_finder(descriptor).fields
    assert field_expr == FieldExpr(column, Operator.EQUALS)


@pytest.mark.parametrize(
    "descriptor",
    ["findBy", "findByAnd", "findByNameAnd", "findAllByNameOr", "findByBetween", "findByIsNull"],
)
def test_missing_field_name(descriptor):
    with pytest.raises(InvalidFinderError, match="Missing field name"):
        parse_finder(descriptor)


# ---------------------------------------------------------------------------
# Binding arguments
# ---------------------------------------------------------------------------


def test_find_all_by_name_defaults(test_table):
    select = parse_finder("findAllByName").bind(test_table, ["bob"])
    assert select.predicate_group == PredicateGroup.of(Predicate.equals("name", "bob"))
    assert select.limit == Limit(start=0, rows=25)
    assert select.order == Order(column="id", direction=Direction.ASC)



def test_find_all_by_default_page_size_is_configurable(test_table):
    select = parse_finder("findAllByName").bind(test_table, ["bob"], page_size=10)
    assert select.limit == Limit(start=0, rows=10)
    explicit = parse_finder("findAllByName").bind(
        test_table, ["bob"], limit=Limit(start=5, rows=7), page_size=10
    )
    assert explicit.limit == Limit(start=5, rows=7)

def test_find_by_forces_single_row(a_table):
    select = parse_finder("findByName").bind(a_table, ["bob"], limit=Limit(start=10, rows=50))
    assert select.limit == Limit(start=0, rows=1)
    assert select.order == Order(column="tableId")


def test_find_all_by_uses_given_page_and_order(a_table):
    order = Order(column="age", direction="DESC")
    select = parse_finder("findAllByName").bind(
        a_table, ["bob"], limit=Limit(start=10, rows=50), order=order
    )
    assert select.limit == Limit(start=10, rows=50)
    assert select.order == order


def test_arguments_are_consumed_left_to_right(a_table):
    select = parse_finder("findAllByAgeBetweenAndEmailIsNullOrNameLike").bind(
        a_table, [20, 30, "Bo%"]
    )
    preds = select.predicate_group.predicates
    assert [p.values for p in preds] == [("20", "30"), (), ("Bo%",)]
    assert [i.connector for i in select.predicate_group.items] == [
        Connector.AND,
        Connector.AND,
        Connector.OR,
    ]


def test_too_few_arguments(a_table):
    with pytest.raises(InvalidFinderError) as exc_info:
        parse_finder("findAllByAgeBetween").bind(a_table, ["20"])
    assert exc_info.value.details == {
        "descriptor": "findAllByAgeBetween",
        "expected": 2,
        "given": 1,
    }


def test_too_many_arguments_rejected_when_strict(a_table):
    with pytest.raises(InvalidFinderError):
        parse_finder("findByName").bind(a_table, ["bob", "extra"])


def test_too_many_arguments_ignored_when_permissive(a_table, caplog):
    with caplog.at_level(logging.WARNING, logger="crudql.finder.parser"):
        select = parse_finder("findByName").bind(a_table, ["bob", "extra"], strict=False)
    assert select.predicate_group.predicates[0].values == ("bob",)
    assert "surplus" in caplog.text
    assert "extra" not in caplog.text
