"""Clause-level SQL builders.

Each class renders one fragment of a statement.  Literal values never reach
the SQL text: every one goes through :class:`BindValues`, which hands back a
``?`` placeholder and records the value at the same position.  Because
fragments are appended left to right in the same order they are built, the
bind list always lines up with the placeholders in the final string.

Classes
-------
BindValues            - ordered bind-value accumulator for one render
SelectListBuilder     - ``t.*`` or ``t.a,t.b``
PredicateBuilder      - ``t.a = ? AND t.b BETWEEN ? AND ?``
OrderClauseBuilder    - ``t.a DESC``
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from crudql.errors import UnsupportedOperationError
from crudql.schema.statements import Operator, Order, Predicate, PredicateGroup

#: Alias every SELECT gives its table.
TABLE_ALIAS = "t"

PLACEHOLDER = "?"


@dataclass
class BindValues:
    """Accumulates bind values during a single render."""

    values: list[Any] = field(default_factory=list)

    def add(self, value: Any) -> str:
        """Store ``value`` and return its placeholder."""
        self.values.append(value)
        return PLACEHOLDER

    def extend(self, values: list[Any]) -> str:
        """Store every value and return the comma-joined placeholders."""
        return ",".join(self.add(v) for v in values)


class SelectListBuilder:
    """Builds the projection of a SELECT."""

    def __init__(self, quote: Callable[[str], str], alias: str = TABLE_ALIAS) -> None:
        self._quote = quote
        self._alias = alias

    def build(self, columns: tuple[str, ...]) -> str:
        if not columns:
            return f"{self._alias}.*"
        return ",".join(f"{self._alias}.{self._quote(c)}" for c in columns)


class PredicateBuilder:
    """Compiles a :class:`PredicateGroup` to a WHERE fragment.

    Args:
        binds: Shared accumulator for this render.
        quote: Identifier quoting hook of the dialect.
        alias: Table qualifier for column references.
    """

    def __init__(
        self,
        binds: BindValues,
        quote: Callable[[str], str],
        alias: str = TABLE_ALIAS,
    ) -> None:
        self._binds = binds
        self._quote = quote
        self._alias = alias

    def build(self, group: PredicateGroup) -> str:
        parts: list[str] = []
        for i, item in enumerate(group.items):
            sql = self.build_predicate(item.predicate)
            parts.append(sql if i == 0 else f"{item.connector.value} {sql}")
        return " ".join(parts)

    def build_predicate(self, pred: Predicate) -> str:
        expected = pred.operator.arity
        if len(pred.values) != expected:
            raise UnsupportedOperationError(
                f"{pred.operator.value} on column '{pred.column}' needs {expected} "
                f"value(s), got {len(pred.values)}.",
                clause="WHERE",
                details={
                    "column": pred.column,
                    "operator": pred.operator.value,
                    "expected": expected,
                    "given": len(pred.values),
                },
            )

        col = f"{self._alias}.{self._quote(pred.column)}"
        op = pred.operator
        if op is Operator.EQUALS:
            return f"{col} = {self._binds.add(pred.values[0])}"
        if op is Operator.LIKE:
            return f"{col} LIKE {self._binds.add(pred.values[0])}"
        if op is Operator.BETWEEN:
            low = self._binds.add(pred.values[0])
            high = self._binds.add(pred.values[1])
            return f"{col} BETWEEN {low} AND {high}"
        if op is Operator.IS_NULL:
            return f"{col} IS NULL"
        if op is Operator.IS_NOT_NULL:
            return f"{col} IS NOT NULL"

        raise UnsupportedOperationError(f"Unknown predicate operator '{op}'.", clause="WHERE")


class OrderClauseBuilder:
    """Builds ``t.<column> <direction>`` for ORDER BY and OVER (...)."""

    def __init__(self, quote: Callable[[str], str], alias: str = TABLE_ALIAS) -> None:
        self._quote = quote
        self._alias = alias

    def build(self, order: Order) -> str:
        return f"{self.column(order.column)} {order.direction.value}"

    def column(self, name: str) -> str:
        return f"{self._alias}.{self._quote(name)}"
