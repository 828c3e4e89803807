"""Pydantic models for the statement model.

Five operation kinds are represented as structured, database-independent
statements: :class:`Select`, :class:`Insert`, :class:`Update`,
:class:`Delete` and :class:`StoredProcedureCall`.  They are plain value
objects: immutable, compared structurally, built per request and discarded
once a dialect has rendered them.

Pagination and ordering travel as :class:`Limit` and :class:`Order`;
filtering as a single :class:`Predicate` or an ordered
:class:`PredicateGroup`.
"""
from __future__ import annotations

import json
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from crudql.errors import InvalidStatementError
from crudql.schema.table import Table

#: Page size used by ``Limit()`` when nothing else is configured.
DEFAULT_PAGE_SIZE = 25


class Operator(str, Enum):
    """Comparison operators a predicate may use."""

    EQUALS = "EQUALS"
    BETWEEN = "BETWEEN"
    LIKE = "LIKE"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "IS_NOT_NULL"

    @property
    def arity(self) -> int:
        """Number of bind values the operator consumes."""
        return _ARITY[self]


_ARITY: dict[Operator, int] = {
    Operator.EQUALS: 1,
    Operator.BETWEEN: 2,
    Operator.LIKE: 1,
    Operator.IS_NULL: 0,
    Operator.IS_NOT_NULL: 0,
}


class Connector(str, Enum):
    """Logical connector joining a predicate to the one before it."""

    AND = "AND"
    OR = "OR"


class Direction(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class Predicate(BaseModel):
    """A single column comparison.

    Attributes:
        column: Column name (unqualified).
        operator: Comparison operator.
        values: Bind values, in placeholder order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: str
    operator: Operator = Operator.EQUALS
    values: tuple[str, ...] = ()

    @classmethod
    def equals(cls, column: str, value: str) -> Predicate:
        return cls(column=column, operator=Operator.EQUALS, values=(value,))


class GroupedPredicate(BaseModel):
    """A predicate and the connector that joins it to its predecessor.

    The connector of the first entry in a group is never rendered.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    predicate: Predicate
    connector: Connector = Connector.AND


class PredicateGroup(BaseModel):
    """Left-associative chain of predicates, rendered exactly as written.

    There is no precedence grouping: ``a AND b OR c`` is emitted verbatim and
    left to the database's own operator precedence.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    items: tuple[GroupedPredicate, ...] = ()

    @classmethod
    def of(cls, *predicates: Predicate) -> PredicateGroup:
        """Build a group joining every predicate with ``AND``."""
        return cls(items=tuple(GroupedPredicate(predicate=p) for p in predicates))

    def add(self, predicate: Predicate, connector: Connector = Connector.AND) -> PredicateGroup:
        """Return a new group with ``predicate`` appended."""
        entry = GroupedPredicate(predicate=predicate, connector=connector)
        return self.model_copy(update={"items": (*self.items, entry)})

    @property
    def predicates(self) -> list[Predicate]:
        return [item.predicate for item in self.items]

    @property
    def required_values(self) -> int:
        """Total number of bind values the group's operators consume."""
        return sum(p.operator.arity for p in self.predicates)

    def __len__(self) -> int:
        return len(self.items)


class Limit(BaseModel):
    """Pagination window.

    Attributes:
        start: Zero-based offset of the first row.
        rows: Page size; always positive.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: int = 0
    rows: int = DEFAULT_PAGE_SIZE

    @model_validator(mode="after")
    def _check_bounds(self) -> Limit:
        if self.start < 0:
            raise InvalidStatementError(
                f"Limit start must be non-negative, got {self.start}.",
                details={"start": self.start},
            )
        if self.rows <= 0:
            raise InvalidStatementError(
                f"Limit rows must be positive, got {self.rows}.",
                details={"rows": self.rows},
            )
        return self

    @property
    def end(self) -> int:
        """Upper bound of the windowed ``ROW_NUMBER BETWEEN`` range."""
        return self.start + self.rows

    def clamp(self, max_rows: int) -> Limit:
        """Return this limit with ``rows`` capped at ``max_rows``."""
        if self.rows <= max_rows:
            return self
        return self.model_copy(update={"rows": max_rows})


class Order(BaseModel):
    """ORDER BY a single column.

    Attributes:
        column: Column to order by.
        direction: Sort direction.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: str
    direction: Direction = Direction.ASC

    @field_validator("direction", mode="before")
    @classmethod
    def _normalise_direction(cls, value: Any) -> Any:
        if isinstance(value, str):
            upper = value.strip().upper()
            if upper not in Direction.__members__:
                raise InvalidStatementError(
                    f"Unknown order direction '{value}'. Use ASC or DESC.",
                    details={"direction": value},
                )
            return upper
        return value

    @classmethod
    def by_primary_key(cls, table: Table) -> Order:
        return cls(column=table.primary_key)


class Select(BaseModel):
    """Read rows from a table.

    Attributes:
        table: The table to read from.
        columns: Columns to return; empty means every column (``t.*``).
        predicate: Legacy single-column filter.
        predicate_group: Compound filter (mutually exclusive with ``predicate``).
        limit: Optional pagination window.
        order: Optional ordering.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: Table
    columns: tuple[str, ...] = ()
    predicate: Predicate | None = None
    predicate_group: PredicateGroup | None = None
    limit: Limit | None = None
    order: Order | None = None

    @model_validator(mode="after")
    def _check_filters(self) -> Select:
        if self.predicate is not None and self.predicate_group is not None:
            raise InvalidStatementError(
                "A Select takes either a predicate or a predicate group, not both.",
                details={"table": self.table.qualified_name},
            )
        return self

    @property
    def where(self) -> PredicateGroup | None:
        """Both filter shapes as a group, or ``None`` when unfiltered."""
        if self.predicate is not None:
            return PredicateGroup.of(self.predicate)
        if self.predicate_group is not None and len(self.predicate_group):
            return self.predicate_group
        return None

    def paginate(self, limit: Limit | None = None, order: Order | None = None) -> Select:
        """Return a copy with ``limit`` / ``order`` replaced where given."""
        update: dict[str, Any] = {}
        if limit is not None:
            update["limit"] = limit
        if order is not None:
            update["order"] = order
        return self.model_copy(update=update) if update else self


def _freeze(values: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(values))


def _check_values(kind: str, table: Table, values: Mapping[str, str]) -> None:
    if not values:
        raise InvalidStatementError(
            f"{kind} on '{table.qualified_name}' requires at least one column value.",
            details={"table": table.qualified_name},
        )


def _check_id(kind: str, table: Table, id_value: str) -> None:
    if id_value is None or str(id_value) == "":
        raise InvalidStatementError(
            f"{kind} on '{table.qualified_name}' requires a primary key value.",
            details={"table": table.qualified_name, "primary_key": table.primary_key},
        )


class Insert(BaseModel):
    """Insert one row.

    Attributes:
        table: Target table.
        values: Column to value mapping; insertion order is render order.
            Held as a read-only copy of the mapping given.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: Table
    values: Mapping[str, str]

    @field_validator("values", mode="after")
    @classmethod
    def _freeze_values(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return _freeze(v)

    @model_validator(mode="after")
    def _check(self) -> Insert:
        _check_values("Insert", self.table, self.values)
        return self


class Update(BaseModel):
    """Update one row by primary key.

    Attributes:
        table: Target table.
        id: Primary-key value of the row.
        values: Column to value mapping; insertion order is render order.
            Held as a read-only copy of the mapping given.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: Table
    id: str
    values: Mapping[str, str]

    @field_validator("values", mode="after")
    @classmethod
    def _freeze_values(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        return _freeze(v)

    @model_validator(mode="after")
    def _check(self) -> Update:
        _check_id("Update", self.table, self.id)
        _check_values("Update", self.table, self.values)
        return self


class Delete(BaseModel):
    """Delete one row by primary key."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    table: Table
    id: str

    @model_validator(mode="after")
    def _check(self) -> Delete:
        _check_id("Delete", self.table, self.id)
        return self


class ProcedureParam(BaseModel):
    """One stored-procedure argument.

    Attributes:
        value: IN value; ignored for OUT parameters.
        name: Optional parameter name (informational).
        type: Optional SQL type name, used by the executor for OUT params.
        index: 1-based position; payload order is used when absent.
        out: Whether this is an OUT parameter.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    value: str | None = None
    name: str | None = None
    type: str | None = None
    index: int | None = None
    out: bool = False

    @field_validator("value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return json.dumps(value) if isinstance(value, (dict, list)) else str(value)


class StoredProcedureCall(BaseModel):
    """Call a stored procedure with a JSON-encoded argument list.

    Attributes:
        name: Procedure name.
        payload: JSON array of argument objects or bare scalar values.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    payload: str = "[]"

    @model_validator(mode="after")
    def _check(self) -> StoredProcedureCall:
        if not self.name or not self.name.strip():
            raise InvalidStatementError("A stored procedure name is required.")
        _parse_payload(self.name, self.payload)
        return self

    @property
    def parameters(self) -> list[ProcedureParam]:
        """Arguments in call order."""
        return _parse_payload(self.name, self.payload)


def _parse_payload(name: str, payload: str) -> list[ProcedureParam]:
    try:
        raw = json.loads(payload) if payload.strip() else []
    except json.JSONDecodeError as exc:
        raise InvalidStatementError(
            f"Invalid JSON payload for procedure '{name}': {exc}",
            details={"procedure": name},
        ) from exc
    if not isinstance(raw, list):
        raise InvalidStatementError(
            f"Payload for procedure '{name}' must be a JSON array.",
            details={"procedure": name},
        )
    params = [
        ProcedureParam.model_validate(item) if isinstance(item, dict) else ProcedureParam(value=item)
        for item in raw
    ]
    # Explicit indices win only when every argument carries one.
    if all(p.index is not None for p in params):
        params.sort(key=lambda p: p.index)
    return params


#: Tagged union of every statement kind.
Statement = Union[Select, Insert, Update, Delete, StoredProcedureCall]
