"""Dialect abstractions: CompiledSQL and the SQLDialect ABC.

The Template Method pattern (GoF) is used:
- ``SQLDialect`` owns the rendering algorithm for every statement kind.
  INSERT, UPDATE, DELETE, row counts and procedure calls are identical in
  every supported database and are never overridden.
- Subclasses supply the pagination step (``pagination_clause``) or, for
  databases without ``LIMIT``, replace the SELECT layout wholesale
  (see :mod:`crudql.compile.windowed`).

Dialects are stateless; one instance may be shared by any number of threads.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from crudql.compile.clause_builders import (
    PLACEHOLDER,
    TABLE_ALIAS,
    BindValues,
    OrderClauseBuilder,
    PredicateBuilder,
    SelectListBuilder,
)
from crudql.errors import UnsupportedOperationError
from crudql.finder.parser import FinderDescriptor, parse_finder
from crudql.schema.statements import (
    DEFAULT_PAGE_SIZE,
    Delete,
    Insert,
    Limit,
    Order,
    Select,
    Statement,
    StoredProcedureCall,
    Update,
)
from crudql.schema.table import Table

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompiledSQL:
    """The output of a successful render.

    Attributes:
        sql: SQL text with ``?`` placeholders.
        params: Bind values, one per placeholder, in placeholder order.
        dialect: Name of the dialect that rendered the statement.
        out_positions: 1-based placeholder positions of stored-procedure
            OUT parameters (their entries in ``params`` are ``None``).
    """

    sql: str
    params: list[Any]
    dialect: str
    out_positions: tuple[int, ...] = ()

    @property
    def placeholder_count(self) -> int:
        return self.sql.count(PLACEHOLDER)


class SQLDialect(ABC):
    """Abstract base for dialect-specific renderers."""

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name (e.g. ``'oracle'``)."""

    @abstractmethod
    def pagination_clause(self, limit: Limit, binds: BindValues) -> str:
        """Return the trailing clause restricting a SELECT to ``limit``.

        Args:
            limit: The page to select.
            binds: Accumulator for any placeholder the clause uses.
        """

    def quote_identifier(self, name: str) -> str:
        """Return ``name`` as it should appear in SQL.

        Identifiers come from table metadata and are emitted unquoted.
        """
        return name

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def render(self, statement: Statement) -> CompiledSQL:
        """Render any statement kind."""
        if isinstance(statement, Select):
            return self.render_select(statement)
        if isinstance(statement, Insert):
            return self.render_insert(statement)
        if isinstance(statement, Update):
            return self.render_update(statement)
        if isinstance(statement, Delete):
            return self.render_delete(statement)
        if isinstance(statement, StoredProcedureCall):
            return self.render_call(statement)
        raise UnsupportedOperationError(
            f"Unknown statement type: {type(statement).__name__}", clause="statement"
        )

    # ------------------------------------------------------------------
    # SELECT
    # ------------------------------------------------------------------

    def render_select(self, select: Select) -> CompiledSQL:
        """``SELECT t.* FROM schema.table t [WHERE ...] [ORDER BY ...] [page]``.

        A paginated SELECT without an order is ordered by the primary key,
        ascending.
        """
        binds = BindValues()
        quote = self.quote_identifier

        parts = [
            f"SELECT {SelectListBuilder(quote).build(select.columns)}",
            f"FROM {self._from(select.table)}",
        ]
        where = select.where
        if where is not None:
            parts.append(f"WHERE {PredicateBuilder(binds, quote).build(where)}")
        order = select.order
        if order is None and select.limit is not None:
            # Pages are always ordered.
            order = Order.by_primary_key(select.table)
        if order is not None:
            parts.append(f"ORDER BY {OrderClauseBuilder(quote).build(order)}")
        if select.limit is not None:
            parts.append(self.pagination_clause(select.limit, binds))

        return self._compiled(" ".join(parts), binds, "select")

    def render_finder(
        self,
        table: Table,
        descriptor: str | FinderDescriptor,
        arguments: list[str],
        limit: Limit | None = None,
        order: Order | None = None,
        strict: bool = True,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> CompiledSQL:
        """Render a dynamic finder such as ``findAllByNameAndAge``.

        ``descriptor`` may be the raw text or an already parsed
        :class:`~crudql.finder.parser.FinderDescriptor`.  ``page_size`` sizes
        the ``findAllBy`` page when ``limit`` is ``None``.

        Raises:
            InvalidFinderError: If the descriptor or the argument count is invalid.
        """
        finder = parse_finder(descriptor) if isinstance(descriptor, str) else descriptor
        select = finder.bind(
            table, arguments, limit=limit, order=order, strict=strict, page_size=page_size
        )
        return self.render_select(select)

    def row_count(self, table: Table) -> str:
        """``SELECT COUNT(*) AS total FROM schema.table``; never filtered."""
        return f"SELECT COUNT(*) AS total FROM {self._qualified(table)}"

    def render_row_count(self, table: Table) -> CompiledSQL:
        return CompiledSQL(sql=self.row_count(table), params=[], dialect=self.dialect_name)

    # ------------------------------------------------------------------
    # INSERT / UPDATE / DELETE
    # ------------------------------------------------------------------

    def render_insert(self, insert: Insert) -> CompiledSQL:
        binds = BindValues()
        columns = ",".join(self.quote_identifier(c) for c in insert.values)
        placeholders = binds.extend(list(insert.values.values()))
        sql = f"INSERT INTO {self._qualified(insert.table)} ({columns}) VALUES ({placeholders})"
        return self._compiled(sql, binds, "insert")

    def render_update(self, update: Update) -> CompiledSQL:
        binds = BindValues()
        table = update.table
        assignments = ",".join(
            f"{self._column_of(table, col)}={binds.add(value)}"
            for col, value in update.values.items()
        )
        pk = f"{self._column_of(table, table.primary_key)}={binds.add(update.id)}"
        sql = f"UPDATE {self._qualified(table)} SET {assignments} WHERE {pk}"
        return self._compiled(sql, binds, "update")

    def render_delete(self, delete: Delete) -> CompiledSQL:
        binds = BindValues()
        table = delete.table
        pk = f"{self._column_of(table, table.primary_key)}={binds.add(delete.id)}"
        sql = f"DELETE FROM {self._qualified(table)} WHERE {pk}"
        return self._compiled(sql, binds, "delete")

    # ------------------------------------------------------------------
    # Stored procedures
    # ------------------------------------------------------------------

    def render_call(self, call: StoredProcedureCall) -> CompiledSQL:
        """``{call name(?,?,...)}`` with OUT parameters bound as ``None``."""
        binds = BindValues()
        out_positions: list[int] = []
        placeholders: list[str] = []
        for position, param in enumerate(call.parameters, start=1):
            if param.out:
                out_positions.append(position)
                placeholders.append(binds.add(None))
            else:
                placeholders.append(binds.add(param.value))
        sql = f"{{call {call.name}({','.join(placeholders)})}}"
        logger.debug("Rendered %s call with %d placeholder(s)", self.dialect_name, len(placeholders))
        return CompiledSQL(
            sql=sql,
            params=binds.values,
            dialect=self.dialect_name,
            out_positions=tuple(out_positions),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _qualified(self, table: Table) -> str:
        quote = self.quote_identifier
        return f"{quote(table.schema_name)}.{quote(table.name)}"

    def _from(self, table: Table) -> str:
        return f"{self._qualified(table)} {TABLE_ALIAS}"

    def _column_of(self, table: Table, column: str) -> str:
        return f"{self.quote_identifier(table.name)}.{self.quote_identifier(column)}"

    def _compiled(self, sql: str, binds: BindValues, kind: str) -> CompiledSQL:
        logger.debug(
            "Rendered %s %s with %d placeholder(s)", self.dialect_name, kind, len(binds.values)
        )
        return CompiledSQL(sql=sql, params=binds.values, dialect=self.dialect_name)
