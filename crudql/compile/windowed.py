"""Dialects paginating through ``ROW_NUMBER() OVER (...)``.

Oracle (before 12c), SQL Server (before 2012) and DB2 have no trailing
``LIMIT``.  A paginated SELECT is wrapped instead::

    SELECT * FROM ( SELECT ROW_NUMBER() OVER ( ORDER BY t.id ) AS ROW_NUMBER, t.*
                    FROM demo1.a_table t WHERE t.name = ?)
    WHERE ROW_NUMBER BETWEEN 0 AND 25

The ordering moves inside ``OVER (...)``; without an explicit order the
primary key gives the window a deterministic row order.  The range bounds
are validated integers from :class:`~crudql.schema.statements.Limit` and are
written into the text rather than bound.  A SELECT without a limit renders
exactly as in the standard dialect.
"""
from __future__ import annotations

from crudql.compile.base import CompiledSQL, SQLDialect
from crudql.compile.clause_builders import (
    BindValues,
    OrderClauseBuilder,
    PredicateBuilder,
    SelectListBuilder,
)
from crudql.schema.statements import Limit, Select


class WindowedDialect(SQLDialect):
    """Shared SELECT layout of the ``ROW_NUMBER()`` family."""

    @property
    def dialect_name(self) -> str:
        return "windowed"

    def render_select(self, select: Select) -> CompiledSQL:
        if select.limit is None:
            return super().render_select(select)

        binds = BindValues()
        quote = self.quote_identifier
        order_builder = OrderClauseBuilder(quote)
        if select.order is not None:
            over = order_builder.build(select.order)
        else:
            over = order_builder.column(select.table.primary_key)

        inner = (
            f"SELECT ROW_NUMBER() OVER ( ORDER BY {over} ) AS ROW_NUMBER, "
            f"{SelectListBuilder(quote).build(select.columns)} FROM {self._from(select.table)}"
        )
        where = select.where
        if where is not None:
            inner += f" WHERE {PredicateBuilder(binds, quote).build(where)}"

        sql = f"SELECT * FROM ( {inner}) {self.pagination_clause(select.limit, binds)}"
        return self._compiled(sql, binds, "select")

    def pagination_clause(self, limit: Limit, binds: BindValues) -> str:
        return f"WHERE ROW_NUMBER BETWEEN {int(limit.start)} AND {int(limit.end)}"


class OracleDialect(WindowedDialect):
    @property
    def dialect_name(self) -> str:
        return "oracle"


class SQLServerDialect(WindowedDialect):
    """Microsoft SQL Server and Sybase ASE."""

    @property
    def dialect_name(self) -> str:
        return "mssql"


class DB2Dialect(WindowedDialect):
    @property
    def dialect_name(self) -> str:
        return "db2"
