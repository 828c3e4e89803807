"""Baseline ANSI dialect: ``LIMIT ? OFFSET ?`` pagination."""
from __future__ import annotations

from crudql.compile.base import SQLDialect
from crudql.compile.clause_builders import BindValues
from crudql.schema.statements import Limit


class StandardDialect(SQLDialect):
    """Renders statements for databases that understand ``LIMIT/OFFSET``.

    Used as-is for HSQLDB and H2, and as the base of the PostgreSQL, MySQL
    and SQLite dialects.  Both pagination values are bound, rows first.
    """

    @property
    def dialect_name(self) -> str:
        return "standard"

    def pagination_clause(self, limit: Limit, binds: BindValues) -> str:
        rows = binds.add(limit.rows)
        start = binds.add(limit.start)
        return f"LIMIT {rows} OFFSET {start}"
