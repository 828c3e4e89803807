"""Apache Derby dialect."""
from __future__ import annotations

from crudql.compile.base import SQLDialect
from crudql.compile.clause_builders import BindValues
from crudql.schema.statements import Limit


class DerbyDialect(SQLDialect):
    """Derby has no ``LIMIT``; it uses the SQL:2008 row-limiting clause.

    The offset comes first in the text, so it is also bound first.
    """

    @property
    def dialect_name(self) -> str:
        return "derby"

    def pagination_clause(self, limit: Limit, binds: BindValues) -> str:
        start = binds.add(limit.start)
        rows = binds.add(limit.rows)
        return f"OFFSET {start} ROWS FETCH NEXT {rows} ROWS ONLY"
