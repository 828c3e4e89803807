"""PostgreSQL dialect."""
from __future__ import annotations

from crudql.compile.standard import StandardDialect


class PostgresDialect(StandardDialect):
    """PostgreSQL accepts ``LIMIT ? OFFSET ?`` with bound integers.

    Parameter style: ``?`` placeholders are rewritten to ``%s`` by the
    executor when a ``format``-style driver such as ``psycopg`` is used.
    """

    @property
    def dialect_name(self) -> str:
        return "postgresql"
