"""MySQL dialect."""
from __future__ import annotations

from crudql.compile.standard import StandardDialect


class MySQLDialect(StandardDialect):
    """MySQL and MariaDB.

    ``LIMIT ? OFFSET ?`` is supported natively; server-side prepared
    statements require both values to be integers, which they always are.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"
