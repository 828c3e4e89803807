"""SQLite dialect."""
from __future__ import annotations

from crudql.compile.standard import StandardDialect


class SQLiteDialect(StandardDialect):
    """Renders SQL for SQLite.

    Parameter style: ``?`` (qmark) - directly executable with Python's
    built-in ``sqlite3`` (``cursor.execute(sql, params)``).
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"
