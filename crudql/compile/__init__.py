"""crudQL rendering layer: statements → dialect-specific parameterized SQL."""
from crudql.compile.base import CompiledSQL, SQLDialect
from crudql.compile.builder import StatementCompiler
from crudql.compile.derby import DerbyDialect
from crudql.compile.mysql import MySQLDialect
from crudql.compile.postgres import PostgresDialect
from crudql.compile.sqlite import SQLiteDialect
from crudql.compile.standard import StandardDialect
from crudql.compile.windowed import DB2Dialect, OracleDialect, SQLServerDialect, WindowedDialect

__all__ = [
    "CompiledSQL",
    "SQLDialect",
    "StatementCompiler",
    "StandardDialect",
    "PostgresDialect",
    "MySQLDialect",
    "SQLiteDialect",
    "DerbyDialect",
    "WindowedDialect",
    "OracleDialect",
    "SQLServerDialect",
    "DB2Dialect",
]
