"""crudQL – dialect-aware SQL statement compiler for generic REST CRUD APIs.

Describe the operation, get parameterized SQL back.

Public API
----------
``compile_statement``
    Render a Select / Insert / Update / Delete / StoredProcedureCall for the
    database behind an alias.

``compile_finder``
    Parse a dynamic finder descriptor (``findAllByNameAndAgeBetween``) and
    render it as a paginated SELECT.

``row_count_statement``
    ``SELECT COUNT(*) AS total FROM schema.table``, identical for every
    dialect.

Re-exported types
-----------------
``Table``, ``Column``, the statement model, ``CompiledSQL``,
``StatementCompiler``, ``CompilerSettings``, the policy objects and all error
classes.

Extensibility
-------------
New dialects can be registered via::

    from crudql.compile.registry import DialectFactory

    @DialectFactory.register("informix")
    class InformixDialect(WindowedDialect):
        ...

After registration, any alias configured with ``"informix"`` compiles with it.
"""

from __future__ import annotations

from crudql.compile.base import CompiledSQL, SQLDialect
from crudql.compile.builder import StatementCompiler
from crudql.compile.derby import DerbyDialect
from crudql.compile.mysql import MySQLDialect
from crudql.compile.postgres import PostgresDialect
from crudql.compile.registry import DialectFactory, DialectRegistry
from crudql.compile.sqlite import SQLiteDialect
from crudql.compile.standard import StandardDialect
from crudql.compile.windowed import DB2Dialect, OracleDialect, SQLServerDialect
from crudql.config import CompilerSettings
from crudql.errors import (
    ConfigurationError,
    CrudQLError,
    InvalidFinderError,
    InvalidStatementError,
    ResourceNotFoundError,
    UnsupportedDialectError,
    UnsupportedOperationError,
)
from crudql.finder.parser import FinderDescriptor, parse_finder
from crudql.policy.access import AccessControlEvaluator, AccessPolicy, Operation
from crudql.policy.engine import PagingPolicy
from crudql.schema.converters import (
    SQLAlchemyMetadataProvider,
    TableMetadataProvider,
    table_from_sqlalchemy,
)
from crudql.schema.statements import (
    Connector,
    Delete,
    Direction,
    GroupedPredicate,
    Insert,
    Limit,
    Operator,
    Order,
    Predicate,
    PredicateGroup,
    ProcedureParam,
    Select,
    Statement,
    StoredProcedureCall,
    Update,
)
from crudql.schema.table import Column, Table
from crudql.usage import StatementKind, UsageObserver, UsageStatistics
from crudql.validate.validator import StatementValidator

# ---------------------------------------------------------------------------
# Register built-in dialects with DialectFactory
# ---------------------------------------------------------------------------

DialectFactory.register_class(StandardDialect, "standard", "hsqldb", "h2")
DialectFactory.register_class(PostgresDialect, "postgresql", "postgres")
DialectFactory.register_class(MySQLDialect, "mysql")
DialectFactory.register_class(SQLiteDialect, "sqlite")
DialectFactory.register_class(DerbyDialect, "derby")
DialectFactory.register_class(OracleDialect, "oracle")
DialectFactory.register_class(SQLServerDialect, "mssql", "sqlserver")
DialectFactory.register_class(DB2Dialect, "db2")

__all__ = [
    # Core pipeline
    "compile_statement",
    "compile_finder",
    "row_count_statement",
    # Table metadata
    "Table",
    "Column",
    "TableMetadataProvider",
    "SQLAlchemyMetadataProvider",
    "table_from_sqlalchemy",
    # Statement model
    "Statement",
    "Select",
    "Insert",
    "Update",
    "Delete",
    "StoredProcedureCall",
    "ProcedureParam",
    "Predicate",
    "PredicateGroup",
    "GroupedPredicate",
    "Operator",
    "Connector",
    "Limit",
    "Order",
    "Direction",
    # Finders
    "FinderDescriptor",
    "parse_finder",
    # Compilation
    "CompiledSQL",
    "SQLDialect",
    "DialectFactory",
    "DialectRegistry",
    "StatementCompiler",
    "StandardDialect",
    "PostgresDialect",
    "MySQLDialect",
    "SQLiteDialect",
    "DerbyDialect",
    "OracleDialect",
    "SQLServerDialect",
    "DB2Dialect",
    # Settings and policy
    "CompilerSettings",
    "PagingPolicy",
    "AccessPolicy",
    "AccessControlEvaluator",
    "Operation",
    "StatementValidator",
    # Usage
    "StatementKind",
    "UsageObserver",
    "UsageStatistics",
    # Errors
    "CrudQLError",
    "ConfigurationError",
    "ResourceNotFoundError",
    "InvalidStatementError",
    "InvalidFinderError",
    "UnsupportedDialectError",
    "UnsupportedOperationError",
]


def compile_statement(
    alias: str,
    statement: Statement,
    settings: CompilerSettings,
    limit: Limit | None = None,
    order: Order | None = None,
) -> CompiledSQL:
    """Compile one statement for the database behind ``alias``.

    This is the shortest path through the compiler::

        settings = CompilerSettings(dialects={"demo1": "oracle"})
        compiled = crudql.compile_statement(
            "demo1",
            Select(table=table, predicate=Predicate.equals("name", "1")),
            settings,
            limit=Limit(start=0, rows=25),
        )
        cursor.execute(compiled.sql, compiled.params)

    Long-lived callers should build one :class:`StatementCompiler` instead.

    Args:
        alias: Database alias configured in ``settings.dialects``.
        statement: The statement to render.
        settings: Dialect wiring and paging limits.
        limit: Page for a Select; overrides the statement's own.
        order: Ordering for a Select; overrides the statement's own.

    Returns:
        ``CompiledSQL`` with ``sql`` text and positional ``params``.

    Raises:
        UnsupportedDialectError: If the alias has no usable dialect.
        UnsupportedOperationError: If a predicate cannot be rendered.
    """
    return StatementCompiler.from_settings(settings).compile(alias, statement, limit, order)


def compile_finder(
    alias: str,
    table: Table,
    descriptor: str,
    arguments: list[str],
    settings: CompilerSettings,
    limit: Limit | None = None,
    order: Order | None = None,
) -> CompiledSQL:
    """Compile a dynamic finder for the database behind ``alias``.

    Args:
        alias: Database alias configured in ``settings.dialects``.
        table: Table the finder runs against.
        descriptor: Finder descriptor, e.g. ``findAllByNameAndAgeBetween``.
        arguments: Positional values, consumed left to right.
        settings: Dialect wiring, paging limits and finder strictness.
        limit: Page for ``findAllBy`` finders.
        order: Ordering; primary key ascending by default.

    Raises:
        InvalidFinderError: If the descriptor or argument count is invalid.
        UnsupportedDialectError: If the alias has no usable dialect.
    """
    return StatementCompiler.from_settings(settings).compile_finder(
        alias, table, descriptor, arguments, limit, order
    )


def row_count_statement(table: Table) -> str:
    """Return ``SELECT COUNT(*) AS total FROM schema.table``."""
    return StandardDialect().row_count(table)
