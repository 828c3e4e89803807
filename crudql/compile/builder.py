"""Statement compiler facade.

``StatementCompiler`` is the only entry point the REST layer calls.  For
every request it:

1. resolves the database alias to a dialect name (``DialectRegistry``),
2. instantiates the dialect (``DialectFactory``),
3. applies paging policy to SELECTs (default page, ``page_size_max`` cap),
4. optionally validates column names against table metadata,
5. delegates rendering and reports the outcome to the usage observer.

The compiler holds configuration only; it is safe to share across threads.
"""

from __future__ import annotations

import logging

from crudql.compile.base import CompiledSQL, SQLDialect
from crudql.compile.registry import DialectFactory, DialectRegistry
from crudql.compile.standard import StandardDialect
from crudql.config import CompilerSettings
from crudql.finder.parser import parse_finder
from crudql.policy.engine import PagingPolicy
from crudql.schema.statements import (
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
from crudql.usage import StatementKind, UsageObserver
from crudql.validate.validator import StatementValidator

logger = logging.getLogger(__name__)


class StatementCompiler:
    """Compiles statements to dialect-specific parameterized SQL.

    Args:
        registry: Alias to dialect-name mapping.
        settings: Paging and finder settings; defaults to ``CompilerSettings()``.
        observer: Optional usage observer notified of every compile.
        validate_columns: Reject column names missing from table metadata.
    """

    def __init__(
        self,
        registry: DialectRegistry,
        settings: CompilerSettings | None = None,
        observer: UsageObserver | None = None,
        validate_columns: bool = False,
    ) -> None:
        self._registry = registry
        self._settings = settings or CompilerSettings()
        self._paging = PagingPolicy.from_settings(self._settings)
        self._observer = observer
        self._validate_columns = validate_columns

    @classmethod
    def from_settings(
        cls,
        settings: CompilerSettings,
        observer: UsageObserver | None = None,
        validate_columns: bool = False,
    ) -> StatementCompiler:
        return cls(
            DialectRegistry.from_settings(settings),
            settings,
            observer=observer,
            validate_columns=validate_columns,
        )

    @property
    def paging(self) -> PagingPolicy:
        return self._paging

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def dialect_for(self, alias: str) -> SQLDialect:
        """Return the dialect configured for ``alias``.

        Raises:
            UnsupportedDialectError: If the alias or its dialect is unknown.
        """
        return DialectFactory.create(self._registry.resolve(alias), alias=alias)

    def compile(
        self,
        alias: str,
        statement: Statement,
        limit: Limit | None = None,
        order: Order | None = None,
    ) -> CompiledSQL:
        """Compile ``statement`` for the database behind ``alias``.

        For a :class:`Select`, ``limit`` and ``order`` replace the statement's
        own when given; the resulting limit is clamped to ``page_size_max``.
        They are ignored for every other statement kind.

        Raises:
            UnsupportedDialectError: If the alias has no usable dialect.
            UnsupportedOperationError: If a predicate cannot be rendered, or
                column validation is on and a column is unknown.
        """
        kind = _kind_of(statement)
        try:
            dialect = self.dialect_for(alias)
            if isinstance(statement, Select):
                statement = self._paginate(statement, limit, order)
            if self._validate_columns and not isinstance(statement, StoredProcedureCall):
                StatementValidator(statement.table).validate(statement)
            compiled = dialect.render(statement)
        except Exception as exc:
            self._notify_failure(alias, kind, exc)
            raise
        self._notify(alias, kind)
        return compiled

    def compile_finder(
        self,
        alias: str,
        table: Table,
        descriptor: str,
        arguments: list[str],
        limit: Limit | None = None,
        order: Order | None = None,
    ) -> CompiledSQL:
        """Compile a dynamic finder such as ``findAllByNameAndAgeBetween``.

        ``findAllBy`` finders use ``limit`` or the configured default page;
        ``findBy`` finders always return one row.  Rows are ordered by the
        primary key unless ``order`` says otherwise.

        Raises:
            InvalidFinderError: If the descriptor is malformed or the argument
                count does not match.
            UnsupportedDialectError: If the alias has no usable dialect.
        """
        kind = StatementKind.DYNAMIC
        try:
            dialect = self.dialect_for(alias)
            finder = parse_finder(descriptor)
            if self._validate_columns:
                StatementValidator(table).validate_finder(finder, order)
            compiled = dialect.render_finder(
                table,
                finder,
                arguments,
                limit=self._paging.resolve_limit(limit),
                order=self._paging.resolve_order(order, table.primary_key),
                strict=self._settings.strict_finder_arguments,
                page_size=self._paging.page_size,
            )
        except Exception as exc:
            self._notify_failure(alias, kind, exc)
            raise
        self._notify(alias, kind)
        return compiled

    def row_count_statement(self, table: Table) -> str:
        """``SELECT COUNT(*) AS total FROM schema.table``, identical for every dialect."""
        return StandardDialect().row_count(table)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _paginate(self, select: Select, limit: Limit | None, order: Order | None) -> Select:
        select = select.paginate(limit=limit, order=order)
        if select.limit is not None:
            clamped = self._paging.resolve_limit(select.limit)
            if clamped is not select.limit:
                select = select.paginate(limit=clamped)
        return select

    def _notify(self, alias: str, kind: StatementKind) -> None:
        if self._observer is not None:
            self._observer.compiled(alias, kind)

    def _notify_failure(self, alias: str, kind: StatementKind, error: Exception) -> None:
        logger.debug("Compiling %s for alias %s failed: %s", kind.value, alias, error)
        if self._observer is not None:
            self._observer.failed(alias, kind, error)


def _kind_of(statement: Statement) -> StatementKind:
    if isinstance(statement, Insert):
        return StatementKind.CREATE
    if isinstance(statement, Update):
        return StatementKind.UPDATE
    if isinstance(statement, Delete):
        return StatementKind.DELETE
    if isinstance(statement, StoredProcedureCall):
        return StatementKind.PROCEDURE
    return StatementKind.READ
