"""Column existence validator.

Checks that every column a statement names is a column of its table.
Tables built without column metadata (``columns=()``) are not checked:
the database itself reports unknown columns in that case.
"""

from __future__ import annotations

from crudql.errors import UnsupportedOperationError
from crudql.finder.parser import FinderDescriptor
from crudql.schema.statements import (
    Delete,
    Insert,
    Order,
    Select,
    Statement,
    StoredProcedureCall,
    Update,
)
from crudql.schema.table import Table


class StatementValidator:
    """Validates statement column references against table metadata.

    Args:
        table: Table metadata to validate against.
    """

    def __init__(self, table: Table) -> None:
        self._table = table

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, statement: Statement) -> None:
        """Raise :class:`~crudql.errors.UnsupportedOperationError` on unknown columns."""
        if not self._table.columns or isinstance(statement, (Delete, StoredProcedureCall)):
            return
        if isinstance(statement, Select):
            self._validate_select(statement)
        elif isinstance(statement, (Insert, Update)):
            for col in statement.values:
                self.assert_column(col, clause="SET" if isinstance(statement, Update) else "VALUES")

    def validate_finder(self, finder: FinderDescriptor, order: Order | None = None) -> None:
        """Check the fields of a parsed finder, and its ordering column."""
        for field_expr in finder.fields:
            self.assert_column(field_expr.column, clause="WHERE")
        if order is not None:
            self.assert_column(order.column, clause="ORDER BY")

    def assert_column(self, column: str, clause: str) -> None:
        """Raise if ``column`` is not a column of the table.

        Args:
            column: Column to look up (case-insensitive).
            clause: Clause that references it, for the error message.
        """
        if not self._table.columns or self._table.has_column(column):
            return
        raise UnsupportedOperationError(
            f"Column '{column}' does not exist on '{self._table.qualified_name}'.",
            clause=clause,
            details={
                "table": self._table.qualified_name,
                "column": column,
                "allowed_columns": self._table.column_names,
            },
        )

    # ------------------------------------------------------------------
    # Clauses
    # ------------------------------------------------------------------

    def _validate_select(self, select: Select) -> None:
        for col in select.columns:
            self.assert_column(col, clause="SELECT")
        where = select.where
        if where is not None:
            for pred in where.predicates:
                self.assert_column(pred.column, clause="WHERE")
        if select.order is not None:
            self.assert_column(select.order.column, clause="ORDER BY")
