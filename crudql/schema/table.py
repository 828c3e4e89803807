"""Pydantic models describing a queryable relation.

A :class:`Table` is produced once per resource by a metadata provider (see
:mod:`crudql.schema.converters`) and read by every statement compiled
against it.  Identifiers are interpolated into SQL unescaped, so they are
assumed to come from database metadata, never from request data.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from crudql.errors import ConfigurationError

#: Primary key used when the caller gives no hint and none is reflected.
DEFAULT_PRIMARY_KEY = "id"


class Column(BaseModel):
    """Metadata for a single table or result column.

    Attributes:
        name: Column name.
        sql_type: SQL type name as reported by the database (``'VARCHAR'``).
        size: Display size / declared length, when known.
        precision: Numeric precision, when known.
        scale: Numeric scale, when known.
        nullable: Whether the column can be NULL.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    sql_type: str = ""
    size: int | None = None
    precision: int | None = None
    scale: int | None = None
    nullable: bool = True


class Table(BaseModel):
    """Immutable description of a relation.

    Attributes:
        schema_name: Database schema (``demo1`` in ``demo1.a_table``).
        name: Table name.
        primary_key: Primary-key column; defaults to ``"id"``.
        columns: Ordered column metadata; may be empty when unknown.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    schema_name: str = Field(alias="schema")
    name: str
    primary_key: str = DEFAULT_PRIMARY_KEY
    columns: tuple[Column, ...] = ()

    @field_validator("primary_key", mode="before")
    @classmethod
    def _default_primary_key(cls, value: str | None) -> str:
        return value or DEFAULT_PRIMARY_KEY

    @model_validator(mode="after")
    def _check_names(self) -> Table:
        if not self.schema_name or not self.schema_name.strip():
            raise ConfigurationError(
                f"Table '{self.name}' requires a schema name.",
                details={"schema": self.schema_name, "table": self.name},
            )
        if not self.name or not self.name.strip():
            raise ConfigurationError(
                "A table name is required.",
                details={"schema": self.schema_name, "table": self.name},
            )
        return self

    @property
    def qualified_name(self) -> str:
        """Returns ``schema.table`` as used in generated SQL."""
        return f"{self.schema_name}.{self.name}"

    @property
    def column_names(self) -> list[str]:
        """Returns all known column names for this table."""
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Column | None:
        """Returns the Column with the given name, or ``None``."""
        for col in self.columns:
            if col.name == name:
                return col
        return None

    def has_column(self, name: str) -> bool:
        """Whether ``name`` is a known column (case-insensitive)."""
        wanted = name.lower()
        return any(c.name.lower() == wanted for c in self.columns)
