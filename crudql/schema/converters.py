"""Utilities for building :class:`~crudql.schema.table.Table` metadata.

SQLAlchemy converter
--------------------
:func:`table_from_sqlalchemy` reflects one table through a live engine and
returns a :class:`Table`.  :class:`SQLAlchemyMetadataProvider` wraps it as
the ``TableMetadataProvider`` the REST layer consults: one engine per
database alias, one reflection per ``(alias, resource)``.

Install the optional dependency before using this module::

    pip install "crudql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from crudql.schema.converters import SQLAlchemyMetadataProvider

    provider = SQLAlchemyMetadataProvider({"demo1": create_engine("sqlite:///demo.db")})
    table = provider.resolve("demo1", "users")
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from crudql.errors import ConfigurationError, ResourceNotFoundError
from crudql.schema.table import Column, Table

if TYPE_CHECKING:
    from sqlalchemy import Engine
    from sqlalchemy import Table as SATable

logger = logging.getLogger(__name__)


class TableMetadataProvider(ABC):
    """Resolves a resource name under a database alias to a :class:`Table`."""

    @abstractmethod
    def resolve(self, alias: str, resource: str, primary_key: str | None = None) -> Table:
        """Return metadata for ``resource``.

        Args:
            alias: Database alias.
            resource: Table name.
            primary_key: Optional primary-key hint from the request.

        Raises:
            ResourceNotFoundError: If the resource does not exist for ``alias``.
        """


def table_from_sqlalchemy(
    engine: Engine,
    table_name: str,
    *,
    schema: str | None = None,
    primary_key: str | None = None,
) -> Table:
    """Build a :class:`Table` by reflecting ``table_name`` through ``engine``.

    The reflected primary key wins over ``primary_key``; the hint is only used
    for tables that declare none (views, legacy tables), and ``"id"`` is the
    last resort.  For composite keys the first column is used.

    Args:
        engine: A :class:`sqlalchemy.engine.Engine` instance.
        table_name: The table to reflect.
        schema: Database schema.  When ``None`` the engine's default schema
            is used, then the database named in the engine URL.
        primary_key: Primary-key hint for tables without a declared key.

    Returns:
        A populated :class:`Table`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
        ResourceNotFoundError: If the table does not exist.
        ConfigurationError: If no schema is given and none can be derived
            from the engine.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
        from sqlalchemy import inspect as _inspect
        from sqlalchemy.exc import InvalidRequestError
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for table_from_sqlalchemy(). "
            'Install it with: pip install "crudql[sqlalchemy]"'
        ) from exc

    if schema is None:
        schema = _inspect(engine).default_schema_name
    schema_name = schema or engine.url.database
    if not schema_name:
        raise ConfigurationError(
            f"No schema given for table '{table_name}' and the engine reports none.",
            details={
                "table": table_name,
                "url": engine.url.render_as_string(hide_password=True),
            },
        )

    # Reflection keeps the engine's own namespace; schema_name only labels the Table.
    metadata = _MetaData()
    try:
        with engine.connect() as conn:
            metadata.reflect(bind=conn, only=[table_name], schema=schema)
    except InvalidRequestError as exc:
        # reflect(only=...) reports a missing table as InvalidRequestError.
        raise ResourceNotFoundError(engine.url.render_as_string(hide_password=True), table_name) from exc

    key = f"{schema}.{table_name}" if schema else table_name
    return _sa_table_to_table(metadata.tables[key], schema_name, primary_key)


def _sa_table_to_table(sa_table: SATable, schema: str, primary_key: str | None) -> Table:
    pk_columns = [c.name for c in sa_table.primary_key.columns]
    if pk_columns:
        pk = pk_columns[0]
    else:
        pk = primary_key
        if not pk:
            logger.warning("Table %s.%s declares no primary key; using 'id'", schema, sa_table.name)

    columns = tuple(
        Column(
            name=col.name,
            sql_type=str(col.type),
            size=getattr(col.type, "length", None),
            precision=getattr(col.type, "precision", None),
            scale=getattr(col.type, "scale", None),
            # col.nullable is None for some reflected columns; treat as nullable.
            nullable=col.nullable is not False,
        )
        for col in sa_table.columns
    )
    return Table(schema=schema, name=sa_table.name, primary_key=pk, columns=columns)


class SQLAlchemyMetadataProvider(TableMetadataProvider):
    """Reflects and caches table metadata for a set of database aliases.

    Reflected tables are immutable, so the cache is read without locking;
    the lock only serialises the first reflection of each key.

    Args:
        engines: Engine per database alias.
        schemas: Optional schema per alias; the engine default otherwise.
            Aliases whose engine reports no schema must be listed here.
    """

    def __init__(
        self,
        engines: dict[str, Engine],
        schemas: dict[str, str] | None = None,
    ) -> None:
        self._engines = dict(engines)
        self._schemas = dict(schemas or {})
        self._cache: dict[tuple[str, str], Table] = {}
        self._lock = threading.Lock()

    def resolve(self, alias: str, resource: str, primary_key: str | None = None) -> Table:
        cached = self._cache.get((alias, resource))
        if cached is not None:
            return cached

        engine = self._engines.get(alias)
        if engine is None:
            raise ConfigurationError(
                f"Database alias '{alias}' is not configured.",
                details={"alias": alias, "aliases": sorted(self._engines)},
            )

        with self._lock:
            cached = self._cache.get((alias, resource))
            if cached is not None:
                return cached
            logger.debug("Reflecting metadata for %s.%s", alias, resource)
            try:
                table = table_from_sqlalchemy(
                    engine,
                    resource,
                    schema=self._schemas.get(alias),
                    primary_key=primary_key,
                )
            except ResourceNotFoundError as exc:
                raise ResourceNotFoundError(alias, resource) from exc
            except ConfigurationError as exc:
                raise ConfigurationError(
                    f"Alias '{alias}' needs a configured schema: {exc}",
                    details={**exc.details, "alias": alias},
                ) from exc
            self._cache[(alias, resource)] = table
            return table

    def evict(self, alias: str, resource: str | None = None) -> None:
        """Drop cached metadata for one resource, or for a whole alias."""
        with self._lock:
            for key in list(self._cache):
                if key[0] == alias and (resource is None or key[1] == resource):
                    del self._cache[key]
