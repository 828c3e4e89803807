"""Dialect and alias registries (Open/Closed Principle).

``DialectFactory``
    Central registry for :class:`~crudql.compile.base.SQLDialect`
    implementations.  Register a dialect once; the compiler looks it up by
    name automatically.

``DialectRegistry``
    Maps database aliases (as configured by the deployment) to dialect
    names.  It is the only piece of configuration the compiler needs.

Usage::

    from crudql.compile.registry import DialectFactory

    @DialectFactory.register("informix")
    class InformixDialect(WindowedDialect):
        ...
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, ClassVar

from crudql.compile.base import SQLDialect
from crudql.errors import UnsupportedDialectError

if TYPE_CHECKING:
    from crudql.config import CompilerSettings

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Dialect factory
# ---------------------------------------------------------------------------


class DialectFactory:
    """Registry mapping dialect names to :class:`SQLDialect` classes.

    Dialects are stateless, so :meth:`create` hands out one shared instance
    per registered class.

    Example::

        @DialectFactory.register("oracle")
        class OracleDialect(WindowedDialect):
            ...

        dialect = DialectFactory.create("oracle")
    """

    _dialects: ClassVar[dict[str, type[SQLDialect]]] = {}
    _instances: ClassVar[dict[type[SQLDialect], SQLDialect]] = {}

    @classmethod
    def register(cls, *names: str) -> Callable[[type[SQLDialect]], type[SQLDialect]]:
        """Decorator that registers a dialect class under one or more names.

        Args:
            names: Dialect names (e.g. ``"mssql"``, ``"sqlserver"``).

        Returns:
            A decorator that registers and returns the dialect class.
        """

        def decorator(dialect_cls: type[SQLDialect]) -> type[SQLDialect]:
            cls.register_class(dialect_cls, *names)
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, dialect_cls: type[SQLDialect], *names: str) -> None:
        """Register a dialect class without using the decorator form."""
        for name in names:
            cls._dialects[name.lower()] = dialect_cls

    @classmethod
    def create(cls, name: str, alias: str | None = None) -> SQLDialect:
        """Return the dialect registered for ``name``.

        Args:
            name: The dialect name (case-insensitive).
            alias: Database alias, reported in the error when lookup fails.

        Raises:
            UnsupportedDialectError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name.lower()) if name else None
        if dialect_cls is None:
            raise UnsupportedDialectError(name, cls.registered_dialects(), alias=alias)
        instance = cls._instances.get(dialect_cls)
        if instance is None:
            instance = cls._instances.setdefault(dialect_cls, dialect_cls())
        return instance

    @classmethod
    def registered_dialects(cls) -> list[str]:
        """Return the sorted list of registered dialect names."""
        return sorted(cls._dialects)


# ---------------------------------------------------------------------------
# Alias registry
# ---------------------------------------------------------------------------


class DialectRegistry:
    """Resolves a database alias to the name of its dialect.

    Args:
        mapping: Alias to dialect name, e.g. ``{"demo1": "oracle"}``.
    """

    def __init__(self, mapping: dict[str, str] | None = None) -> None:
        self._mapping = {
            alias.strip(): name.strip().lower() for alias, name in (mapping or {}).items()
        }

    @classmethod
    def from_settings(cls, settings: CompilerSettings) -> DialectRegistry:
        return cls(settings.dialects)

    def resolve(self, alias: str) -> str:
        """Return the dialect name configured for ``alias``.

        Raises:
            UnsupportedDialectError: If ``alias`` has no dialect configured.
        """
        name = self._mapping.get(alias)
        if name is None:
            raise UnsupportedDialectError(
                "<unconfigured>", DialectFactory.registered_dialects(), alias=alias
            )
        logger.debug("Alias %s uses dialect %s", alias, name)
        return name

    @property
    def aliases(self) -> list[str]:
        return sorted(self._mapping)
