"""Custom exception hierarchy for crudQL.

All public errors inherit from CrudQLError so callers can catch the base
class for any crudQL-specific failure.  None of them describe transient
conditions: each one points at a caller or configuration defect and is
meant to be surfaced verbatim to the client by the HTTP layer.
"""
from __future__ import annotations

from typing import Any


class CrudQLError(Exception):
    """Base exception for all crudQL errors.

    Args:
        message: Human-readable description.
        code: Machine-readable error code.
        details: Extra context (alias, resource, offending key, ...).
    """

    code: str = "CRUDQL_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response suitable for an API client."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class ConfigurationError(CrudQLError):
    """Raised when table or alias metadata is missing or malformed."""

    code = "CONFIGURATION_ERROR"


class ResourceNotFoundError(CrudQLError):
    """Raised when a resource does not exist for a database alias."""

    code = "RESOURCE_NOT_FOUND"

    def __init__(self, alias: str, resource: str) -> None:
        super().__init__(
            f"Resource '{resource}' does not exist for alias '{alias}'.",
            details={"alias": alias, "resource": resource},
        )
        self.alias = alias
        self.resource = resource


class InvalidStatementError(CrudQLError):
    """Raised when a statement value object breaks one of its invariants."""

    code = "INVALID_STATEMENT"


class InvalidFinderError(CrudQLError):
    """Raised when a dynamic finder descriptor cannot be compiled.

    Args:
        message: Human-readable description.
        descriptor: The finder descriptor that failed (e.g. ``findByName``).
        details: Extra context such as ``expected`` / ``given`` counts.
    """

    code = "INVALID_FINDER"

    def __init__(
        self,
        message: str,
        descriptor: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details={"descriptor": descriptor, **(details or {})})
        self.descriptor = descriptor


class UnsupportedDialectError(CrudQLError):
    """Raised when an alias resolves to a dialect nobody registered."""

    code = "UNSUPPORTED_DIALECT"

    def __init__(
        self,
        dialect: str,
        registered: list[str],
        alias: str | None = None,
    ) -> None:
        where = f" for alias '{alias}'" if alias else ""
        super().__init__(
            f"Unsupported dialect '{dialect}'{where}. Registered dialects: {registered}.",
            details={"alias": alias, "dialect": dialect, "registered": registered},
        )
        self.dialect = dialect
        self.alias = alias


class UnsupportedOperationError(CrudQLError):
    """Raised when a statement asks for something a renderer cannot produce.

    Args:
        message: Human-readable description.
        clause: The clause being rendered when the error occurred.
        details: Extra context.
    """

    code = "UNSUPPORTED_OPERATION"

    def __init__(
        self,
        message: str,
        clause: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details={"clause": clause, **(details or {})})
        self.clause = clause
