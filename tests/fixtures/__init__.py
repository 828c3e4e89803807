"""Test fixtures: sample table metadata JSON and SQLite DDL."""

from __future__ import annotations

import json
from pathlib import Path

from crudql.schema.table import Table

STANDARD_FAMILY = ["standard", "hsqldb", "h2", "postgresql", "postgres", "mysql", "sqlite"]
WINDOWED_FAMILY = ["oracle", "mssql", "sqlserver", "db2"]
ALL_DIALECTS = [*STANDARD_FAMILY, "derby", *WINDOWED_FAMILY]

_FIXTURES_DIR = Path(__file__).parent


def load_tables() -> dict[str, Table]:
    """Load the sample tables from tables.json, keyed by ``schema.name``."""
    data = json.loads((_FIXTURES_DIR / "tables.json").read_text())
    tables = [Table.model_validate(t) for t in data["tables"]]
    return {t.qualified_name: t for t in tables}


def load_ddl() -> str:
    """Return the SQLite DDL (and seed rows) used by the integration tests."""
    return (_FIXTURES_DIR / "ddl_sqlite.sql").read_text()
