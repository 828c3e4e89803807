"""Shared pytest fixtures for crudQL unit and integration tests."""
from __future__ import annotations

import pytest

from crudql.compile.builder import StatementCompiler
from crudql.config import CompilerSettings
from crudql.schema.table import Table
from crudql.usage import UsageStatistics
from tests.fixtures import ALL_DIALECTS, load_tables

TABLES = load_tables()


@pytest.fixture(scope="session")
def a_table() -> Table:
    """``demo1.a_table`` with primary key ``tableId`` and known columns."""
    return TABLES["demo1.a_table"]


@pytest.fixture(scope="session")
def grrr() -> Table:
    """``demo1.grrr``: no declared primary key, no column metadata."""
    return TABLES["demo1.grrr"]


@pytest.fixture(scope="session")
def test_table() -> Table:
    return TABLES["test.test"]


@pytest.fixture()
def settings() -> CompilerSettings:
    """One alias per built-in dialect name; the alias equals the dialect name."""
    return CompilerSettings(dialects={name: name for name in ALL_DIALECTS})


@pytest.fixture()
def stats() -> UsageStatistics:
    return UsageStatistics()


@pytest.fixture()
def compiler(settings: CompilerSettings, stats: UsageStatistics) -> StatementCompiler:
    return StatementCompiler.from_settings(settings, observer=stats)
