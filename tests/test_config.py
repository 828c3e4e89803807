"""Unit tests for CompilerSettings."""

from __future__ import annotations

import pytest

from crudql.compile.builder import StatementCompiler
from crudql.config import CompilerSettings
from crudql.errors import ConfigurationError


def test_defaults(monkeypatch):
    for var in ("CRUDQL_PAGE_SIZE", "CRUDQL_PAGE_SIZE_MAX", "CRUDQL_DIALECTS"):
        monkeypatch.delenv(var, raising=False)
    settings = CompilerSettings()
    assert settings.page_size == 25
    assert settings.page_size_max == 500
    assert settings.dialects == {}
    assert settings.strict_finder_arguments is True


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("CRUDQL_PAGE_SIZE", "50")
    monkeypatch.setenv("CRUDQL_PAGE_SIZE_MAX", "200")
    monkeypatch.setenv("CRUDQL_DIALECTS", '{"demo1": "Oracle", "reports": "postgresql"}')
    monkeypatch.setenv("CRUDQL_ACL_RULES", '{"demo1": {"users": "read"}}')
    monkeypatch.setenv("CRUDQL_STRICT_FINDER_ARGUMENTS", "false")

    settings = CompilerSettings()
    assert settings.page_size == 50
    assert settings.page_size_max == 200
    assert settings.dialects == {"demo1": "oracle", "reports": "postgresql"}
    assert settings.acl_rules == {"demo1": {"users": "read"}}
    assert settings.strict_finder_arguments is False


def test_settings_drive_the_compiler(monkeypatch):
    monkeypatch.setenv("CRUDQL_DIALECTS", '{"demo1": "sqlserver"}')
    compiler = StatementCompiler.from_settings(CompilerSettings())
    assert compiler.dialect_for("demo1").dialect_name == "mssql"
    assert compiler.paging.page_size == CompilerSettings().page_size


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page_size": 0},
        {"page_size": 100, "page_size_max": 50},
    ],
)
def test_invalid_page_sizes(kwargs):
    with pytest.raises(ConfigurationError) as exc_info:
        CompilerSettings(**kwargs)
    assert exc_info.value.to_error_response()["error"] == "CONFIGURATION_ERROR"
