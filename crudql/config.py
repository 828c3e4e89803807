"""Runtime settings for the statement compiler.

Values come from keyword arguments or ``CRUDQL_*`` environment variables.
Mapping-valued settings are read from the environment as JSON::

    CRUDQL_PAGE_SIZE=50
    CRUDQL_DIALECTS='{"demo1": "oracle", "reports": "postgresql"}'
    CRUDQL_ACL='{"demo1": "read"}'
    CRUDQL_ACL_RULES='{"demo1": {"users": "all"}}'
"""
from __future__ import annotations

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from crudql.errors import ConfigurationError


class CompilerSettings(BaseSettings):
    """Paging defaults, alias to dialect wiring and access rules."""

    model_config = SettingsConfigDict(env_prefix="CRUDQL_", env_nested_delimiter="__", extra="ignore")

    page_size: int = Field(default=25, description="Rows per page when the caller gives no limit.")
    page_size_max: int = Field(default=500, description="Hard cap on rows per page.")
    dialects: dict[str, str] = Field(
        default_factory=dict,
        description="Database alias to dialect name (e.g. 'oracle', 'postgresql').",
    )
    acl: dict[str, str] = Field(
        default_factory=dict,
        description="Alias-wide access rule: 'all', 'none' or a list such as 'read,create'.",
    )
    acl_rules: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Per-resource access rules, keyed by alias then resource.",
    )
    strict_finder_arguments: bool = Field(
        default=True,
        description="Reject dynamic finder calls that pass more arguments than they use.",
    )

    @field_validator("dialects", mode="after")
    @classmethod
    def _normalise_dialects(cls, value: dict[str, str]) -> dict[str, str]:
        return {alias.strip(): name.strip().lower() for alias, name in value.items()}

    @model_validator(mode="after")
    def _check_page_sizes(self) -> CompilerSettings:
        if self.page_size < 1:
            raise ConfigurationError(
                f"page_size must be at least 1, got {self.page_size}.",
                details={"page_size": self.page_size},
            )
        if self.page_size_max < self.page_size:
            raise ConfigurationError(
                f"page_size_max ({self.page_size_max}) is smaller than page_size ({self.page_size}).",
                details={"page_size": self.page_size, "page_size_max": self.page_size_max},
            )
        return self
