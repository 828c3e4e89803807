"""Access-control rules for database aliases and their resources.

Rules are strings: ``all``, ``none``, or a comma-separated list of
operations (``read``, ``create``, ``update``, ``delete``).  A rule on a
resource replaces the alias-wide rule for that resource; with neither,
everything is allowed.

The compiler never consults these rules.  The REST layer calls
:meth:`AccessControlEvaluator.is_allowed` before asking for SQL::

    evaluator = AccessControlEvaluator(AccessPolicy(
        aliases={"demo1": "read"},
        resources={"demo1": {"users": "read,update"}},
    ))
    evaluator.is_allowed("demo1", "users", Operation.UPDATE)    # True
    evaluator.is_allowed("demo1", "orders", Operation.DELETE)   # False
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from crudql.config import CompilerSettings

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


ALL = "all"
NONE = "none"


def parse_rule(rule: str | None) -> frozenset[Operation]:
    """Return the operations a rule string allows.

    Unknown operation names are ignored with a warning; an empty or missing
    rule allows everything.
    """
    if rule is None or not rule.strip():
        return frozenset(Operation)
    allowed: set[Operation] = set()
    for part in rule.split(","):
        token = part.strip().lower()
        if token == ALL:
            return frozenset(Operation)
        if token == NONE:
            return frozenset()
        try:
            allowed.add(Operation(token))
        except ValueError:
            logger.warning("Ignoring unknown operation '%s' in ACL rule '%s'", token, rule)
    return frozenset(allowed)


@dataclass
class AccessPolicy:
    """Access rules per alias and per resource.

    Attributes:
        aliases: Alias-wide rule, keyed by alias.
        resources: Resource rules, keyed by alias then resource.
    """

    aliases: dict[str, str] = field(default_factory=dict)
    resources: dict[str, dict[str, str]] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, settings: CompilerSettings) -> AccessPolicy:
        return cls(aliases=dict(settings.acl), resources=dict(settings.acl_rules))

    def rule_for(self, alias: str, resource: str | None = None) -> str | None:
        """Return the effective rule string, resource rule first."""
        if resource is not None:
            rule = self.resources.get(alias, {}).get(resource)
            if rule is not None:
                return rule
        return self.aliases.get(alias)


class AccessControlEvaluator:
    """Answers whether an operation on a resource is permitted.

    Args:
        policy: The rules to evaluate.
    """

    def __init__(self, policy: AccessPolicy) -> None:
        self._policy = policy

    def allowed_operations(self, alias: str, resource: str | None = None) -> frozenset[Operation]:
        return parse_rule(self._policy.rule_for(alias, resource))

    def is_allowed(self, alias: str, resource: str | None, operation: Operation | str) -> bool:
        op = Operation(operation.lower()) if isinstance(operation, str) else operation
        return op in self.allowed_operations(alias, resource)
