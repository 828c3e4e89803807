"""Paging and access-control policy."""
from crudql.policy.access import AccessControlEvaluator, AccessPolicy, Operation, parse_rule
from crudql.policy.engine import PagingPolicy

__all__ = [
    "AccessControlEvaluator",
    "AccessPolicy",
    "Operation",
    "PagingPolicy",
    "parse_rule",
]
