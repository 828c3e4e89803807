"""crudQL schema models: table metadata and the statement model."""
from crudql.schema.statements import (
    Connector,
    Delete,
    Direction,
    GroupedPredicate,
    Insert,
    Limit,
    Operator,
    Order,
    Predicate,
    PredicateGroup,
    ProcedureParam,
    Select,
    Statement,
    StoredProcedureCall,
    Update,
)
from crudql.schema.table import Column, Table

__all__ = [
    "Column",
    "Table",
    "Connector",
    "Delete",
    "Direction",
    "GroupedPredicate",
    "Insert",
    "Limit",
    "Operator",
    "Order",
    "Predicate",
    "PredicateGroup",
    "ProcedureParam",
    "Select",
    "Statement",
    "StoredProcedureCall",
    "Update",
]
