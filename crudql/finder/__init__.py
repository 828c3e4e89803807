"""Dynamic finder descriptors (``findAllByNameAndAgeBetween``)."""
from crudql.finder.lexer import FinderLexer, Token, TokenType
from crudql.finder.parser import FieldExpr, FinderDescriptor, FinderParser, parse_finder

__all__ = [
    "FieldExpr",
    "FinderDescriptor",
    "FinderLexer",
    "FinderParser",
    "Token",
    "TokenType",
    "parse_finder",
]
