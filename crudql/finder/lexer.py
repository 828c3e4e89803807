"""Tokenizer for dynamic finder descriptors.

A descriptor such as ``findAllByNameAndAgeBetween`` is split into a prefix
token followed by one token per capitalised word::

    FIND_ALL_BY  WORD(Name)  AND  WORD(Age)  BETWEEN  EOF

Words that spell a keyword of the finder grammar (``And``, ``Or``,
``Between``, ``Like``, ``Is``, ``Not``, ``Null``) get their own token type;
whether a keyword acts as one or is part of a field name is decided by the
parser, which can look ahead.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from crudql.errors import InvalidFinderError


class TokenType(Enum):
    FIND_BY = auto()
    FIND_ALL_BY = auto()
    WORD = auto()
    AND = auto()
    OR = auto()
    BETWEEN = auto()
    LIKE = auto()
    IS = auto()
    NOT = auto()
    NULL = auto()
    EOF = auto()


@dataclass(frozen=True)
class Token:
    """A lexical token.

    Attributes:
        type: Token type.
        value: The text of the token.
        position: Offset of the token in the descriptor.
    """

    type: TokenType
    value: str
    position: int


# Longest prefix first: "findAllBy" must not lex as "findBy" + garbage.
PREFIXES: tuple[tuple[str, TokenType], ...] = (
    ("findAllBy", TokenType.FIND_ALL_BY),
    ("findBy", TokenType.FIND_BY),
)

KEYWORDS: dict[str, TokenType] = {
    "And": TokenType.AND,
    "Or": TokenType.OR,
    "Between": TokenType.BETWEEN,
    "Like": TokenType.LIKE,
    "Is": TokenType.IS,
    "Not": TokenType.NOT,
    "Null": TokenType.NULL,
}

_WORD = re.compile(r"[A-Z][a-z0-9_]*")
_VALID_BODY = re.compile(r"[A-Za-z0-9_]*")


class FinderLexer:
    """Splits a finder descriptor into tokens.

    Args:
        descriptor: The finder descriptor (e.g. ``findByName``).
    """

    def __init__(self, descriptor: str) -> None:
        self.descriptor = descriptor

    def tokenize(self) -> list[Token]:
        """Tokenize the descriptor.

        Raises:
            InvalidFinderError: If the prefix is missing or the body contains
                characters other than letters, digits and underscores.
        """
        text = self.descriptor or ""
        prefix = self._read_prefix(text)
        tokens = [prefix]
        pos = len(prefix.value)

        body = text[pos:]
        if not _VALID_BODY.fullmatch(body):
            raise InvalidFinderError(
                f"Finder '{text}' contains characters other than letters, digits and '_'.",
                descriptor=text,
                details={"position": pos},
            )
        if body and not body[0].isupper():
            raise InvalidFinderError(
                f"Finder '{text}' must continue with a capitalised field name after "
                f"'{prefix.value}'.",
                descriptor=text,
                details={"position": pos},
            )

        for match in _WORD.finditer(body):
            word = match.group(0)
            tokens.append(
                Token(KEYWORDS.get(word, TokenType.WORD), word, pos + match.start())
            )
        tokens.append(Token(TokenType.EOF, "", len(text)))
        return tokens

    def _read_prefix(self, text: str) -> Token:
        for prefix, token_type in PREFIXES:
            if text.startswith(prefix):
                return Token(token_type, prefix, 0)
        raise InvalidFinderError(
            f"Finder '{text}' must start with 'findBy' or 'findAllBy'.",
            descriptor=text,
        )
