"""Recursive-descent parser for dynamic finder descriptors.

Grammar::

    finder     := ("findBy" | "findAllBy") field_expr (("And" | "Or") field_expr)*
    field_expr := Word+ [ "Between" | "Like" | "Is" "Null" | "Is" "Not" "Null" ]

A suffix only counts as an operator when it ends the field expression
(it is followed by ``And``, ``Or`` or the end of the descriptor); anywhere
else a keyword is just another word of the field name, so ``findByIsActive``
filters on ``isactive``.  Field names are lower-cased.

Parsing is independent of argument values: :func:`parse_finder` yields a
:class:`FinderDescriptor` that knows how many values it needs, and
:meth:`FinderDescriptor.bind` turns it into a
:class:`~crudql.schema.statements.Select` once arguments are supplied.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import NoReturn

from crudql.errors import InvalidFinderError
from crudql.finder.lexer import FinderLexer, Token, TokenType
from crudql.schema.statements import (
    DEFAULT_PAGE_SIZE,
    Connector,
    GroupedPredicate,
    Limit,
    Operator,
    Order,
    Predicate,
    PredicateGroup,
    Select,
)
from crudql.schema.table import Table

logger = logging.getLogger(__name__)

_CONNECTORS = (TokenType.AND, TokenType.OR)
_END_OF_EXPR = (TokenType.AND, TokenType.OR, TokenType.EOF)


@dataclass(frozen=True)
class FieldExpr:
    """One parsed ``field [suffix]`` with the connector that precedes it."""

    column: str
    operator: Operator
    connector: Connector = Connector.AND


@dataclass(frozen=True)
class FinderDescriptor:
    """A parsed finder descriptor.

    Attributes:
        descriptor: The descriptor text as given.
        all_rows: ``True`` for ``findAllBy``, ``False`` for ``findBy``.
        fields: Field expressions in descriptor order.
    """

    descriptor: str
    all_rows: bool
    fields: tuple[FieldExpr, ...]

    @property
    def required_arguments(self) -> int:
        return sum(f.operator.arity for f in self.fields)

    def bind(
        self,
        table: Table,
        arguments: list[str],
        limit: Limit | None = None,
        order: Order | None = None,
        strict: bool = True,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> Select:
        """Assign positional ``arguments`` to the fields and build a Select.

        ``findBy`` always selects a single row (``Limit(start=0, rows=1)``);
        ``findAllBy`` uses ``limit`` or a first page of ``page_size`` rows.
        Without an explicit ``order`` rows are ordered by the primary key,
        ascending.

        Args:
            table: Table the finder runs against.
            arguments: Values consumed left to right.
            limit: Page for ``findAllBy``.
            order: Ordering; primary key ascending when ``None``.
            strict: Reject surplus arguments instead of ignoring them.
            page_size: Rows in the default ``findAllBy`` page; pass the
                configured page size when calling without ``limit``.

        Raises:
            InvalidFinderError: On too few (or, when strict, too many) arguments.
        """
        needed = self.required_arguments
        given = len(arguments)
        if given < needed or (strict and given > needed):
            raise InvalidFinderError(
                f"Finder '{self.descriptor}' takes {needed} argument(s), got {given}.",
                descriptor=self.descriptor,
                details={"expected": needed, "given": given},
            )
        if given > needed:
            logger.warning(
                "Finder %s ignores %d surplus argument(s)", self.descriptor, given - needed
            )

        items: list[GroupedPredicate] = []
        cursor = 0
        for field_expr in self.fields:
            arity = field_expr.operator.arity
            values = tuple(str(a) for a in arguments[cursor : cursor + arity])
            cursor += arity
            items.append(
                GroupedPredicate(
                    predicate=Predicate(
                        column=field_expr.column,
                        operator=field_expr.operator,
                        values=values,
                    ),
                    connector=field_expr.connector,
                )
            )

        if self.all_rows:
            page = limit if limit is not None else Limit(start=0, rows=page_size)
        else:
            page = Limit(start=0, rows=1)

        return Select(
            table=table,
            predicate_group=PredicateGroup(items=tuple(items)),
            limit=page,
            order=order if order is not None else Order.by_primary_key(table),
        )


class FinderParser:
    """Parses the token stream produced by :class:`FinderLexer`.

    Args:
        tokens: Tokens ending with an ``EOF`` token.
        descriptor: The descriptor text, for error messages.
    """

    def __init__(self, tokens: list[Token], descriptor: str) -> None:
        self.tokens = tokens
        self.descriptor = descriptor
        self.pos = 0

    def parse(self) -> FinderDescriptor:
        prefix = self._advance()
        all_rows = prefix.type is TokenType.FIND_ALL_BY

        fields = [self._field_expr(Connector.AND)]
        while self._check(*_CONNECTORS):
            connector = Connector.AND if self._advance().type is TokenType.AND else Connector.OR
            fields.append(self._field_expr(connector))

        if not self._check(TokenType.EOF):
            self._error(f"Unexpected '{self._current().value}'")

        parsed = FinderDescriptor(
            descriptor=self.descriptor, all_rows=all_rows, fields=tuple(fields)
        )
        logger.debug(
            "Parsed finder %s into %d field expression(s)", self.descriptor, len(fields)
        )
        return parsed

    # -------------------------------------------------------------------------
    # Field expressions
    # -------------------------------------------------------------------------

    def _field_expr(self, connector: Connector) -> FieldExpr:
        start = self._current()
        words: list[str] = []
        operator = Operator.EQUALS

        while not self._check(*_END_OF_EXPR):
            suffix = self._suffix()
            if suffix is not None:
                operator = suffix
                break
            words.append(self._advance().value)

        if not words:
            self._error("Missing field name", start)

        return FieldExpr(column="".join(words).lower(), operator=operator, connector=connector)

    def _suffix(self) -> Operator | None:
        """Consume an operator suffix if one ends the expression here."""
        if self._check(TokenType.BETWEEN, TokenType.LIKE) and self._peek().type in _END_OF_EXPR:
            token = self._advance()
            return Operator.BETWEEN if token.type is TokenType.BETWEEN else Operator.LIKE
        if self._check(TokenType.IS):
            if self._peek().type is TokenType.NULL and self._peek(2).type in _END_OF_EXPR:
                self._advance()
                self._advance()
                return Operator.IS_NULL
            if (
                self._peek().type is TokenType.NOT
                and self._peek(2).type is TokenType.NULL
                and self._peek(3).type in _END_OF_EXPR
            ):
                self._advance()
                self._advance()
                self._advance()
                return Operator.IS_NOT_NULL
        return None

    # -------------------------------------------------------------------------
    # Token helpers
    # -------------------------------------------------------------------------

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return self.tokens[-1]

    def _check(self, *types: TokenType) -> bool:
        return self._current().type in types

    def _advance(self) -> Token:
        token = self._current()
        if not self._check(TokenType.EOF):
            self.pos += 1
        return token

    def _error(self, message: str, token: Token | None = None) -> NoReturn:
        token = token or self._current()
        raise InvalidFinderError(
            f"{message} in finder '{self.descriptor}' at position {token.position}.",
            descriptor=self.descriptor,
            details={"position": token.position},
        )


def parse_finder(descriptor: str) -> FinderDescriptor:
    """Tokenize and parse ``descriptor``.

    Raises:
        InvalidFinderError: If the descriptor does not follow the grammar.
    """
    tokens = FinderLexer(descriptor).tokenize()
    return FinderParser(tokens, descriptor).parse()
