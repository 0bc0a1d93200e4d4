"""Recursive-descent parser for directive expressions.

Grammar::

    expression  -> or_expr
    or_expr     -> and_expr (("||" | "or") and_expr)*
    and_expr    -> not_expr (("&&" | "and") not_expr)*
    not_expr    -> ("!" | "not") not_expr | comparison
    comparison  -> primary (("==" | "!=" | "<" | "<=" | ">" | ">=") primary)?
    primary     -> literal | path | "(" expression ")"
    path        -> IDENT ("." (IDENT | NUMBER))*

There are no calls, subscripts or arithmetic: an expression can read
values and compare them, nothing else.
"""

from __future__ import annotations

import ast
from typing import NoReturn

from pynojs.exceptions import ExpressionSyntaxError
from pynojs.expressions.lexer import ExpressionLexer, Token
from pynojs.expressions.model import Binary, Expression, Literal, Not, Operator, Path

_COMPARISONS: dict[str, Operator] = {
    "==": Operator.EQ,
    "!=": Operator.NE,
    "<": Operator.LT,
    "<=": Operator.LE,
    ">": Operator.GT,
    ">=": Operator.GE,
}

_KEYWORD_LITERALS = {"true": True, "false": False, "null": None}


class ExpressionParser:
    def __init__(self) -> None:
        self._lexer = ExpressionLexer()
        self._text = ""
        self._tokens: list[Token] = []
        self._position = 0

    def parse(self, text: str) -> Expression:
        """Parse *text* into an AST.

        Raises
        ------
        ExpressionSyntaxError
            On empty input, unknown characters or unexpected tokens.
        """
        self._text = text
        self._tokens = self._lexer.tokenize(text)
        self._position = 0

        if self._current().type == "EOF":
            raise ExpressionSyntaxError("Empty expression", position=0, expression=text)

        result = self._parse_or()
        if self._current().type != "EOF":
            self._fail(f"Unexpected token {self._current().value!r}")
        return result

    def _parse_or(self) -> Expression:
        left = self._parse_and()
        while self._match("OP", "||") or self._match("KEYWORD", "or"):
            left = Binary(Operator.OR, left, self._parse_and())
        return left

    def _parse_and(self) -> Expression:
        left = self._parse_not()
        while self._match("OP", "&&") or self._match("KEYWORD", "and"):
            left = Binary(Operator.AND, left, self._parse_not())
        return left

    def _parse_not(self) -> Expression:
        if self._match("OP", "!") or self._match("KEYWORD", "not"):
            return Not(self._parse_not())
        return self._parse_comparison()

    def _parse_comparison(self) -> Expression:
        left = self._parse_primary()
        token = self._current()
        if token.type == "OP" and token.value in _COMPARISONS:
            self._position += 1
            return Binary(_COMPARISONS[token.value], left, self._parse_primary())
        return left

    def _parse_primary(self) -> Expression:
        token = self._current()

        if self._match("SYMBOL", "("):
            inner = self._parse_or()
            if not self._match("SYMBOL", ")"):
                self._fail("Expected ')'")
            return inner

        if token.type == "NUMBER":
            self._position += 1
            return Literal(float(token.value) if "." in token.value else int(token.value))

        if token.type == "STRING":
            self._position += 1
            return Literal(ast.literal_eval(token.value))

        if token.type == "KEYWORD" and token.value in _KEYWORD_LITERALS:
            self._position += 1
            return Literal(_KEYWORD_LITERALS[token.value])

        if token.type == "IDENT":
            return self._parse_path()

        if token.type == "EOF":
            self._fail("Unexpected end of expression")
        self._fail(f"Unexpected token {token.value!r}")

    def _parse_path(self) -> Path:
        start = self._current()
        segments = [start.value]
        self._position += 1
        while self._match("SYMBOL", "."):
            token = self._current()
            if token.type not in ("IDENT", "NUMBER", "KEYWORD"):
                self._fail("Expected name after '.'")
            segments.append(token.value)
            self._position += 1
        return Path(segments=tuple(segments), raw=".".join(segments))

    def _current(self) -> Token:
        return self._tokens[min(self._position, len(self._tokens) - 1)]

    def _match(self, token_type: str, value: str) -> bool:
        token = self._current()
        if token.type == token_type and token.value == value:
            self._position += 1
            return True
        return False

    def _fail(self, message: str) -> NoReturn:
        raise ExpressionSyntaxError(message, position=self._current().position, expression=self._text)
