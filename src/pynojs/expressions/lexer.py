"""Tokenizer for directive expressions.

Splits an expression such as ``user.age >= 18 && !banned`` into tokens:

- NUMBER, STRING literals
- IDENT (identifiers; ``true``/``false``/``null``/``and``/``or``/``not``
  are promoted to KEYWORD)
- OP (comparison and boolean operators)
- SYMBOL (``(``, ``)``, ``.``)
- EOF
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from pynojs.exceptions import ExpressionSyntaxError


@dataclass(frozen=True, slots=True)
class Token:
    type: str
    value: str
    position: int


class ExpressionLexer:
    """Regex-driven lexer; the first matching pattern wins."""

    TOKEN_SPECS: tuple[tuple[str, str | None], ...] = (
        (r"\s+", None),
        (r"\d+(?:\.\d+)?", "NUMBER"),
        (r"'(?:[^'\\]|\\.)*'", "STRING"),
        (r'"(?:[^"\\]|\\.)*"', "STRING"),
        (r"==|!=|<=|>=|&&|\|\||[<>!]", "OP"),
        (r"[().]", "SYMBOL"),
        (r"[A-Za-z_$][\w$-]*", "IDENT"),
    )

    KEYWORDS = frozenset({"true", "false", "null", "and", "or", "not"})

    def __init__(self) -> None:
        self._compiled = [(re.compile(pattern), token_type) for pattern, token_type in self.TOKEN_SPECS]

    def tokenize(self, text: str) -> list[Token]:
        """Return the tokens of *text*, terminated by an EOF token.

        Raises
        ------
        ExpressionSyntaxError
            On a character no token spec accepts.
        """
        tokens: list[Token] = []
        position = 0
        while position < len(text):
            for pattern, token_type in self._compiled:
                match = pattern.match(text, position)
                if not match:
                    continue
                value = match.group(0)
                if token_type is not None:
                    if token_type == "IDENT" and value in self.KEYWORDS:
                        token_type = "KEYWORD"
                    tokens.append(Token(type=token_type, value=value, position=position))
                position = match.end()
                break
            else:
                raise ExpressionSyntaxError(
                    f"Unexpected character {text[position]!r}",
                    position=position,
                    expression=text,
                )
        tokens.append(Token(type="EOF", value="", position=position))
        return tokens
