"""Sandboxed expression language used by directives."""

from pynojs.expressions.evaluator import ExpressionEvaluator
from pynojs.expressions.lexer import ExpressionLexer, Token
from pynojs.expressions.parser import ExpressionParser

__all__ = ["ExpressionEvaluator", "ExpressionLexer", "ExpressionParser", "Token"]
