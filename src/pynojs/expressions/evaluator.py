"""Expression evaluation against a :class:`StateStore`.

Lookup order for every name: the state store (full dotted key first,
then the leading segment followed by a walk through the remaining
segments), then the explicit fallback namespace the host passed in.
Nothing else is reachable from an expression.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from pynojs.exceptions import ExpressionError
from pynojs.expressions.model import Binary, Expression, Literal, Not, Operator, Path
from pynojs.expressions.parser import ExpressionParser
from pynojs.state.store import StateStore

_logger = logging.getLogger(__name__)

_MISSING = object()


def _walk(value: Any, segments: Sequence[str]) -> Any:
    """Follow *segments* through mappings, sequences and public attributes."""
    for segment in segments:
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(segment)
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and segment.isdigit():
            index = int(segment)
            value = value[index] if index < len(value) else None
        elif segment.startswith("_"):
            return None
        else:
            value = getattr(value, segment, None)
    return value


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _equal(left: Any, right: Any) -> bool:
    if left == right:
        return True
    # Attribute text is always a string; let "2" match 2.
    if isinstance(left, str) != isinstance(right, str):
        left_num, right_num = _as_number(left), _as_number(right)
        return left_num is not None and left_num == right_num
    return False


def _order(operator: Operator, left: Any, right: Any) -> bool:
    try:
        if operator == Operator.LT:
            return left < right
        if operator == Operator.LE:
            return left <= right
        if operator == Operator.GT:
            return left > right
        return left >= right
    except TypeError:
        left_num, right_num = _as_number(left), _as_number(right)
        if left_num is None or right_num is None:
            raise ExpressionError(
                f"Cannot compare {type(left).__name__} and {type(right).__name__}"
            ) from None
        return _order(operator, left_num, right_num)


class ExpressionEvaluator:
    """Resolve directive expressions against the state store.

    Parameters
    ----------
    store : StateStore
        Primary source of values.
    namespace : Mapping[str, Any] or None
        Explicit fallback names, consulted only when the store has no
        entry for a path.
    """

    def __init__(self, store: StateStore, namespace: Mapping[str, Any] | None = None) -> None:
        self._store = store
        self._namespace: Mapping[str, Any] = namespace or {}
        self._parser = ExpressionParser()
        self._cache: dict[str, Expression] = {}

    @property
    def store(self) -> StateStore:
        return self._store

    def parse(self, expression: str) -> Expression:
        """Parse *expression*, caching the AST per distinct text."""
        cached = self._cache.get(expression)
        if cached is None:
            cached = self._parser.parse(expression)
            self._cache[expression] = cached
        return cached

    def evaluate_condition(self, expression: str | None) -> bool:
        """Return the truthiness of *expression*; ``False`` on any failure."""
        if not expression or not isinstance(expression, str):
            return False
        try:
            if self._store.get_state(expression):
                return True
            return bool(self._eval(self.parse(expression.strip())))
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Error evaluating condition %r: %s", expression, exc)
            return False

    def evaluate_expression(self, expression: str | None) -> Any:
        """Return the value of *expression*, or ``None`` on any failure.

        A value present in the store under the exact expression text wins,
        even when it is falsy.
        """
        if not expression or not isinstance(expression, str):
            return None
        try:
            if self._store.has_state(expression):
                return self._store.get_state(expression)
            return self._eval(self.parse(expression.strip()))
        except Exception as exc:  # noqa: BLE001
            _logger.warning("Error evaluating expression %r: %s", expression, exc)
            return None

    def resolve_path(self, path: Path) -> Any:
        value = self._lookup(self._store.has_state, self._store.get_state, path)
        if value is not _MISSING:
            return value
        value = self._lookup(self._namespace.__contains__, self._namespace.get, path)
        return None if value is _MISSING else value

    @staticmethod
    def _lookup(contains: Callable[[str], bool], get: Callable[[str], Any], path: Path) -> Any:
        if contains(path.raw):
            return get(path.raw)
        head, rest = path.segments[0], path.segments[1:]
        if rest and contains(head):
            return _walk(get(head), rest)
        return _MISSING

    def _eval(self, node: Expression) -> Any:
        if isinstance(node, Literal):
            return node.value
        if isinstance(node, Path):
            return self.resolve_path(node)
        if isinstance(node, Not):
            return not self._eval(node.operand)
        if isinstance(node, Binary):
            if node.operator == Operator.AND:
                left = self._eval(node.left)
                return self._eval(node.right) if left else left
            if node.operator == Operator.OR:
                left = self._eval(node.left)
                return left if left else self._eval(node.right)
            left, right = self._eval(node.left), self._eval(node.right)
            if node.operator == Operator.EQ:
                return _equal(left, right)
            if node.operator == Operator.NE:
                return not _equal(left, right)
            return _order(node.operator, left, right)
        raise ExpressionError(f"Unknown expression node: {type(node).__name__}")
