"""Input validation rules for ``[validate]``.

Built-in kinds match the whole value. A ``[format]`` override is a
regular expression searched in the value, except for ``minLength`` and
``maxLength`` where it is the length bound.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum

_logger = logging.getLogger(__name__)


class ValidationKind(StrEnum):
    EMAIL = "email"
    SECURE_PASSWORD = "securePassword"
    PHONE = "phone"
    URL = "url"
    DATE = "date"
    NUMBER = "number"
    POSTAL_CODE = "postalCode"
    CREDIT_CARD = "creditCard"
    ALPHANUMERIC = "alphanumeric"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    CUSTOM_PATTERN = "customPattern"


_BUILTIN_PATTERNS: dict[ValidationKind, re.Pattern[str]] = {
    ValidationKind.EMAIL: re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"),
    ValidationKind.SECURE_PASSWORD: re.compile(
        r"(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}"
    ),
    ValidationKind.PHONE: re.compile(r"\d{10}"),
    ValidationKind.URL: re.compile(r"(https?://)?[\da-z.-]+\.[a-z.]{2,6}[/\w .-]*/?"),
    ValidationKind.DATE: re.compile(r"\d{4}-\d{2}-\d{2}"),
    ValidationKind.NUMBER: re.compile(r"\d+"),
    ValidationKind.POSTAL_CODE: re.compile(r"\d{5}"),
    ValidationKind.CREDIT_CARD: re.compile(r"[0-9]{13,19}"),
    ValidationKind.ALPHANUMERIC: re.compile(r"[a-zA-Z0-9]+"),
}

#: Kinds whose built-in pattern a ``[format]`` attribute may replace.
_OVERRIDABLE = frozenset(
    {
        ValidationKind.PHONE,
        ValidationKind.DATE,
        ValidationKind.NUMBER,
        ValidationKind.POSTAL_CODE,
    }
)


def _search(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error as exc:
        _logger.warning("Invalid validation pattern %r: %s", pattern, exc)
        return False


def _length_bound(fmt: str | None) -> int | None:
    if fmt is None:
        return None
    try:
        return int(fmt.strip())
    except ValueError:
        return None


def validate(kind: str, value: str, fmt: str | None = None) -> bool:
    """Return whether *value* satisfies validation *kind*.

    Unknown kinds always pass.
    """
    try:
        rule = ValidationKind(kind)
    except ValueError:
        return True

    if rule in (ValidationKind.MIN_LENGTH, ValidationKind.MAX_LENGTH):
        bound = _length_bound(fmt)
        if bound is None:
            _logger.warning("%s needs a numeric [format], got %r", kind, fmt)
            return False
        return len(value) >= bound if rule == ValidationKind.MIN_LENGTH else len(value) <= bound

    if rule == ValidationKind.CUSTOM_PATTERN:
        return True if not fmt else _search(fmt, value)

    if fmt and rule in _OVERRIDABLE:
        return _search(fmt, value)

    return _BUILTIN_PATTERNS[rule].fullmatch(value) is not None
