"""Helpers for safe debug logging.

Form submissions and API payloads routinely carry secrets (passwords,
card numbers, tokens). This module redacts sensitive fields before they
are emitted in DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "pin",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "authorization",
        "cookie",
        "apikey",
        "api_key",
        "creditcard",
        "cardnumber",
        "cvv",
    }
)


def _is_sensitive(key: str) -> bool:
    normalized = key.lower().replace("-", "").replace("_", "")
    return normalized in _SENSITIVE_VALUE_KEYS or key.lower() in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > 20:
        return "<max-depth>"

    if value is None:
        return None

    if isinstance(value, str):
        if len(value) > max_string:
            return f"{value[:max_string]}…<truncated>"
        return value

    if isinstance(value, (int, float, bool)):
        return value

    if isinstance(value, bytes):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        redacted: dict[str, Any] = {}
        for k, v in value.items():
            key = str(k)
            if _is_sensitive(key):
                redacted[key] = "<redacted>"
            else:
                redacted[key] = redact_for_log(v, max_string=max_string, _depth=_depth + 1)
        return redacted

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
