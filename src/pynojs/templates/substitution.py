"""Placeholder substitution.

Placeholders take the form ``{name.key}`` or ``{name}``. ``name`` must be
one of the bound variable names; ``key`` is any run of characters other
than ``}`` and is looked up one level deep: ``{result.a.b}`` reads the key
``"a.b"`` from the bound object, it does not walk ``a`` then ``b``.
Placeholders that cannot be resolved are left verbatim.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from typing import Any

_MISSING = object()


def _lookup(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key, _MISSING)
    if key.startswith("_"):
        return _MISSING
    return getattr(obj, key, _MISSING)


def format_value(value: Any, *, autoescape: bool = True) -> str:
    """Render *value* as template text."""
    if value is None:
        text = ""
    elif value is True:
        text = "true"
    elif value is False:
        text = "false"
    else:
        text = str(value)
    return html.escape(text, quote=True) if autoescape else text


def build_pattern(names: list[str] | tuple[str, ...]) -> re.Pattern[str]:
    """Compile one regex matching ``{name}`` / ``{name.path}`` for all *names*."""
    alternatives = "|".join(re.escape(name) for name in sorted(names, key=len, reverse=True))
    return re.compile(r"\{(" + alternatives + r")(?:\.([^}]+))?\}")


def substitute(content: str, bindings: Mapping[str, Any], *, autoescape: bool = True) -> str:
    """Replace placeholders in *content* with values from *bindings*.

    Parameters
    ----------
    content : str
        Raw markup.
    bindings : Mapping[str, Any]
        Variable name to bound object (a template's result, a loop item,
        a loop index).
    autoescape : bool
        HTML-escape substituted values.
    """
    if not bindings or "{" not in content:
        return content
    pattern = build_pattern(tuple(bindings))

    def _replace(match: re.Match[str]) -> str:
        name, path = match.group(1), match.group(2)
        bound = bindings[name]
        if path is None:
            # A bare {name} only renders scalar bindings such as loop indexes.
            value = _MISSING if isinstance(bound, Mapping) else bound
        else:
            value = _lookup(bound, path)
        if value is _MISSING:
            return match.group(0)
        return format_value(value, autoescape=autoescape)

    return pattern.sub(_replace, content)
