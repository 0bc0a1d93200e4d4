"""Typed descriptors for JSON-valued directives.

``[class]`` and ``[styles]`` carry small JSON documents. They are parsed
into frozen models once per distinct attribute text and cached, so a
second pass over the same markup never re-parses.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pynojs._constants import CLASS, STYLES
from pynojs.exceptions import DirectiveParseError

Guard = bool | int | float | str | None


class ClassRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    guard: Guard = True


class ClassDirective(BaseModel):
    """``[class]``: a fixed class string or ``{"name": guard, ...}``."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[ClassRule, ...] = ()


class StyleRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    guard: str
    properties: dict[str, str] = Field(default_factory=dict)


class StyleDirective(BaseModel):
    """``[styles]``: ``{"guard expression": {"property": "value"}, ...}``."""

    model_config = ConfigDict(frozen=True)

    rules: tuple[StyleRule, ...] = ()


def _load_json(directive: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DirectiveParseError(f"Invalid JSON in [{directive}]: {exc}", directive=directive, raw=raw) from exc


def parse_class_directive(raw: str) -> ClassDirective:
    data = _load_json(CLASS, raw)
    if isinstance(data, str):
        return ClassDirective(rules=tuple(ClassRule(name=name) for name in data.split()))
    if not isinstance(data, dict):
        raise DirectiveParseError(
            f"[class] must be a JSON string or object, got {type(data).__name__}",
            directive=CLASS,
            raw=raw,
        )
    try:
        return ClassDirective(rules=tuple(ClassRule(name=name, guard=guard) for name, guard in data.items()))
    except ValidationError as exc:
        raise DirectiveParseError(f"Invalid [class] guard: {exc}", directive=CLASS, raw=raw) from exc


def parse_style_directive(raw: str) -> StyleDirective:
    data = _load_json(STYLES, raw)
    if not isinstance(data, dict):
        raise DirectiveParseError(
            f"[styles] must be a JSON object, got {type(data).__name__}",
            directive=STYLES,
            raw=raw,
        )
    rules: list[StyleRule] = []
    for guard, properties in data.items():
        if not isinstance(properties, dict):
            raise DirectiveParseError(
                f"[styles] entry {guard!r} must map to an object of style properties",
                directive=STYLES,
                raw=raw,
            )
        rules.append(StyleRule(guard=guard, properties={str(k): str(v) for k, v in properties.items()}))
    return StyleDirective(rules=tuple(rules))


class DescriptorCache:
    """Parse-once cache keyed by ``(directive, raw text)``.

    Parse failures are cached too; a malformed attribute raises the same
    error on every pass without being parsed again.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, str], ClassDirective | StyleDirective | DirectiveParseError] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def class_directive(self, raw: str) -> ClassDirective:
        return self._get(CLASS, raw)  # type: ignore[return-value]

    def style_directive(self, raw: str) -> StyleDirective:
        return self._get(STYLES, raw)  # type: ignore[return-value]

    def _get(self, directive: str, raw: str) -> ClassDirective | StyleDirective:
        key = (directive, raw)
        entry = self._entries.get(key)
        if entry is None:
            try:
                entry = parse_class_directive(raw) if directive == CLASS else parse_style_directive(raw)
            except DirectiveParseError as exc:
                entry = exc
            self._entries[key] = entry
        if isinstance(entry, DirectiveParseError):
            raise entry
        return entry
