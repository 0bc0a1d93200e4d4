"""Class, style and animation directives.

``[class]`` replaces the node's class list with the classes whose guard
holds. ``[styles]`` applies each style map whose guard holds and clears
the properties of those whose guard fails. ``[animate]`` writes the
animation shorthand properties.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pynojs._constants import (
    ANIMATE,
    CLASS,
    DEFAULT_ANIMATION_DURATION,
    DEFAULT_ANIMATION_TIMING,
    DURATION,
    STYLES,
    TIMING,
    marker,
)
from pynojs.directives.descriptors import Guard
from pynojs.exceptions import DirectiveParseError
from pynojs.host.base import Node

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


def _guard_holds(processor: DirectiveProcessor, guard: Guard) -> bool:
    if isinstance(guard, str):
        return processor.evaluator.evaluate_condition(guard)
    return bool(guard)


def compute_classes(processor: DirectiveProcessor, raw: str) -> list[str]:
    """Class names selected by a ``[class]`` value.

    Raises
    ------
    DirectiveParseError
        If *raw* is not a JSON string or object.
    """
    directive = processor.descriptors.class_directive(raw)
    return [rule.name for rule in directive.rules if _guard_holds(processor, rule.guard)]


def scan_classes(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(CLASS)):
        raw = host.get_attribute(node, marker(CLASS)) or ""
        try:
            classes = compute_classes(processor, raw)
        except DirectiveParseError as exc:
            _logger.warning("Error evaluating class expression %r: %s", raw, exc)
            continue
        host.set_classes(node, classes)


def scan_styles(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(STYLES)):
        raw = host.get_attribute(node, marker(STYLES)) or ""
        try:
            directive = processor.descriptors.style_directive(raw)
        except DirectiveParseError as exc:
            _logger.warning("Error evaluating styles expression %r: %s", raw, exc)
            continue
        style = host.get_style(node)
        for rule in directive.rules:
            if processor.evaluator.evaluate_condition(rule.guard):
                style.update(rule.properties)
            else:
                for name in rule.properties:
                    style[name] = ""
        host.set_style(node, style)


def scan_animations(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(ANIMATE)):
        style = host.get_style(node)
        style["animation-name"] = host.get_attribute(node, marker(ANIMATE)) or ""
        style["animation-duration"] = host.get_attribute(node, marker(DURATION)) or DEFAULT_ANIMATION_DURATION
        style["animation-timing-function"] = host.get_attribute(node, marker(TIMING)) or DEFAULT_ANIMATION_TIMING
        host.set_style(node, style)
