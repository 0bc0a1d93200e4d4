"""Switch/case display for ``[switch]`` with ``[case]``/``[default]`` children."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pynojs._constants import CASE, DEFAULT, SWITCH, marker
from pynojs.host.base import Node
from pynojs.templates.substitution import format_value

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


def case_matches(case_value: str, switch_value: Any) -> bool:
    """Compare a ``[case]`` attribute with the switch value by string form."""
    if switch_value is None:
        return False
    return case_value.strip() == format_value(switch_value, autoescape=False)


def apply_switch(processor: DirectiveProcessor, node: Node) -> Node | None:
    """Show the matching case (or the default) and hide the other children.

    Returns the visible child, if any.
    """
    host = processor.host
    expression = host.get_attribute(node, marker(SWITCH))
    value = processor.evaluator.evaluate_expression(expression)

    visible: Node | None = None
    default: Node | None = None
    for child in host.element_children(node):
        case_value = host.get_attribute(child, marker(CASE))
        if visible is None and case_value is not None and case_matches(case_value, value):
            visible = child
            processor.show(child)
        elif default is None and host.has_attribute(child, marker(DEFAULT)):
            default = child
        else:
            processor.hide(child)

    if default is not None:
        if visible is None:
            visible = default
            processor.show(default)
        else:
            processor.hide(default)
    _logger.debug("Switch %r = %r", expression, value)
    return visible


def scan_switches(processor: DirectiveProcessor, root: Node | None) -> None:
    for node in processor.host.query(root, marker(SWITCH)):
        apply_switch(processor, node)
