"""Conditional chains: ``[if]`` followed by ``[elseif]`` siblings and an
optional fallback ``[else]`` sibling.

A branch matches when its guard holds and it names a ``[then]`` template;
the first match in document order wins and guards after it are never
evaluated. Any other branch renders its inline ``[else]`` template if
present, otherwise it is hidden. Inline ``[else]`` output is provisional:
once a later branch or the fallback takes over, it is hidden again, so one
branch is visible per chain.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pynojs._constants import ELSE, ELSEIF, FOREACH, IF, THEN, marker
from pynojs.host.base import Node

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


class _Chain:
    def __init__(self, processor: DirectiveProcessor) -> None:
        self.processor = processor
        self.matched = False
        self.provisional: list[Node] = []

    def _take_over(self) -> None:
        for node in self.provisional:
            self.processor.hide(node)
        self.provisional.clear()

    def branch(self, node: Node, guard_marker: str) -> None:
        host = self.processor.host
        guard = host.get_attribute(node, guard_marker)
        condition = self.processor.evaluator.evaluate_condition(guard)
        then_id = host.get_attribute(node, marker(THEN))
        else_id = host.get_attribute(node, marker(ELSE))

        if condition and then_id:
            _logger.debug("Condition %r matched", guard)
            self._take_over()
            self.matched = True
            self.processor.render_into(then_id, {"condition": condition}, node)
            self.processor.show(node)
        elif else_id and self.processor.render_into(else_id, {"condition": condition}, node):
            self.provisional.append(node)
        else:
            self.processor.hide(node)

    def fallback(self, node: Node) -> None:
        if self.matched:
            self.processor.hide(node)
            return
        self._take_over()
        template_id = self.processor.host.get_attribute(node, marker(ELSE))
        if template_id:
            self.processor.render_into(template_id, {"condition": False}, node)
        self.processor.show(node)


def _is_fallback(processor: DirectiveProcessor, node: Node) -> bool:
    host = processor.host
    # Loops reuse [else] for their empty-list template.
    return host.has_attribute(node, marker(ELSE)) and not any(
        host.has_attribute(node, marker(name)) for name in (IF, ELSEIF, FOREACH)
    )


def run_chain(processor: DirectiveProcessor, primary: Node) -> bool:
    """Evaluate the chain starting at *primary*; return whether a branch matched."""
    host = processor.host
    chain = _Chain(processor)
    chain.branch(primary, marker(IF))

    sibling = host.next_element_sibling(primary)
    while sibling is not None and host.has_attribute(sibling, marker(ELSEIF)):
        if chain.matched:
            processor.hide(sibling)
        else:
            chain.branch(sibling, marker(ELSEIF))
        sibling = host.next_element_sibling(sibling)

    if sibling is not None and _is_fallback(processor, sibling):
        chain.fallback(sibling)
    return chain.matched


def scan_conditionals(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(IF)):
        if not host.is_attached(node):
            continue
        run_chain(processor, node)
