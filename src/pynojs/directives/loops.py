"""Loop expansion for ``[foreach]``/``[from]``/``[index]``/``[else]``."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from pynojs._constants import ELSE, FOREACH, FROM, INDEX, LOOP_MARKERS, marker
from pynojs.host.base import Node
from pynojs.templates.substitution import substitute

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def expand_loop(processor: DirectiveProcessor, node: Node) -> int:
    """Expand one loop node; return the number of clones inserted.

    Clones are rendered from a stamp of the node taken before its content
    is cleared, inserted in order right before the node, and the node is
    hidden. An empty or non-sequence source renders the ``[else]``
    template in the same position instead.
    """
    host = processor.host
    item_variable = (host.get_attribute(node, marker(FOREACH)) or "").strip()
    source = host.get_attribute(node, marker(FROM))
    else_id = host.get_attribute(node, marker(ELSE))
    index_variable = (host.get_attribute(node, marker(INDEX)) or "").strip()

    items = processor.evaluator.evaluate_expression(source)

    if not item_variable or not _is_sequence(items) or not items:
        if else_id:
            rendered = processor.templates.render(else_id, {"condition": False})
            if rendered is not None:
                for part in host.parse(rendered):
                    host.insert_before(part, node)
                processor.hide(node)
        _logger.debug("Loop over %r is empty", source)
        return 0

    stamp = host.clone(node)
    for name in LOOP_MARKERS:
        host.remove_attribute(stamp, marker(name))
    host.clear(node)
    stamp_markup = host.get_outer_html(stamp)

    holder: list[Node] = []
    for index, item in enumerate(items):
        bindings: dict[str, Any] = {item_variable: item}
        if index_variable:
            bindings[index_variable] = index
        holder.extend(host.parse(substitute(stamp_markup, bindings, autoescape=processor.config.autoescape)))

    for clone in holder:
        host.insert_before(clone, node)
    processor.hide(node)

    # Clones did not exist when the pass queried its nodes.
    for clone in holder:
        for nested in host.query(clone, marker(FOREACH)):
            if host.is_attached(nested):
                expand_loop(processor, nested)
    _logger.debug("Loop over %r rendered %d items", source, len(items))
    return len(items)


def scan_loops(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(FOREACH)):
        # Nested loops inside an expanded parent were detached with its content.
        if not host.is_attached(node):
            continue
        expand_loop(processor, node)
