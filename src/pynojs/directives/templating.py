"""Plain template injection for ``[template]``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pynojs._constants import TEMPLATE, marker
from pynojs.host.base import Node

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor


def scan_templates(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(TEMPLATE)):
        processor.render_into(host.get_attribute(node, marker(TEMPLATE)), {}, node)
