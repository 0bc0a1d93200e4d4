"""One-way state bindings for ``[bind]``.

A bound element gets the current state value as its text, then follows
later ``set_state`` calls for its key directly. Nothing else in the
pipeline re-runs when the value changes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pynojs._constants import BIND, marker
from pynojs.host.base import Node
from pynojs.state.store import Subscription
from pynojs.templates.substitution import format_value

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor


def bind_node(processor: DirectiveProcessor, node: Node, key: str) -> Subscription:
    host = processor.host
    store = processor.store

    if store.has_state(key):
        host.set_text(node, format_value(store.get_state(key), autoescape=False))

    def _on_change(changed_key: str, value: Any) -> None:
        if changed_key == key:
            host.set_text(node, format_value(value, autoescape=False))

    subscription = store.subscribe(_on_change)
    processor.bind(node, subscription)
    return subscription


def scan_bindings(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(BIND)):
        key = host.get_attribute(node, marker(BIND))
        if key:
            bind_node(processor, node, key)
