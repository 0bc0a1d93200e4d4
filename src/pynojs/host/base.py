"""Host node-tree capability interface.

The directive processor never touches a concrete tree type. Everything it
needs from the surrounding environment (querying, attribute and text
access, style and class bags, cloning and insertion, event wiring) goes
through :class:`HostTree`. Nodes are opaque to the processor.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

Node = Any
EventHandler = Callable[["DomEvent"], Any]


@dataclass(slots=True)
class DomEvent:
    """An event delivered to listeners by :meth:`HostTree.dispatch`."""

    type: str
    target: Node
    detail: dict[str, Any] = field(default_factory=dict)
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class HostTree(Protocol):
    """Structural interface for the tree the processor mutates.

    ``query`` results are in document order and never include nodes that
    live inside inert ``<template>`` content.
    """

    # -- lookup -------------------------------------------------------
    def query(self, root: Node | None, attribute: str) -> list[Node]: ...

    def query_tag(self, root: Node | None, tag: str) -> list[Node]: ...

    def select(self, selector: str, root: Node | None = None) -> Node | None: ...

    def next_element_sibling(self, node: Node) -> Node | None: ...

    def element_children(self, node: Node) -> list[Node]: ...

    def closest(self, node: Node, attribute: str) -> Node | None: ...

    # -- attributes and content ---------------------------------------
    def get_attribute(self, node: Node, name: str) -> str | None: ...

    def has_attribute(self, node: Node, name: str) -> bool: ...

    def remove_attribute(self, node: Node, name: str) -> None: ...

    def get_text(self, node: Node) -> str: ...

    def set_text(self, node: Node, text: str) -> None: ...

    def get_inner_html(self, node: Node) -> str: ...

    def set_inner_html(self, node: Node, markup: str) -> None: ...

    def get_outer_html(self, node: Node) -> str: ...

    def get_value(self, node: Node) -> str: ...

    def form_fields(self, form: Node) -> dict[str, str]: ...

    # -- style and classes --------------------------------------------
    def get_style(self, node: Node) -> dict[str, str]: ...

    def set_style(self, node: Node, style: Mapping[str, str]) -> None: ...

    def get_classes(self, node: Node) -> list[str]: ...

    def set_classes(self, node: Node, classes: list[str]) -> None: ...

    # -- structure ----------------------------------------------------
    def parse(self, markup: str) -> list[Node]: ...

    def clone(self, node: Node) -> Node: ...

    def insert_before(self, new_node: Node, reference: Node) -> None: ...

    def insert_after(self, new_node: Node, reference: Node) -> None: ...

    def remove(self, node: Node) -> None: ...

    def clear(self, node: Node) -> None: ...

    def is_attached(self, node: Node) -> bool: ...

    # -- events -------------------------------------------------------
    def add_event_listener(self, node: Node, event_type: str, handler: EventHandler) -> None: ...

    def dispatch(self, node: Node, event_type: str, detail: Mapping[str, Any] | None = None) -> DomEvent: ...
