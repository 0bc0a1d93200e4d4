"""BeautifulSoup-backed :class:`HostTree`.

Lets the directive pipeline run headless: server-side rendering, scripts
and tests. Events are delivered synchronously by :meth:`SoupHost.dispatch`
and do not bubble.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from pynojs.host.base import DomEvent, EventHandler

_logger = logging.getLogger(__name__)

_CHECKABLE = frozenset({"checkbox", "radio"})
_FIELD_TAGS = ("input", "select", "textarea")


def parse_style(text: str | None) -> dict[str, str]:
    """Parse an inline ``style`` attribute into an ordered property map."""
    style: dict[str, str] = {}
    if not text:
        return style
    for declaration in text.split(";"):
        name, sep, value = declaration.partition(":")
        if not sep or not name.strip():
            continue
        style[name.strip().lower()] = value.strip()
    return style


def format_style(style: Mapping[str, str]) -> str:
    return "; ".join(f"{name}: {value}" for name, value in style.items() if value != "")


def _attr_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


class SoupHost:
    """A :class:`HostTree` over a parsed HTML document.

    Parameters
    ----------
    markup : str or BeautifulSoup
        The document to operate on.
    parser : str
        BeautifulSoup tree builder (``html.parser`` keeps bracketed
        attribute names such as ``[if]`` intact).
    """

    def __init__(self, markup: str | BeautifulSoup, *, parser: str = "html.parser") -> None:
        self._parser = parser
        self._soup = markup if isinstance(markup, BeautifulSoup) else BeautifulSoup(markup, parser)
        self._listeners: dict[int, tuple[Tag, dict[str, list[EventHandler]]]] = {}

    def markup(self) -> str:
        return str(self._soup)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @staticmethod
    def is_inert(node: Tag) -> bool:
        """True when *node* lives inside ``<template>`` content."""
        return any(parent.name == "template" for parent in node.parents)

    def query(self, root: Tag | None, attribute: str) -> list[Tag]:
        scope = root if root is not None else self._soup
        if not isinstance(scope, Tag):
            return []
        found = scope.find_all(attrs={attribute.lower(): True})
        return [node for node in found if not self.is_inert(node)]

    def query_tag(self, root: Tag | None, tag: str) -> list[Tag]:
        scope = root if root is not None else self._soup
        if not isinstance(scope, Tag):
            return []
        return [node for node in scope.find_all(tag) if not self.is_inert(node)]

    def select(self, selector: str, root: Tag | None = None) -> Tag | None:
        scope = root if root is not None else self._soup
        try:
            return scope.select_one(selector)
        except (SelectorSyntaxError, ValueError) as exc:
            _logger.warning("Invalid selector %r: %s", selector, exc)
            return None

    def next_element_sibling(self, node: Tag) -> Tag | None:
        sibling = node.next_sibling
        while sibling is not None and not isinstance(sibling, Tag):
            sibling = sibling.next_sibling
        return sibling

    def element_children(self, node: Tag) -> list[Tag]:
        return [child for child in node.children if isinstance(child, Tag)]

    def closest(self, node: Tag, attribute: str) -> Tag | None:
        name = attribute.lower()
        current: Tag | None = node
        while current is not None and not isinstance(current, BeautifulSoup):
            if current.has_attr(name):
                return current
            current = current.parent
        return None

    # ------------------------------------------------------------------
    # Attributes and content
    # ------------------------------------------------------------------

    def get_attribute(self, node: Tag, name: str) -> str | None:
        return _attr_text(node.get(name.lower()))

    def has_attribute(self, node: Tag, name: str) -> bool:
        return node.has_attr(name.lower())

    def remove_attribute(self, node: Tag, name: str) -> None:
        name = name.lower()
        if node.has_attr(name):
            del node[name]

    def get_text(self, node: Tag) -> str:
        return node.get_text()

    def set_text(self, node: Tag, text: str) -> None:
        node.string = text

    def get_inner_html(self, node: Tag) -> str:
        return node.decode_contents()

    def set_inner_html(self, node: Tag, markup: str) -> None:
        node.clear()
        for child in self.parse(markup):
            node.append(child)

    def get_outer_html(self, node: Tag) -> str:
        return node.decode()

    def get_value(self, node: Tag) -> str:
        if node.name == "textarea":
            return node.get_text()
        if node.name == "select":
            options = node.find_all("option")
            chosen = next((opt for opt in options if opt.has_attr("selected")), options[0] if options else None)
            if chosen is None:
                return ""
            value = chosen.get("value")
            return _attr_text(value) if value is not None else chosen.get_text()
        return _attr_text(node.get("value")) or ""

    def form_fields(self, form: Tag) -> dict[str, str]:
        fields: dict[str, str] = {}
        for node in form.find_all(_FIELD_TAGS):
            name = _attr_text(node.get("name"))
            if not name or node.has_attr("disabled"):
                continue
            if node.name == "input" and _attr_text(node.get("type", "")).lower() in _CHECKABLE:
                if not node.has_attr("checked"):
                    continue
                fields[name] = _attr_text(node.get("value")) or "on"
                continue
            fields[name] = self.get_value(node)
        return fields

    # ------------------------------------------------------------------
    # Style and classes
    # ------------------------------------------------------------------

    def get_style(self, node: Tag) -> dict[str, str]:
        return parse_style(_attr_text(node.get("style")))

    def set_style(self, node: Tag, style: Mapping[str, str]) -> None:
        text = format_style(style)
        if text:
            node["style"] = text
        elif node.has_attr("style"):
            del node["style"]

    def get_classes(self, node: Tag) -> list[str]:
        value = node.get("class")
        if value is None:
            return []
        return list(value) if isinstance(value, list) else str(value).split()

    def set_classes(self, node: Tag, classes: list[str]) -> None:
        if classes:
            node["class"] = list(classes)
        elif node.has_attr("class"):
            del node["class"]

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def parse(self, markup: str) -> list[Any]:
        fragment = BeautifulSoup(markup, self._parser)
        container = fragment.body if fragment.body is not None else fragment
        return [child.extract() for child in list(container.contents)]

    def clone(self, node: Tag) -> Tag:
        return copy.copy(node)

    def insert_before(self, new_node: Any, reference: Tag) -> None:
        reference.insert_before(new_node)

    def insert_after(self, new_node: Any, reference: Tag) -> None:
        reference.insert_after(new_node)

    def remove(self, node: Tag) -> None:
        node.extract()

    def clear(self, node: Tag) -> None:
        node.clear()

    def is_attached(self, node: Any) -> bool:
        """True while *node* is still reachable from the document root."""
        top = node
        while top.parent is not None:
            top = top.parent
        return top is self._soup

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def add_event_listener(self, node: Tag, event_type: str, handler: EventHandler) -> None:
        _, handlers = self._listeners.setdefault(id(node), (node, {}))
        handlers.setdefault(event_type, []).append(handler)

    def listeners(self, node: Tag, event_type: str) -> list[EventHandler]:
        entry = self._listeners.get(id(node))
        if entry is None:
            return []
        return list(entry[1].get(event_type, []))

    def dispatch(self, node: Tag, event_type: str, detail: Mapping[str, Any] | None = None) -> DomEvent:
        """Deliver an event to *node*'s listeners in registration order."""
        event = DomEvent(type=event_type, target=node, detail=dict(detail or {}))
        for handler in self.listeners(node, event_type):
            try:
                handler(event)
            except Exception as exc:  # noqa: BLE001
                _logger.warning("%s handler on <%s> failed: %s", event_type, node.name, exc)
        return event
