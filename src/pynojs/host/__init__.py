"""Host node-tree interface and adapters."""

from pynojs.host.base import DomEvent, EventHandler, HostTree, Node
from pynojs.host.soup import SoupHost

__all__ = ["DomEvent", "EventHandler", "HostTree", "Node", "SoupHost"]
