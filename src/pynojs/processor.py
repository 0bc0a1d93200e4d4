"""Directive processor: runs the scanner pipeline over a host tree."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine, Mapping
from types import MappingProxyType
from typing import Any

from pynojs._constants import DISPLAY_HIDDEN, DISPLAY_SHOWN, TARGET, marker
from pynojs._transport import Transport
from pynojs.config import EngineConfig
from pynojs.directives import SCANNERS
from pynojs.directives.descriptors import DescriptorCache
from pynojs.directives.i18n import scan_translations
from pynojs.directives.translations import TranslationCatalog
from pynojs.expressions.evaluator import ExpressionEvaluator
from pynojs.host.base import EventHandler, HostTree, Node
from pynojs.host.soup import SoupHost
from pynojs.state.store import StateStore, Subscription
from pynojs.templates.registry import TemplateRegistry

_logger = logging.getLogger(__name__)

DirectiveHandler = Callable[[Node, str | None], None]


class DirectiveProcessor:
    """Orchestrates directive scanning for one host tree.

    Usage::

        processor = DirectiveProcessor.from_markup(html, store=store)
        processor.process_all()
        await processor.wait_pending()
        print(processor.host.markup())

    Parameters
    ----------
    host : HostTree
        The tree to scan and mutate.
    config : EngineConfig or None
        Engine configuration; defaults to ``EngineConfig()``.
    store : StateStore or None
        State store shared with the application. A fresh one is created
        when omitted.
    transport : Transport or None
        Network primitive for remote templates, translation files, call
        actions and form submissions. Without one those directives log a
        warning and do nothing.
    """

    def __init__(
        self,
        host: HostTree,
        *,
        config: EngineConfig | None = None,
        store: StateStore | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._host = host
        self._store = store if store is not None else StateStore()
        self._transport = transport
        self._evaluator = ExpressionEvaluator(self._store, self._config.namespace)
        self._templates = TemplateRegistry(autoescape=self._config.autoescape)
        self._translations = TranslationCatalog()
        self._descriptors = DescriptorCache()
        self._directives: dict[str, DirectiveHandler] = {}
        self._filters: dict[str, Callable[..., Any]] = {}
        self._bindings: dict[int, tuple[Node, Subscription]] = {}
        self._wired: dict[tuple[int, str], Node] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    @classmethod
    def from_markup(
        cls,
        markup: str,
        *,
        config: EngineConfig | None = None,
        store: StateStore | None = None,
        transport: Transport | None = None,
    ) -> DirectiveProcessor:
        """Build a processor over a :class:`SoupHost` and register the
        document's ``<template>`` elements."""
        config = config or EngineConfig()
        processor = cls(SoupHost(markup, parser=config.parser), config=config, store=store, transport=transport)
        processor.collect_templates()
        return processor

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def host(self) -> HostTree:
        return self._host

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def transport(self) -> Transport | None:
        return self._transport

    @property
    def evaluator(self) -> ExpressionEvaluator:
        return self._evaluator

    @property
    def templates(self) -> TemplateRegistry:
        return self._templates

    @property
    def translations(self) -> TranslationCatalog:
        return self._translations

    @property
    def descriptors(self) -> DescriptorCache:
        return self._descriptors

    @property
    def directives(self) -> Mapping[str, DirectiveHandler]:
        return MappingProxyType(self._directives)

    @property
    def filters(self) -> Mapping[str, Callable[..., Any]]:
        return MappingProxyType(self._filters)

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def process_all(self, root: Node | None = None) -> None:
        """Run every configured scanner over *root* (the document by default)."""
        self._prune_wired()
        for name in self._config.pipeline:
            scanner = SCANNERS[name]
            try:
                scanner(self, root)
            except Exception as exc:  # noqa: BLE001
                _logger.warning("Scanner %s failed: %s", name, exc)

    def collect_templates(self, root: Node | None = None) -> list[str]:
        """Register the tree's ``<template>`` elements; return the ids that
        declare a remote source."""
        return self._templates.collect(self._host, root)

    async def load_remote_templates(self) -> int:
        """Fetch every template that declares a ``[src]``; return how many loaded."""
        if self._transport is None:
            _logger.warning("No transport configured; remote templates not loaded")
            return 0
        loaded = 0
        for template in self._templates:
            if template.source and await self._templates.load_remote(
                self._transport, template.id, template.source, parser=self._config.parser
            ):
                loaded += 1
        return loaded

    # ------------------------------------------------------------------
    # Extension API
    # ------------------------------------------------------------------

    def register_directive(self, name: str, handler: DirectiveHandler) -> None:
        """Register a custom ``[name]`` directive; the last registration wins."""
        self._directives[name] = handler

    def register_filter(self, name: str, fn: Callable[..., Any]) -> None:
        """Register a filter. Filters are stored for extensions; the
        pipeline itself never applies them."""
        self._filters[name] = fn

    def set_translations(self, lang: str, table: Mapping[str, Any]) -> None:
        self._translations.set_translations(lang, table)

    def get_translation(self, lang: str, key: str) -> str | None:
        return self._translations.get_translation(lang, key)

    async def load_translations(self, url: str, lang: str, *, root: Node | None = None) -> bool:
        """Load a translation file, then re-apply translations to *root*."""
        if self._transport is None:
            _logger.warning("No transport configured; translations from %s not loaded", url)
            return False
        loaded = await self._translations.load(self._transport, url, lang)
        if loaded:
            scan_translations(self, root)
        return loaded

    # ------------------------------------------------------------------
    # Helpers shared by scanners
    # ------------------------------------------------------------------

    def show(self, node: Node) -> None:
        style = self._host.get_style(node)
        style["display"] = DISPLAY_SHOWN
        self._host.set_style(node, style)

    def hide(self, node: Node) -> None:
        style = self._host.get_style(node)
        style["display"] = DISPLAY_HIDDEN
        self._host.set_style(node, style)

    def resolve_target(self, node: Node) -> Node | None:
        """The node a directive renders into: its ``[target]`` or itself."""
        selector = self._host.get_attribute(node, marker(TARGET))
        if not selector:
            return node
        target = self._host.select(selector)
        if target is None:
            _logger.warning("Render target %r not found", selector)
        return target

    def render_template(
        self,
        template_id: str | None,
        result: Any,
        target: Node,
        *,
        default_variable: str | None = None,
    ) -> bool:
        """Render a template into *target*, replacing its content, and show it.

        Returns ``False`` (leaving *target* untouched) when the template is
        not registered.
        """
        rendered = self._templates.render(template_id, result, default_variable=default_variable)
        if rendered is None:
            return False
        self._host.set_inner_html(target, rendered)
        self.show(target)
        return True

    def render_into(
        self,
        template_id: str | None,
        result: Any,
        node: Node,
        *,
        default_variable: str | None = None,
    ) -> bool:
        """:meth:`render_template` into the directive node's render target."""
        target = self.resolve_target(node)
        if target is None:
            return False
        return self.render_template(template_id, result, target, default_variable=default_variable)

    def _prune_wired(self) -> None:
        # Nodes dropped from the tree since the last pass (old clones, inline
        # error output) no longer need their listener bookkeeping.
        for key, node in list(self._wired.items()):
            if not self._host.is_attached(node):
                del self._wired[key]

    def wire_once(self, node: Node, event_type: str, handler: EventHandler) -> bool:
        """Attach *handler* unless this processor already wired *event_type*
        on *node*; repeated passes therefore never stack listeners."""
        key = (id(node), event_type)
        if key in self._wired:
            return False
        self._wired[key] = node
        self._host.add_event_listener(node, event_type, handler)
        return True

    def bind(self, node: Node, subscription: Subscription) -> None:
        """Track *subscription* for *node*, cancelling any previous one."""
        previous = self._bindings.get(id(node))
        if previous is not None:
            previous[1].cancel()
        self._bindings[id(node)] = (node, subscription)

    @property
    def binding_count(self) -> int:
        return len(self._bindings)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any] | None:
        """Schedule a network continuation on the running loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            _logger.warning("No running event loop; network directive skipped")
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.warning("Network continuation failed: %s", exc)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    @property
    def wired(self) -> int:
        """Number of (node, event) pairs this processor has listeners on."""
        return len(self._wired)

    async def wait_pending(self) -> None:
        """Wait until every spawned continuation (and any they spawn) is done."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def close(self) -> None:
        """Cancel every state binding created by this processor."""
        for _, subscription in self._bindings.values():
            subscription.cancel()
        self._bindings.clear()
