"""Event wiring: call actions, state-held event handlers and custom directives."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pynojs._constants import (
    CALL,
    DEFAULT_ERROR_VARIABLE_NAME,
    ERROR,
    HANDLER_EVENTS,
    METHOD,
    SUCCESS,
    marker,
)
from pynojs.exceptions import NoJsTransportError
from pynojs.host.base import DomEvent, Node

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


def error_payload(exc: NoJsTransportError) -> dict[str, Any]:
    return {"message": str(exc), "status": exc.status_code, "url": exc.url}


async def perform_call(
    processor: DirectiveProcessor,
    node: Node,
    url: str,
    *,
    method: str = "GET",
    success_id: str | None = None,
    error_id: str | None = None,
) -> bool:
    """Issue one call-action request and render its outcome.

    Returns whether the request succeeded. Errors without an ``[error]``
    template are logged and dropped.
    """
    transport = processor.transport
    if transport is None:
        _logger.warning("No transport configured; [call] %s ignored", url)
        return False
    try:
        response = await transport.request(url, method=method)
    except NoJsTransportError as exc:
        if error_id:
            processor.render_into(error_id, error_payload(exc), node, default_variable=DEFAULT_ERROR_VARIABLE_NAME)
        else:
            _logger.debug("Call to %s failed with no [error] template: %s", url, exc)
        return False
    if success_id:
        processor.render_into(success_id, response.payload(), node)
    return True


def scan_calls(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(CALL)):
        url = host.get_attribute(node, marker(CALL))
        if not url:
            continue
        method = host.get_attribute(node, marker(METHOD)) or "GET"
        success_id = host.get_attribute(node, marker(SUCCESS))
        error_id = host.get_attribute(node, marker(ERROR))

        def _on_click(
            event: DomEvent,
            node: Node = node,
            url: str = url,
            method: str = method,
            success_id: str | None = success_id,
            error_id: str | None = error_id,
        ) -> None:
            event.prevent_default()
            processor.spawn(
                perform_call(processor, node, url, method=method, success_id=success_id, error_id=error_id)
            )

        processor.wire_once(node, "click", _on_click)


def scan_event_handlers(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for event_type in HANDLER_EVENTS:
        for node in host.query(root, marker(event_type)):
            key = host.get_attribute(node, marker(event_type))
            handler = processor.store.get_state(key) if key else None
            if callable(handler):
                processor.wire_once(node, event_type, handler)
            else:
                _logger.debug("[%s] handler %r is not a callable in state", event_type, key)


def scan_custom_directives(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for name, handler in list(processor.directives.items()):
        for node in host.query(root, marker(name)):
            try:
                handler(node, host.get_attribute(node, marker(name)))
            except Exception as exc:  # noqa: BLE001
                _logger.warning("Custom directive %s failed: %s", name, exc)
