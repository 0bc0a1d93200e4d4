"""Observable in-memory key/value store.

The store is the single source of truth for conditions, loop sources,
event handlers and bindings. Keys are plain strings; dotted keys such as
``userProfile.name`` are stored verbatim, not nested.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)

Listener = Callable[[str, Any], None]


class Subscription:
    """Handle returned by :meth:`StateStore.subscribe`.

    Cancelling is idempotent. A subscription also works as a context
    manager, cancelling itself on exit.
    """

    __slots__ = ("_store", "_listener", "_active")

    def __init__(self, store: StateStore, listener: Listener) -> None:
        self._store = store
        self._listener = listener
        self._active = True

    @property
    def listener(self) -> Listener:
        return self._listener

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if not self._active:
            return
        self._active = False
        self._store._remove(self)  # noqa: SLF001

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.cancel()


class StateStore:
    """Key/value store with synchronous change notification.

    Every ``set_state`` call notifies every active listener, in
    subscription order, before returning. A listener that calls
    ``set_state`` itself triggers a nested notification round; there is
    no cycle detection.
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._state: dict[str, Any] = dict(initial or {})
        self._subscriptions: list[Subscription] = []

    def set_state(self, key: str, value: Any) -> None:
        """Store *value* under *key* and notify listeners."""
        self._state[key] = value
        self._notify(key, value)

    def get_state(self, key: str, default: Any = None) -> Any:
        """Return the value for *key*, or *default* when it was never set."""
        return self._state.get(key, default)

    def has_state(self, key: str) -> bool:
        return key in self._state

    def subscribe(self, listener: Listener) -> Subscription:
        """Register *listener* for every future ``set_state`` call."""
        subscription = Subscription(self, listener)
        self._subscriptions.append(subscription)
        return subscription

    def snapshot(self) -> dict[str, Any]:
        """Shallow copy of all entries."""
        return dict(self._state)

    @property
    def listener_count(self) -> int:
        return len(self._subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        try:
            self._subscriptions.remove(subscription)
        except ValueError:
            pass

    def _notify(self, key: str, value: Any) -> None:
        # Iterate over a copy: listeners may subscribe or cancel while running.
        for subscription in list(self._subscriptions):
            if not subscription.active:
                continue
            try:
                subscription.listener(key, value)
            except Exception as exc:  # noqa: BLE001
                _logger.warning("State listener failed for key %s: %s", key, exc)
