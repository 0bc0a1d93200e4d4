"""State/store layer.

The observable key/value store that conditions, loops, event handlers and
``[bind]`` directives read from.
"""

from pynojs.state.store import Listener, StateStore, Subscription

__all__ = ["Listener", "StateStore", "Subscription"]
