"""Event bus for inter-component communication.

This module provides a simple publish-subscribe event system that allows
the viewport, highlight, gesture, and error graph engines to notify the
renderers and panels without tight coupling.
"""

import logging
from typing import Callable

logger = logging.getLogger(__name__)


class EventBus:
    """Simple publish-subscribe event bus for inter-component communication.

    Usage:
        bus = EventBus()
        bus.subscribe("view_changed", lambda **kw: print("View changed!"))
        bus.emit("view_changed", pane_id="first")

    Thread Safety:
        This implementation is NOT thread-safe. All subscriptions and emissions
        should happen on the same thread (the UI event loop).
    """

    def __init__(self):
        self._subscribers: dict[str, list[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable) -> Callable:
        """Subscribe to an event type.

        Args:
            event_type: String identifier for the event (e.g., "view_changed")
            callback: Function to call when event is emitted. Receives **kwargs.

        Returns:
            The callback function (for easy unsubscribe later)
        """
        self._subscribers.setdefault(event_type, []).append(callback)
        return callback

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        """Unsubscribe a callback from an event type."""
        if event_type in self._subscribers:
            self._subscribers[event_type] = [
                cb for cb in self._subscribers[event_type] if cb != callback
            ]

    def emit(self, event_type: str, **kwargs) -> None:
        """Emit an event to all subscribers.

        Exceptions in callbacks are logged so one failing subscriber does not
        break the event chain.

        Args:
            event_type: String identifier for the event
            **kwargs: Data to pass to subscribers
        """
        for callback in list(self._subscribers.get(event_type, ())):
            try:
                callback(**kwargs)
            except Exception:
                logger.exception("Event handler error for %s", event_type)

    def clear(self, event_type: str | None = None) -> None:
        """Clear all subscribers for an event type, or all events if None."""
        if event_type is None:
            self._subscribers.clear()
        elif event_type in self._subscribers:
            self._subscribers[event_type].clear()

    def has_subscribers(self, event_type: str) -> bool:
        """Check if an event type has any subscribers."""
        return bool(self._subscribers.get(event_type))
