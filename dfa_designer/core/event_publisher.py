# dfa_designer/core/event_publisher.py
"""
A small per-instance observer registry.

State views use it to announce position changes, and the render orchestrator
uses one as its document-level pointer listener list. Listeners are called
synchronously, in subscription order.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventPublisher:
    """Subscribe/unsubscribe by event name, publish to all current listeners."""

    def __init__(self):
        # dict keys double as an insertion-ordered set
        self._subscribers: Dict[str, Dict[Listener, None]] = {}

    def subscribe(self, event: str, listener: Listener) -> None:
        """Adds `listener` for `event`. Subscribing twice has no extra effect."""
        self._subscribers.setdefault(event, {})[listener] = None

    def unsubscribe(self, event: str, listener: Listener) -> None:
        listeners = self._subscribers.get(event)
        if listeners is None:
            return
        listeners.pop(listener, None)
        if not listeners:
            del self._subscribers[event]

    def publish(self, event: str, *args: Any) -> None:
        listeners = self._subscribers.get(event)
        if not listeners:
            return
        # Snapshot: a listener may unsubscribe itself while being notified.
        for listener in list(listeners):
            listener(*args)

    def subscriber_count(self, event: str) -> int:
        return len(self._subscribers.get(event, {}))

    def is_subscribed(self, event: str, listener: Listener) -> bool:
        return listener in self._subscribers.get(event, {})

    def events(self) -> List[str]:
        return list(self._subscribers)

    def clear(self) -> None:
        if self._subscribers:
            logger.debug("Dropping listeners for events: %s", ", ".join(self._subscribers))
        self._subscribers.clear()
