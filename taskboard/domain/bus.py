"""Simple synchronous in-process event bus."""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable


class EventBus:
    """Publish/subscribe bus that views use to follow store changes.

    Handlers are called synchronously in registration order.
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable]] = defaultdict(list)

    def subscribe(self, message_type: type, handler: Callable) -> Callable[[], None]:
        """Register *handler* and return a callable that removes it again."""
        self._subscribers[message_type].append(handler)

        def unsubscribe() -> None:
            handlers = self._subscribers.get(message_type, [])
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, message: Any) -> None:
        for handler in list(self._subscribers.get(type(message), [])):
            handler(message)
