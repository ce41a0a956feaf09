"""In-process publish/subscribe for shift lifecycle events."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

from shiftguard.logging_utils import get_logger, log_event


class EventBus:
    """Dispatches each published event to the handlers for its exact type.

    Delivery is synchronous and in subscription order; a handler error
    propagates to the publisher.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._handlers: dict[type, list[Callable[[Any], None]]] = defaultdict(list)
        self._logger = logger or get_logger()

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: type) -> list[Callable[[Any], None]]:
        return list(self._handlers.get(event_type, []))

    def publish(self, event: Any) -> None:
        handlers = self.handlers_for(type(event))
        log_event(
            self._logger,
            "DEBUG",
            "bus.publish",
            event_type=type(event).__name__,
            handlers=len(handlers),
        )
        for handler in handlers:
            handler(event)
