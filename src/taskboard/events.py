"""In-process change event bus.

One publish point, any number of subscribers. Delivery is synchronous and in
registration order, so events emitted back to back are applied in emission
order without interleaving.
"""

from __future__ import annotations

import logging
from typing import Callable

from taskboard.models.events import ChangeEvent

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[ChangeEvent], None]


class Subscription:
    """Handle returned by ``ChangeEventBus.subscribe``."""

    def __init__(self, bus: ChangeEventBus, handler: ChangeHandler) -> None:
        self._bus = bus
        self._handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        """Remove the handler from the bus. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self._bus._remove(self._handler)


class ChangeEventBus:
    """Synchronous observer for task change events."""

    def __init__(self) -> None:
        self._handlers: list[ChangeHandler] = []

    def subscribe(self, handler: ChangeHandler) -> Subscription:
        self._handlers.append(handler)
        logger.debug(f"[Bus] Subscribed handler (active={len(self._handlers)})")
        return Subscription(self, handler)

    def emit(self, event: ChangeEvent) -> None:
        """Invoke every current handler with ``event``."""
        logger.debug(f"[Bus] {event.event_type} {event.task_id}")
        # Snapshot so unsubscribing mid-delivery does not skip a handler
        for handler in list(self._handlers):
            handler(event)

    def _remove(self, handler: ChangeHandler) -> None:
        try:
            self._handlers.remove(handler)
        except ValueError:
            return
        logger.debug(f"[Bus] Unsubscribed handler (active={len(self._handlers)})")

    def __len__(self) -> int:
        return len(self._handlers)
