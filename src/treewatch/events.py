"""Subscription and delivery of watcher events."""

import logging
from typing import Callable, Dict, List, Union

from .models import ChangedEvent, EventType, RemovedEvent

logger = logging.getLogger(__name__)

WatchEvent = Union[ChangedEvent, RemovedEvent]
Subscriber = Callable[[WatchEvent], None]


class EventDispatcher:
    """
    Delivers events to subscribers of each event type, in subscription order.

    A subscriber that raises is logged and does not prevent delivery to the
    others.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[Subscriber]] = {
            event_type: [] for event_type in EventType
        }

    def subscribe(self, event_type: EventType, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for one event type.

        Args:
            event_type: EventType.CHANGED or EventType.REMOVED
            callback: Called with each event of that type

        Returns:
            A function that removes the subscription
        """
        if not isinstance(event_type, EventType):
            raise TypeError(f"event_type must be an EventType, not {event_type!r}")
        if not callable(callback):
            raise TypeError("callback must be callable")

        self._subscribers[event_type].append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(event_type, callback)

        return unsubscribe

    def unsubscribe(self, event_type: EventType, callback: Subscriber) -> bool:
        """
        Remove a previously registered callback.

        Returns:
            True if the callback was registered
        """
        try:
            self._subscribers[event_type].remove(callback)
            return True
        except ValueError:
            return False

    def emit(self, event: WatchEvent) -> None:
        """Deliver an event to every subscriber of its type."""
        logger.debug(f"Emitting {event.event_type.value}: {event.path}")
        for callback in list(self._subscribers[event.event_type]):
            try:
                callback(event)
            except Exception:
                logger.exception(f"Subscriber {callback!r} failed on {event.event_type.value} {event.path}")

    def subscriber_count(self, event_type: EventType) -> int:
        return len(self._subscribers[event_type])
