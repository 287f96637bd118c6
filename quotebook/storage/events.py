"""Event system for tracking changes to collections and quotes."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events that can occur."""

    # Collection events
    COLLECTION_CREATED = auto()
    COLLECTION_UPDATED = auto()
    COLLECTION_DELETED = auto()

    # Quote events
    QUOTE_CREATED = auto()
    QUOTE_UPDATED = auto()
    QUOTE_DELETED = auto()
    QUOTES_MOVED = auto()
    QUOTES_EDITED = auto()

    # System events
    STORAGE_CLEARED = auto()


COLLECTION_EVENTS = frozenset(
    {
        EventType.COLLECTION_CREATED,
        EventType.COLLECTION_UPDATED,
        EventType.COLLECTION_DELETED,
        EventType.STORAGE_CLEARED,
    }
)

QUOTE_EVENTS = frozenset(
    {
        EventType.QUOTE_CREATED,
        EventType.QUOTE_UPDATED,
        EventType.QUOTE_DELETED,
        EventType.QUOTES_MOVED,
        EventType.QUOTES_EDITED,
        EventType.COLLECTION_DELETED,
        EventType.STORAGE_CLEARED,
    }
)


@dataclass
class Event:
    """An event that occurred in the system."""

    type: EventType
    timestamp: datetime
    data: dict[str, Any]

    @property
    def entity_ids(self) -> list[str]:
        """IDs of the entities the event concerns."""
        if "ids" in self.data:
            return list(self.data["ids"])
        if "id" in self.data:
            return [self.data["id"]]
        return []


class EventBus:
    """Simple event bus for publishing and subscribing to events."""

    def __init__(self, history_limit: int = 1000):
        self._subscribers: dict[EventType, list[Callable[[Event], None]]] = {}
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Subscribe to events of a specific type."""
        self._subscribers.setdefault(event_type, []).append(handler)

    def subscribe_many(
        self, event_types: frozenset[EventType], handler: Callable[[Event], None]
    ) -> None:
        """Subscribe one handler to several event types."""
        for event_type in event_types:
            self.subscribe(event_type, handler)

    def unsubscribe(
        self, event_type: EventType, handler: Callable[[Event], None]
    ) -> None:
        """Unsubscribe from events."""
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def unsubscribe_many(
        self, event_types: frozenset[EventType], handler: Callable[[Event], None]
    ) -> None:
        for event_type in event_types:
            self.unsubscribe(event_type, handler)

    def publish(self, event: Event) -> None:
        """Publish an event to all subscribers.

        A failing subscriber is logged and does not stop delivery to the rest.
        """
        self._history.append(event)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit :]

        # Copy so handlers may unsubscribe while being notified
        for handler in list(self._subscribers.get(event.type, [])):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed for %s", event.type.name)

    def get_history(
        self, event_type: EventType | None = None, limit: int = 100
    ) -> list[Event]:
        """Get event history."""
        history = self._history

        if event_type:
            history = [e for e in history if e.type == event_type]

        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._history.clear()


class EventPublisher:
    """Mixin for classes that publish events."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus

    def _publish_event(self, event_type: EventType, **data) -> None:
        """Publish an event."""
        event = Event(type=event_type, timestamp=datetime.now(), data=data)
        self.event_bus.publish(event)
