"""Live, sectioned query results.

A live query evaluates its predicate and sort against a repository, groups the
results into sections, and re-derives them whenever the event bus reports a
change to the entity kind it watches. Subscribers are notified after each
refresh; there is no polling.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Generic, TypeVar

from quotebook.core.sorting import Section, SortDefinition

from .events import Event, EventBus, EventType
from .query import Predicate
from .repository import Repository

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[["LiveQuery"], None]


class LiveQuery(Generic[T]):
    """Ordered, sectioned view over a repository that tracks store changes."""

    def __init__(
        self,
        repository: Repository,
        predicate: Predicate | None,
        sort: SortDefinition,
        event_bus: EventBus,
        event_types: frozenset[EventType],
    ):
        self.repository = repository
        self.predicate = predicate
        self.sort = sort
        self.event_bus = event_bus
        self.event_types = event_types
        self._sections: list[Section[T]] = []
        self._listeners: list[Listener] = []
        self._closed = False

        self._load()
        self.event_bus.subscribe_many(self.event_types, self._on_event)

    @property
    def sections(self) -> list[Section[T]]:
        return list(self._sections)

    @property
    def entities(self) -> list[T]:
        """All entities in display order."""
        return [entity for section in self._sections for entity in section.items]

    @property
    def closed(self) -> bool:
        return self._closed

    def is_empty(self) -> bool:
        return not self._sections

    def __iter__(self) -> Iterator[Section[T]]:
        return iter(self._sections)

    def __len__(self) -> int:
        return sum(len(section) for section in self._sections)

    def section(self, section_id: str) -> Section[T] | None:
        for section in self._sections:
            if section.id == section_id:
                return section
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called after every refresh.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def refresh(self) -> None:
        """Re-derive sections and notify listeners."""
        self._load()
        for listener in list(self._listeners):
            listener(self)

    def close(self) -> None:
        """Stop tracking store changes."""
        if self._closed:
            return
        self.event_bus.unsubscribe_many(self.event_types, self._on_event)
        self._listeners.clear()
        self._closed = True

    def _load(self) -> None:
        entities = self.repository.find_matching(self.predicate)
        self._sections = self.sort.group(entities)

    def _on_event(self, event: Event) -> None:
        logger.debug("Refreshing %s query after %s", self.sort.name, event.type.name)
        self.refresh()
