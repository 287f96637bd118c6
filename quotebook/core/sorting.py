"""Sort definitions and the per-scope sort registry.

A sort definition names an ordering of one entity type: a section key that
groups entities under a header, and an ordered list of comparison keys, each
with a direction. Comparison falls through the keys in order and finally on
entity identity, so the order is total: no two distinct entities compare
equal. String keys are compared case-insensitively.

The registry keeps the definitions per entity type and remembers the user's
chosen sort per scope (the global view, or one collection) through a
preference store.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from functools import cmp_to_key
from typing import Any, Generic, Protocol, TypeVar

from .exceptions import UnregisteredEntityTypeError
from .models import Collection, Quote, day_label

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SortDirection(Enum):
    """Direction of a single comparison key."""

    ASCENDING = 1
    DESCENDING = -1


ASCENDING = SortDirection.ASCENDING
DESCENDING = SortDirection.DESCENDING


@dataclass(frozen=True)
class SortKey:
    """One comparison key of a sort definition."""

    key: Callable[[Any], Any]
    direction: SortDirection = ASCENDING


@dataclass(frozen=True)
class Section(Generic[T]):
    """A labeled run of entities sharing a section key."""

    id: str
    items: tuple[T, ...]

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def _normalize(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.upper()
    return value


def _compare_values(left: Any, right: Any) -> int:
    left, right = _normalize(left), _normalize(right)
    if left < right:
        return -1
    if left > right:
        return 1
    return 0


@dataclass(frozen=True, eq=False)
class SortDefinition(Generic[T]):
    """A named ordering and grouping of one entity type.

    Two definitions are equal when they share entity type and name.
    """

    name: str
    entity_type: type
    section: Callable[[T], str]
    keys: tuple[SortKey, ...] = field(default_factory=tuple)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortDefinition):
            return NotImplemented
        return (self.entity_type, self.name) == (other.entity_type, other.name)

    def __hash__(self) -> int:
        return hash((self.entity_type, self.name))

    def compare(self, left: T, right: T) -> int:
        """Compare two entities under this sort.

        Returns:
            Negative, zero or positive like a classic comparator. Zero only
            when both arguments are the same entity.
        """
        for sort_key in self.keys:
            result = _compare_values(sort_key.key(left), sort_key.key(right))
            if result:
                return result * sort_key.direction.value
        return _compare_values(left.id, right.id)

    def sorted(self, entities: Iterable[T]) -> list[T]:
        """Return entities in this sort's total order."""
        return sorted(entities, key=cmp_to_key(self.compare))

    def group(self, entities: Iterable[T]) -> list[Section[T]]:
        """Sort entities and group consecutive runs by section key.

        Args:
            entities: Entities to order

        Returns:
            Sections in display order
        """
        sections: list[Section[T]] = []
        current_id: str | None = None
        current: list[T] = []

        for entity in self.sorted(entities):
            section_id = self.section(entity)
            if current and section_id != current_id:
                sections.append(Section(id=current_id, items=tuple(current)))
                current = []
            current_id = section_id
            current.append(entity)

        if current:
            sections.append(Section(id=current_id, items=tuple(current)))

        return sections


class PreferenceStore(Protocol):
    """Protocol for persisting user preferences."""

    def get(self, key: str) -> str | None:
        """Get a stored preference."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a preference."""
        ...


class MemoryPreferences:
    """Preference store kept in a dictionary."""

    def __init__(self, values: dict[str, str] | None = None):
        self.values = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class SortRegistry:
    """Ordered catalog of sort definitions per entity type."""

    def __init__(self, preferences: PreferenceStore | None = None):
        """Initialize registry.

        Args:
            preferences: Where chosen sorts are remembered
        """
        self.preferences = preferences if preferences is not None else MemoryPreferences()
        self._sorts: dict[type, list[SortDefinition]] = {}

    def register(self, sort: SortDefinition) -> SortDefinition:
        """Register a sort definition.

        Raises:
            ValueError: If a sort with the same name exists for the type
        """
        sorts = self._sorts.setdefault(sort.entity_type, [])
        if any(existing.name == sort.name for existing in sorts):
            raise ValueError(
                f"Sort '{sort.name}' already registered for {sort.entity_type.__name__}"
            )
        sorts.append(sort)
        return sort

    def list_sorts(self, entity_type: type) -> tuple[SortDefinition, ...]:
        """Get sorts for an entity type in registration order."""
        if not self._sorts.get(entity_type):
            raise UnregisteredEntityTypeError(entity_type)
        return tuple(self._sorts[entity_type])

    def get(self, entity_type: type, name: str) -> SortDefinition | None:
        """Find a sort by name."""
        for sort in self.list_sorts(entity_type):
            if sort.name == name:
                return sort
        return None

    def get_user_default(
        self, entity_type: type, scope: str | None = None
    ) -> SortDefinition:
        """Get the user's chosen sort for a scope.

        Falls back to the first registered sort when no preference is stored
        or the stored name no longer exists.

        Args:
            entity_type: Entity type being listed
            scope: Optional scope, e.g. a collection ID

        Returns:
            Sort definition
        """
        sorts = self.list_sorts(entity_type)
        name = self.preferences.get(self.preference_key(entity_type, scope))
        if name is None:
            return sorts[0]

        for sort in sorts:
            if sort.name == name:
                return sort

        logger.debug("Stored sort %r not found, using %r", name, sorts[0].name)
        return sorts[0]

    def set_user_default(self, sort: SortDefinition, scope: str | None = None) -> None:
        """Remember a sort as the user's choice for a scope."""
        self.preferences.set(self.preference_key(sort.entity_type, scope), sort.name)

    @staticmethod
    def preference_key(entity_type: type, scope: str | None = None) -> str:
        key = f"sort.{entity_type.__name__}"
        if scope:
            key = f"{key}.{scope}"
        return key


def _text(quote: Quote) -> str:
    return quote.text


def _first_last_text(quote: Quote) -> tuple[str, str, str]:
    return (
        quote.author_first_name_section,
        quote.author_last_name.upper(),
        quote.text.upper(),
    )


def _last_first_text(quote: Quote) -> tuple[str, str, str]:
    return (
        quote.author_last_name_section,
        quote.author_first_name.upper(),
        quote.text.upper(),
    )


def _quote_sort(
    name: str,
    section: Callable[[Quote], str],
    *keys: tuple[Callable[[Quote], Any], SortDirection],
) -> SortDefinition[Quote]:
    return SortDefinition(
        name=name,
        entity_type=Quote,
        section=section,
        keys=tuple(SortKey(key, direction) for key, direction in keys),
    )


def _collection_sort(
    name: str,
    section: Callable[[Collection], str],
    *keys: tuple[Callable[[Collection], Any], SortDirection],
) -> SortDefinition[Collection]:
    return SortDefinition(
        name=name,
        entity_type=Collection,
        section=section,
        keys=tuple(SortKey(key, direction) for key, direction in keys),
    )


QUOTE_SORTS: tuple[SortDefinition[Quote], ...] = (
    _quote_sort(
        "Date Created (Newest)",
        lambda q: q.month_created,
        (lambda q: q.created_at, DESCENDING),
    ),
    _quote_sort(
        "Date Created (Oldest)",
        lambda q: q.month_created,
        (lambda q: q.created_at, ASCENDING),
    ),
    _quote_sort(
        "Date Changed (Newest)",
        lambda q: q.month_changed,
        (lambda q: q.updated_at, DESCENDING),
    ),
    _quote_sort(
        "Date Changed (Oldest)",
        lambda q: q.month_changed,
        (lambda q: q.updated_at, ASCENDING),
    ),
    _quote_sort(
        "Text (A-Z)",
        lambda q: q.text_initial,
        (_text, ASCENDING),
    ),
    _quote_sort(
        "Text (Z-A)",
        lambda q: q.text_initial,
        (_text, DESCENDING),
    ),
    _quote_sort(
        "Author First Name (A-Z)",
        lambda q: q.author_first_name_section,
        (_first_last_text, ASCENDING),
    ),
    _quote_sort(
        "Author First Name (Z-A)",
        lambda q: q.author_first_name_section,
        (_first_last_text, DESCENDING),
    ),
    _quote_sort(
        "Author Last Name (A-Z)",
        lambda q: q.author_last_name_section,
        (_last_first_text, ASCENDING),
    ),
    _quote_sort(
        "Author Last Name (Z-A)",
        lambda q: q.author_last_name_section,
        (_last_first_text, DESCENDING),
    ),
    _quote_sort(
        "Tags (A-Z)",
        lambda q: q.tags_section,
        (lambda q: q.tags_section, ASCENDING),
        (_text, ASCENDING),
    ),
    _quote_sort(
        "Tags (Z-A)",
        lambda q: q.tags_section,
        (lambda q: q.tags_section, DESCENDING),
        (_text, ASCENDING),
    ),
)

COLLECTION_SORTS: tuple[SortDefinition[Collection], ...] = (
    _collection_sort(
        "Name (A-Z)",
        lambda c: c.name_initial,
        (lambda c: c.name, ASCENDING),
    ),
    _collection_sort(
        "Name (Z-A)",
        lambda c: c.name_initial,
        (lambda c: c.name, DESCENDING),
    ),
    _collection_sort(
        "Date Created (Newest)",
        lambda c: day_label(c.created_at),
        (lambda c: c.created_at, DESCENDING),
    ),
    _collection_sort(
        "Date Created (Oldest)",
        lambda c: day_label(c.created_at),
        (lambda c: c.created_at, ASCENDING),
    ),
    _collection_sort(
        "Date Changed (Newest)",
        lambda c: day_label(c.updated_at),
        (lambda c: c.updated_at, DESCENDING),
    ),
    _collection_sort(
        "Date Changed (Oldest)",
        lambda c: day_label(c.updated_at),
        (lambda c: c.updated_at, ASCENDING),
    ),
)


def create_default_registry(preferences: PreferenceStore | None = None) -> SortRegistry:
    """Create a registry holding the built-in quote and collection sorts."""
    registry = SortRegistry(preferences)
    for sort in (*QUOTE_SORTS, *COLLECTION_SORTS):
        registry.register(sort)
    return registry
