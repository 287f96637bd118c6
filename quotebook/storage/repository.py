"""Repository pattern implementation for quotebook records.

Repositories translate between models and the raw records held by a storage
backend. They do not validate or publish events; the store facade does both.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Generic, Protocol, TypeVar

import msgspec

from quotebook.core.models import Collection, Quote

from .query import Predicate, matches

ModelT = TypeVar("ModelT", Collection, Quote)


class StorageBackend(Protocol):
    """What repositories need from a backend."""

    def read(self, key: str) -> dict[str, Any] | None: ...

    def write(self, key: str, data: dict[str, Any]) -> None: ...

    def delete(self, key: str) -> bool: ...

    def exists(self, key: str) -> bool: ...

    def records(self, prefix: str = "") -> list[tuple[str, dict[str, Any]]]: ...

    def keys(self, prefix: str = "") -> list[str]: ...

    def count(self, prefix: str = "") -> int: ...

    def clear(self) -> None: ...

    def begin_transaction(self) -> AbstractContextManager[None]: ...


class Repository(ABC, Generic[ModelT]):
    """Abstract base repository keyed by ``"<kind>:<id>"``."""

    kind: str

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def _key(self, entity_id: str) -> str:
        return f"{self.kind}:{entity_id}"

    def find(self, entity_id: str) -> ModelT | None:
        """Find a record by ID."""
        data = self.backend.read(self._key(entity_id))
        if data is None:
            return None
        return self._convert(data)

    def find_all(self) -> list[ModelT]:
        """Get all records of this kind."""
        return [self._convert(data) for _, data in self.backend.records(self._key(""))]

    def find_matching(self, predicate: Predicate | None) -> list[ModelT]:
        """Get all records matching a predicate."""
        return [entity for entity in self.find_all() if matches(predicate, entity)]

    def save(self, entity: ModelT) -> None:
        """Save record (insert or update)."""
        self.backend.write(self._key(entity.id), entity.to_dict())

    def delete(self, entity_id: str) -> bool:
        """Delete record by ID."""
        return self.backend.delete(self._key(entity_id))

    def exists(self, entity_id: str) -> bool:
        return self.backend.exists(self._key(entity_id))

    def count(self) -> int:
        return self.backend.count(self._key(""))

    @abstractmethod
    def _convert(self, data: dict[str, Any]) -> ModelT:
        """Convert raw data to a model."""
        pass


class CollectionRepository(Repository[Collection]):
    """Repository for collections."""

    kind = "collection"

    def _convert(self, data: dict[str, Any]) -> Collection:
        try:
            return msgspec.convert(data, Collection)
        except msgspec.ValidationError as e:
            raise ValueError(f"Failed to convert collection data: {e}") from e

    def find_by_name(self, name: str) -> list[Collection]:
        """Find collections by exact name."""
        return [c for c in self.find_all() if c.name == name]


class QuoteRepository(Repository[Quote]):
    """Repository for quotes."""

    kind = "quote"

    def _convert(self, data: dict[str, Any]) -> Quote:
        try:
            return msgspec.convert(data, Quote)
        except msgspec.ValidationError as e:
            raise ValueError(f"Failed to convert quote data: {e}") from e

    def find_by_collection(self, collection_id: str) -> list[Quote]:
        """Find all quotes owned by a collection."""
        return [q for q in self.find_all() if q.collection_id == collection_id]


class RepositoryManager:
    """Owns the repositories of one backend and coordinates transactions."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend
        self.collections = CollectionRepository(backend)
        self.quotes = QuoteRepository(backend)
        self._transaction_depth = 0

    @contextmanager
    def transaction(self):
        """Transaction context manager; nested calls join the outer one."""
        if self._transaction_depth:
            self._transaction_depth += 1
            try:
                yield self
            finally:
                self._transaction_depth -= 1
            return

        self._transaction_depth += 1
        try:
            with self.backend.begin_transaction():
                yield self
        finally:
            self._transaction_depth -= 1

    def get_statistics(self) -> dict[str, Any]:
        """Get repository statistics."""
        quotes = self.quotes.find_all()
        by_collection: dict[str, int] = {}
        for quote in quotes:
            by_collection[quote.collection_id] = (
                by_collection.get(quote.collection_id, 0) + 1
            )

        return {
            "total_collections": self.collections.count(),
            "total_quotes": len(quotes),
            "quotes_by_collection": by_collection,
        }
