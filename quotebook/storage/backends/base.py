"""Key/value backend interface shared by the memory and SQLite stores."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Any

Record = dict[str, Any]


def split_key(key: str) -> tuple[str, str]:
    """Split ``"<kind>:<id>"`` into kind and id.

    Raises:
        ValueError: If the key has no kind
    """
    kind, sep, entity_id = key.partition(":")
    if not sep or not kind:
        raise ValueError(f"Record key must look like '<kind>:<id>': {key!r}")
    return kind, entity_id


class BaseBackend(ABC):
    """Abstract key/value store for quotebook records.

    Keys take the form ``"<kind>:<id>"`` so one backend holds collections,
    quotes and preferences side by side. Reads always return copies.
    """

    @abstractmethod
    def read(self, key: str) -> Record | None:
        pass

    @abstractmethod
    def write(self, key: str, data: Record) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """Delete a record; False when there was nothing to delete."""
        pass

    @abstractmethod
    def records(self, prefix: str = "") -> list[tuple[str, Record]]:
        """All ``(key, data)`` pairs whose key starts with ``prefix``."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def begin_transaction(self) -> AbstractContextManager[None]:
        """Group writes so they land together or not at all."""
        pass

    def exists(self, key: str) -> bool:
        return self.read(key) is not None

    def keys(self, prefix: str = "") -> list[str]:
        return [key for key, _ in self.records(prefix)]

    def count(self, prefix: str = "") -> int:
        return len(self.keys(prefix))
