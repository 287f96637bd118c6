"""In-memory backend used by tests and throwaway libraries."""

from contextlib import contextmanager
from copy import deepcopy

from .base import BaseBackend, Record, split_key


class MemoryBackend(BaseBackend):
    """Keeps records in a dictionary; a transaction works on a snapshot.

    Nested transactions are rejected. The repository manager joins nested
    ``transaction()`` calls before they reach the backend.
    """

    def __init__(self):
        self._committed: dict[str, Record] = {}
        self._pending: dict[str, Record] | None = None

    def __len__(self) -> int:
        """Number of committed records."""
        return len(self._committed)

    @property
    def _records(self) -> dict[str, Record]:
        return self._committed if self._pending is None else self._pending

    def read(self, key: str) -> Record | None:
        data = self._records.get(key)
        return deepcopy(data) if data is not None else None

    def write(self, key: str, data: Record) -> None:
        split_key(key)
        self._records[key] = deepcopy(data)

    def delete(self, key: str) -> bool:
        return self._records.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        return key in self._records

    def records(self, prefix: str = "") -> list[tuple[str, Record]]:
        return [
            (key, deepcopy(data))
            for key, data in sorted(self._records.items())
            if key.startswith(prefix)
        ]

    def keys(self, prefix: str = "") -> list[str]:
        return sorted(key for key in self._records if key.startswith(prefix))

    def clear(self) -> None:
        self._records.clear()

    def close(self) -> None:
        pass

    @contextmanager
    def begin_transaction(self):
        if self._pending is not None:
            raise RuntimeError("Already in a transaction")

        self._pending = deepcopy(self._committed)
        try:
            yield
        except Exception:
            self._pending = None
            raise
        self._committed, self._pending = self._pending, None
