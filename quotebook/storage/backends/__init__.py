"""Pluggable storage backends.

- **SQLiteBackend**: on-disk library, one JSON document per record
- **MemoryBackend**: in-memory storage for tests and previews

Both backends support key/value CRUD and transactions.
"""

from .base import BaseBackend
from .memory import MemoryBackend
from .sqlite import SQLiteBackend

__all__ = [
    "BaseBackend",
    "MemoryBackend",
    "SQLiteBackend",
]
