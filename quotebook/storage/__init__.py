"""Quote library storage layer.

- **Backends**: SQLite and in-memory key/value stores with transactions
- **Repository pattern**: model conversion for collections and quotes
- **Event system**: change notifications for every mutation
- **Live queries**: sectioned results that refresh on change events
- **Store**: validated mutations, bulk edits and plain-text export
"""

from quotebook.storage.backends import BaseBackend, MemoryBackend, SQLiteBackend
from quotebook.storage.events import Event, EventBus, EventPublisher, EventType
from quotebook.storage.live import LiveQuery
from quotebook.storage.preferences import PreferenceStore
from quotebook.storage.query import (
    Condition,
    Operator,
    Query,
    all_of,
    quote_predicate,
    text_filter,
)
from quotebook.storage.repository import (
    CollectionRepository,
    QuoteRepository,
    Repository,
    RepositoryManager,
    StorageBackend,
)
from quotebook.storage.store import QuoteStore

__all__ = [
    # Backends
    "BaseBackend",
    "MemoryBackend",
    "SQLiteBackend",
    # Repository
    "StorageBackend",
    "Repository",
    "CollectionRepository",
    "QuoteRepository",
    "RepositoryManager",
    # Events
    "EventType",
    "Event",
    "EventBus",
    "EventPublisher",
    # Queries
    "Operator",
    "Condition",
    "Query",
    "all_of",
    "text_filter",
    "quote_predicate",
    "LiveQuery",
    # Store
    "PreferenceStore",
    "QuoteStore",
]
