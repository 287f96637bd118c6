"""Pytest configuration and fixtures."""

import os
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from quotebook.core.models import Collection, Quote
from quotebook.core.sorting import create_default_registry
from quotebook.storage.backends.memory import MemoryBackend
from quotebook.storage.store import QuoteStore


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Keep environment changes from leaking between tests."""
    original_env = os.environ.copy()
    monkeypatch.delenv("QUOTEBOOK_DATA_DIR", raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def backend():
    """In-memory storage backend."""
    return MemoryBackend()


@pytest.fixture
def store(backend):
    """Quote store over the in-memory backend."""
    return QuoteStore(backend)


@pytest.fixture
def registry(store):
    """Sort registry remembering choices in the store's preferences."""
    return create_default_registry(store.preferences)


@pytest.fixture
def stoics(store):
    """Collection 'Stoics' with an untagged and a tagged quote."""
    collection = store.create_collection("Stoics")
    memento = store.create_quote(collection.id, "Memento mori")
    amor = store.create_quote(collection.id, "Amor fati", tags="philosophy")
    return collection, memento, amor


@pytest.fixture
def dated_quotes():
    """Quotes with fixed timestamps across two months, not saved anywhere."""
    return [
        Quote(
            id="q1",
            collection_id="c1",
            text="Memento mori",
            author_first_name="Marcus",
            author_last_name="Aurelius",
            tags="mortality",
            created_at=datetime(2026, 9, 3, 10, 0),
            updated_at=datetime(2026, 10, 1, 9, 0),
        ),
        Quote(
            id="q2",
            collection_id="c1",
            text="Amor fati",
            tags="philosophy, stoicism",
            created_at=datetime(2026, 10, 5, 12, 0),
            updated_at=datetime(2026, 10, 5, 12, 0),
        ),
        Quote(
            id="q3",
            collection_id="c1",
            text="waste no more time arguing",
            author_first_name="Marcus",
            created_at=datetime(2026, 10, 18, 8, 30),
            updated_at=datetime(2026, 10, 18, 8, 30),
        ),
        Quote(
            id="q4",
            collection_id="c1",
            text="We suffer more in imagination",
            author_last_name="Seneca",
            created_at=datetime(2026, 9, 20, 16, 45),
            updated_at=datetime(2026, 9, 20, 16, 45),
        ),
    ]


@pytest.fixture
def sample_collection():
    """A collection with fixed timestamps."""
    return Collection(
        id="c1",
        name="Stoics",
        created_at=datetime(2020, 1, 15, 9, 0),
        updated_at=datetime(2020, 1, 15, 9, 0),
    )
