"""Fixtures for CLI tests.

Every test gets its own data directory and config home, and runs from an
empty working directory so no real configuration is picked up.
"""

from contextlib import contextmanager

import pytest
from click.testing import CliRunner

from quotebook.cli.main import DATABASE_NAME, cli
from quotebook.storage.backends.sqlite import SQLiteBackend
from quotebook.storage.store import QuoteStore


@pytest.fixture(autouse=True)
def isolated_paths(monkeypatch, temp_dir):
    """Point config lookup and the working directory at the temp dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.chdir(temp_dir)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def data_dir(temp_dir):
    path = temp_dir / "data"
    path.mkdir()
    return path


@pytest.fixture
def invoke(runner, data_dir):
    """Run the CLI against the test data directory."""

    def run(*args, input=None):
        return runner.invoke(
            cli, ["--no-color", "--data-dir", str(data_dir), *args], input=input
        )

    return run


@pytest.fixture
def open_library(data_dir):
    """Open the test library directly, outside the CLI."""

    @contextmanager
    def library():
        backend = SQLiteBackend(data_dir / DATABASE_NAME)
        try:
            yield QuoteStore(backend)
        finally:
            backend.close()

    return library


@pytest.fixture
def stoics_library(open_library):
    """Library holding 'Stoics' with an untagged and a tagged quote.

    Returns:
        Tuple of (collection id, 'Memento mori' id, 'Amor fati' id)
    """
    with open_library() as store:
        collection = store.create_collection("Stoics")
        memento = store.create_quote(
            collection.id,
            "Memento mori",
            author_first_name="Marcus",
            author_last_name="Aurelius",
        )
        amor = store.create_quote(collection.id, "Amor fati", tags="philosophy")
    return collection.id, memento.id, amor.id
