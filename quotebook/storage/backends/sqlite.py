"""SQLite backend for the on-disk quote library."""

import json
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from .base import BaseBackend, Record, split_key

SCHEMA = """
    CREATE TABLE IF NOT EXISTS records (
        kind TEXT NOT NULL,
        id TEXT NOT NULL,
        data TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (kind, id)
    );
"""

# Prefix matching runs on the joined key so prefixes stay literal text
KEY = "kind || ':' || id"


class SQLiteBackend(BaseBackend):
    """One row per record, keyed by kind and id, data stored as JSON."""

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._lock = threading.RLock()
        self._transaction_depth = 0
        self.conn: sqlite3.Connection | None = sqlite3.connect(
            str(self.db_path), check_same_thread=False
        )
        self.connection.row_factory = sqlite3.Row
        self.connection.execute("PRAGMA journal_mode=WAL")
        self.connection.executescript(SCHEMA)
        self.connection.commit()

    @property
    def connection(self) -> sqlite3.Connection:
        if self.conn is None:
            raise RuntimeError(f"Quote library {self.db_path} is closed")
        return self.conn

    @contextmanager
    def _writing(self) -> Iterator[sqlite3.Connection]:
        """Hold the lock for one write; commit it unless a transaction is open."""
        with self._lock:
            yield self.connection
            if not self._transaction_depth:
                self.connection.commit()

    def read(self, key: str) -> Record | None:
        kind, entity_id = split_key(key)
        with self._lock:
            row = self.connection.execute(
                "SELECT data FROM records WHERE kind = ? AND id = ?",
                (kind, entity_id),
            ).fetchone()
        return json.loads(row["data"]) if row else None

    def write(self, key: str, data: Record) -> None:
        kind, entity_id = split_key(key)
        with self._writing() as conn:
            conn.execute(
                """
                INSERT INTO records (kind, id, data) VALUES (?, ?, ?)
                ON CONFLICT(kind, id) DO UPDATE SET
                    data = excluded.data,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (kind, entity_id, json.dumps(data, sort_keys=True)),
            )

    def delete(self, key: str) -> bool:
        kind, entity_id = split_key(key)
        with self._writing() as conn:
            cursor = conn.execute(
                "DELETE FROM records WHERE kind = ? AND id = ?", (kind, entity_id)
            )
        return cursor.rowcount > 0

    def records(self, prefix: str = "") -> list[tuple[str, Record]]:
        with self._lock:
            rows = self.connection.execute(
                f"SELECT {KEY} AS key, data FROM records "
                f"WHERE substr({KEY}, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        return [(row["key"], json.loads(row["data"])) for row in rows]

    def keys(self, prefix: str = "") -> list[str]:
        with self._lock:
            rows = self.connection.execute(
                f"SELECT {KEY} AS key FROM records "
                f"WHERE substr({KEY}, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            ).fetchall()
        return [row["key"] for row in rows]

    def count(self, prefix: str = "") -> int:
        with self._lock:
            row = self.connection.execute(
                f"SELECT COUNT(*) FROM records WHERE substr({KEY}, 1, ?) = ?",
                (len(prefix), prefix),
            ).fetchone()
        return row[0]

    def clear(self) -> None:
        with self._writing() as conn:
            conn.execute("DELETE FROM records")

    def close(self) -> None:
        with self._lock:
            if self.conn is not None:
                self.conn.close()
                self.conn = None

    @contextmanager
    def begin_transaction(self) -> Iterator[None]:
        """Run the block in one SQLite transaction; inner calls join it."""
        with self._lock:
            outermost = not self._transaction_depth
            if outermost:
                self.connection.execute("BEGIN")
            self._transaction_depth += 1
            try:
                yield
            except Exception:
                self._transaction_depth -= 1
                if outermost:
                    self.connection.rollback()
                raise
            self._transaction_depth -= 1
            if outermost:
                self.connection.commit()
