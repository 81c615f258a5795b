import sqlite3
import threading
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from clipbox.config import DB_PATH
from clipbox.models import ContentKind, HistoryEntry


SCHEMA = """
CREATE TABLE IF NOT EXISTS history_entries (
    position    INTEGER PRIMARY KEY,
    id          TEXT NOT NULL UNIQUE,
    content     TEXT NOT NULL,
    kind        TEXT NOT NULL CHECK(kind IN ('text', 'image')),
    image_path  TEXT,
    created_at  TEXT NOT NULL
);
"""


class HistoryStorage:
    """Persists history snapshots between runs; the in-memory store stays authoritative."""

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = str(db_path) if db_path else str(DB_PATH)
        self._lock = threading.Lock()
        self._conn = sqlite3.connect(self._db_path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA journal_mode=WAL")
        self.init_db()

    def init_db(self) -> None:
        with self._lock:
            self._conn.executescript(SCHEMA)
            self._conn.commit()

    def save(self, entries: Iterable[HistoryEntry]) -> None:
        rows = [
            (position, e.id, e.content, e.kind.value, e.image_path, e.created_at.isoformat())
            for position, e in enumerate(entries)
        ]
        with self._lock:
            with self._conn:
                self._conn.execute("DELETE FROM history_entries")
                self._conn.executemany(
                    """INSERT INTO history_entries (position, id, content, kind, image_path, created_at)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    rows,
                )

    def load(self) -> list[HistoryEntry]:
        with self._lock:
            cursor = self._conn.execute("SELECT * FROM history_entries ORDER BY position")
            return [self._row_to_entry(row) for row in cursor.fetchall()]

    def count(self) -> int:
        with self._lock:
            cursor = self._conn.execute("SELECT COUNT(*) FROM history_entries")
            return cursor.fetchone()[0]

    def clear(self) -> None:
        with self._lock:
            with self._conn:
                self._conn.execute("DELETE FROM history_entries")

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            content=row["content"],
            created_at=datetime.fromisoformat(row["created_at"]),
            kind=ContentKind(row["kind"]),
            image_path=row["image_path"],
        )
