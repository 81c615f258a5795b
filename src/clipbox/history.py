import logging
import threading
from collections import deque
from collections.abc import Iterable

from clipbox.config import MAX_HISTORY_SIZE
from clipbox.models import ContentKind, HistoryEntry

logger = logging.getLogger(__name__)


class HistoryStore:
    """Bounded, most-recent-first clipboard history shared across threads."""

    def __init__(self, capacity: int = MAX_HISTORY_SIZE):
        self._capacity = capacity
        self._entries: deque[HistoryEntry] = deque()
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def push_front(self, entry: HistoryEntry) -> HistoryEntry | None:
        """Insert ``entry`` as newest. Returns the evicted oldest entry, if any."""
        with self._lock:
            self._entries.appendleft(entry)
            if len(self._entries) > self._capacity:
                return self._entries.pop()
        return None

    def snapshot(self) -> list[HistoryEntry]:
        with self._lock:
            return list(self._entries)

    def replace(self, entries: Iterable[HistoryEntry]) -> None:
        new_entries = []
        seen_ids = set()
        for entry in entries:
            if entry.id in seen_ids:
                logger.warning("Dropping duplicate history entry id %s", entry.id)
                continue
            seen_ids.add(entry.id)
            new_entries.append(entry)
        if len(new_entries) > self._capacity:
            logger.warning(
                "Replacement history has %d entries, keeping the newest %d", len(new_entries), self._capacity
            )
            new_entries = new_entries[: self._capacity]
        with self._lock:
            self._entries = deque(new_entries)

    def get(self, entry_id: str) -> HistoryEntry | None:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    return entry
        return None

    def remove(self, entry_id: str) -> bool:
        with self._lock:
            for entry in self._entries:
                if entry.id == entry_id:
                    self._entries.remove(entry)
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def search(self, query: str, limit: int | None = None) -> list[HistoryEntry]:
        """Case-insensitive substring match over text entries, newest first."""
        needle = query.strip().lower()
        if not needle:
            return []
        results = []
        for entry in self.snapshot():
            if entry.kind == ContentKind.TEXT and needle in entry.content.lower():
                results.append(entry)
                if limit is not None and len(results) >= limit:
                    break
        return results
