import logging
from collections.abc import Iterable
from pathlib import Path

from clipbox.classifier import is_image_data_uri
from clipbox.clipboard import ClipboardPort, get_clipboard_port
from clipbox.codec import encode_file_to_data_uri, temp_image_file
from clipbox.config import POLL_INTERVAL
from clipbox.errors import CodecError
from clipbox.history import HistoryStore
from clipbox.models import ContentKind, HistoryEntry
from clipbox.monitor import ClipboardMonitor, Listener

logger = logging.getLogger(__name__)


class ClipboardService:
    """Owns the shared history, the clipboard port and the monitor.

    Every operation a host (menu bar app, CLI) needs goes through here, so the
    monitor thread and the caller's thread share exactly one history and one
    last-seen guard.
    """

    def __init__(
        self,
        port: ClipboardPort | None = None,
        history: HistoryStore | None = None,
        poll_interval: float = POLL_INTERVAL,
    ):
        self.port = port if port is not None else get_clipboard_port()
        self.history = history if history is not None else HistoryStore()
        self.monitor = ClipboardMonitor(self.history, self.port, poll_interval=poll_interval)

    def start_monitor(self) -> None:
        self.monitor.start()

    def stop_monitor(self, timeout: float | None = None) -> None:
        self.monitor.stop(timeout)

    def subscribe(self, callback: Listener) -> None:
        self.monitor.subscribe(callback)

    def get_history(self) -> list[HistoryEntry]:
        return self.history.snapshot()

    def replace_history(self, entries: Iterable[HistoryEntry]) -> None:
        self.history.replace(entries)

    def remove_entry(self, entry_id: str) -> bool:
        return self.history.remove(entry_id)

    def clear_history(self) -> None:
        self.history.clear()

    def search_history(self, query: str, limit: int | None = None) -> list[HistoryEntry]:
        return self.history.search(query, limit)

    def write_text(self, content: str) -> None:
        self.port.write_text(content)

    def write_image_from_file(self, path: str | Path) -> None:
        self.port.write_image_from_file(path)

    def write_image_from_data_uri(self, data_uri: str) -> None:
        with temp_image_file(data_uri) as path:
            self.port.write_image_from_file(path)

    def get_image_as_data_uri(self, path: str | Path) -> str:
        return encode_file_to_data_uri(path)

    def copy_entry(self, entry: HistoryEntry) -> None:
        """Put a recorded entry back on the clipboard without recording it again."""
        with self.monitor.expect_write(self._read_back_form(entry)):
            if entry.kind == ContentKind.IMAGE and entry.image_path and Path(entry.image_path).exists():
                self.write_image_from_file(entry.image_path)
            elif entry.kind == ContentKind.IMAGE and is_image_data_uri(entry.content):
                self.write_image_from_data_uri(entry.content)
            else:
                self.write_text(entry.content)
        logger.info("Copied %s entry %s to clipboard", entry.kind.value, entry.id)

    def _read_back_form(self, entry: HistoryEntry) -> str:
        # Some ports re-encode images on read, so the bytes read back can differ from the entry
        if entry.kind != ContentKind.IMAGE or not is_image_data_uri(entry.content):
            return entry.content
        try:
            return self.port.canonical_image(entry.content)
        except CodecError as e:
            logger.warning("Could not normalize image entry %s: %s", entry.id, e)
            return entry.content
