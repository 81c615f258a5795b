import contextlib
import logging
import threading
from collections.abc import Callable, Iterator

from clipbox.classifier import Outcome, classify
from clipbox.clipboard import ClipboardPort
from clipbox.config import POLL_INTERVAL
from clipbox.errors import MonitorAlreadyRunningError
from clipbox.history import HistoryStore
from clipbox.models import ContentKind, HistoryEntry

logger = logging.getLogger(__name__)

CLIPBOARD_CHANGED = "clipboard-changed"

Listener = Callable[[str, str], None]


class ClipboardMonitor:
    def __init__(self, history: HistoryStore, port: ClipboardPort, poll_interval: float = POLL_INTERVAL):
        self._history = history
        self._port = port
        self._poll_interval = poll_interval
        self._listeners: list[Listener] = []
        self._last_seen_content = ""
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def last_seen_content(self) -> str:
        with self._state_lock:
            return self._last_seen_content

    def subscribe(self, callback: Listener) -> None:
        with self._state_lock:
            self._listeners.append(callback)

    def unsubscribe(self, callback: Listener) -> None:
        with self._state_lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def start(self) -> None:
        with self._state_lock:
            if self._thread is not None and self._thread.is_alive():
                raise MonitorAlreadyRunningError("Clipboard monitor is already running")
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._run, name="clipbox-monitor", daemon=True)
            self._thread.start()
        logger.info("Clipboard monitor started (interval %.2fs)", self._poll_interval)

    def stop(self, timeout: float | None = None) -> None:
        with self._state_lock:
            thread = self._thread
        if thread is None:
            return
        self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
        if thread.is_alive():
            logger.warning("Clipboard monitor did not stop within %s seconds", timeout)
            return
        with self._state_lock:
            if self._thread is thread:
                self._thread = None
        logger.info("Clipboard monitor stopped")

    def _run(self) -> None:
        while not self._stop_event.wait(self._poll_interval):
            self.check_clipboard()

    def mark_seen(self, content: str) -> None:
        """Treat ``content`` as already observed so the next read of it is not recorded."""
        with self._state_lock:
            self._last_seen_content = content

    @contextlib.contextmanager
    def expect_write(self, content: str) -> Iterator[None]:
        """Mark ``content`` seen before a clipboard write, so no tick can record it mid-write.

        If the write raises, the previous last-seen content is restored.
        """
        with self._state_lock:
            previous = self._last_seen_content
            self._last_seen_content = content
        try:
            yield
        except BaseException:
            with self._state_lock:
                if self._last_seen_content == content:
                    self._last_seen_content = previous
            raise

    def check_clipboard(self) -> bool:
        try:
            sample = self._port.read_clipboard()
        except Exception:
            logger.exception("Error reading clipboard")
            return False

        with self._state_lock:
            outcome = classify(sample, self._last_seen_content)
            if outcome == Outcome.IGNORE:
                return False
            self._last_seen_content = sample.content
            listeners = list(self._listeners)

        kind = ContentKind.TEXT if outcome == Outcome.NOVEL_TEXT else ContentKind.IMAGE
        entry = HistoryEntry.create(sample.content, kind)
        self._history.push_front(entry)
        logger.info("Recorded %s entry (%d chars)", kind.value, len(sample.content))

        for listener in listeners:
            try:
                listener(CLIPBOARD_CHANGED, sample.content)
            except Exception:
                logger.exception("Clipboard change listener failed")
        return True
