import threading
import time
from unittest.mock import MagicMock

import pytest

from clipbox.errors import MonitorAlreadyRunningError, PortExecutionError
from clipbox.models import ClipboardSample, ContentKind
from clipbox.monitor import CLIPBOARD_CHANGED, ClipboardMonitor

IMAGE_URI = "data:image/png;base64,iVBORw0KGgo="
NOISE = "execution error: Can't make current clipboard into type PNG picture. (-1700)"


@pytest.fixture
def monitor(history, fake_port):
    mon = ClipboardMonitor(history, fake_port, poll_interval=0.01)
    yield mon
    mon.stop(timeout=1)


def _contents(history):
    return [e.content for e in history.snapshot()]


class TestCheckClipboard:
    def test_text_change(self, monitor, fake_port, history):
        fake_port.queue("hello world")
        assert monitor.check_clipboard() is True

        entries = history.snapshot()
        assert len(entries) == 1
        assert entries[0].kind == ContentKind.TEXT
        assert entries[0].content == "hello world"
        assert entries[0].image_path is None

    def test_repeated_reads_record_once(self, monitor, fake_port, history):
        listener = MagicMock()
        monitor.subscribe(listener)
        fake_port.queue("hello", "hello", "world")

        results = [monitor.check_clipboard() for _ in range(3)]

        assert results == [True, False, True]
        assert _contents(history) == ["world", "hello"]
        assert listener.call_count == 2

    def test_unchanged_clipboard_is_idempotent(self, monitor, fake_port, history):
        listener = MagicMock()
        monitor.subscribe(listener)
        fake_port.queue("same")
        for _ in range(10):
            monitor.check_clipboard()
        assert len(history) == 1
        listener.assert_called_once_with(CLIPBOARD_CHANGED, "same")

    def test_noise_never_recorded(self, monitor, fake_port, history):
        fake_port.queue(NOISE, "hello")
        monitor.check_clipboard()
        monitor.check_clipboard()
        assert _contents(history) == ["hello"]

    def test_noise_does_not_update_last_seen(self, monitor, fake_port):
        fake_port.queue("hello", NOISE, "hello")
        assert [monitor.check_clipboard() for _ in range(3)] == [True, False, False]
        assert monitor.last_seen_content == "hello"

    def test_empty_clipboard_no_entry(self, monitor, fake_port, history):
        fake_port.queue(ClipboardSample.empty())
        assert monitor.check_clipboard() is False
        assert len(history) == 0

    def test_image_sample_recorded_as_image(self, monitor, fake_port, history):
        fake_port.queue(ClipboardSample.image(IMAGE_URI))
        assert monitor.check_clipboard() is True
        entry = history.snapshot()[0]
        assert entry.kind == ContentKind.IMAGE
        assert entry.content == IMAGE_URI
        assert entry.image_path is None

    def test_pass_through_text_recorded_as_image(self, monitor, fake_port, history):
        fake_port.queue(IMAGE_URI)
        monitor.check_clipboard()
        entry = history.snapshot()[0]
        assert entry.kind == ContentKind.IMAGE
        assert entry.content == IMAGE_URI

    def test_capacity_holds_under_many_reads(self, monitor, fake_port, history):
        fake_port.queue(*[f"entry {i}" for i in range(150)])
        for _ in range(150):
            monitor.check_clipboard()
        assert len(history) == 100
        assert "entry 0" not in _contents(history)

    def test_entry_ids_unique(self, monitor, fake_port, history):
        fake_port.queue(*[f"entry {i}" for i in range(20)])
        for _ in range(20):
            monitor.check_clipboard()
        ids = [e.id for e in history.snapshot()]
        assert len(set(ids)) == 20


class TestListeners:
    def test_listener_receives_event_and_content(self, monitor, fake_port):
        listener = MagicMock()
        monitor.subscribe(listener)
        fake_port.queue("payload")
        monitor.check_clipboard()
        listener.assert_called_once_with("clipboard-changed", "payload")

    def test_notifications_follow_insertion_order(self, monitor, fake_port):
        seen = []
        monitor.subscribe(lambda _event, content: seen.append(content))
        fake_port.queue("a", "b", "c")
        for _ in range(3):
            monitor.check_clipboard()
        assert seen == ["a", "b", "c"]

    def test_failing_listener_does_not_block_others(self, monitor, fake_port, history):
        bad = MagicMock(side_effect=RuntimeError("boom"))
        good = MagicMock()
        monitor.subscribe(bad)
        monitor.subscribe(good)
        fake_port.queue("x")
        assert monitor.check_clipboard() is True
        good.assert_called_once()
        assert len(history) == 1

    def test_unsubscribe(self, monitor, fake_port):
        listener = MagicMock()
        monitor.subscribe(listener)
        monitor.unsubscribe(listener)
        fake_port.queue("x")
        monitor.check_clipboard()
        listener.assert_not_called()


class TestErrorHandling:
    def test_port_error_is_not_fatal(self, monitor, fake_port, history):
        fake_port.read_error = PortExecutionError("pbpaste failed", "boom")
        assert monitor.check_clipboard() is False

        fake_port.read_error = None
        fake_port.queue("after error")
        assert monitor.check_clipboard() is True
        assert _contents(history) == ["after error"]

    def test_unexpected_exception_returns_false(self, monitor, fake_port):
        fake_port.read_error = Exception("Test error")
        assert monitor.check_clipboard() is False


class TestMarkSeen:
    def test_mark_seen_suppresses_next_read(self, monitor, fake_port, history):
        monitor.mark_seen("copied back")
        fake_port.queue("copied back")
        assert monitor.check_clipboard() is False
        assert len(history) == 0

    def test_expect_write_marks_before_body(self, monitor, fake_port, history):
        with monitor.expect_write("copied back"):
            fake_port.queue("copied back")
            assert monitor.check_clipboard() is False
        assert monitor.last_seen_content == "copied back"
        assert len(history) == 0

    def test_expect_write_restores_on_error(self, monitor):
        monitor.mark_seen("earlier")
        with pytest.raises(PortExecutionError):
            with monitor.expect_write("copied back"):
                raise PortExecutionError("Failed to set clipboard content")
        assert monitor.last_seen_content == "earlier"

    def test_expect_write_keeps_newer_content_on_error(self, monitor, fake_port):
        with pytest.raises(PortExecutionError):
            with monitor.expect_write("copied back"):
                fake_port.queue("typed meanwhile")
                monitor.check_clipboard()
                raise PortExecutionError("Failed to set clipboard content")
        assert monitor.last_seen_content == "typed meanwhile"


class TestLifecycle:
    def test_not_running_initially(self, monitor):
        assert monitor.running is False

    def test_start_polls_in_background(self, monitor, fake_port, history):
        recorded = threading.Event()
        monitor.subscribe(lambda _event, _content: recorded.set())
        fake_port.queue("background")

        monitor.start()

        assert recorded.wait(timeout=2)
        assert monitor.running is True
        assert _contents(history) == ["background"]

    def test_double_start_raises(self, monitor):
        monitor.start()
        with pytest.raises(MonitorAlreadyRunningError):
            monitor.start()

    def test_stop_joins_thread(self, monitor):
        monitor.start()
        monitor.stop(timeout=2)
        assert monitor.running is False

    def test_stop_without_start_is_noop(self, monitor):
        monitor.stop()
        assert monitor.running is False

    def test_restart_after_stop(self, monitor, fake_port):
        monitor.start()
        monitor.stop(timeout=2)
        monitor.start()
        assert monitor.running is True

    def test_stopped_monitor_stops_reading(self, monitor, fake_port):
        monitor.start()
        monitor.stop(timeout=2)
        reads = fake_port.reads
        time.sleep(0.05)
        assert fake_port.reads == reads
