from datetime import datetime

import pytest

from clipbox.clipboard import ClipboardPort
from clipbox.history import HistoryStore
from clipbox.models import ClipboardSample, ContentKind, HistoryEntry, new_entry_id
from clipbox.storage import HistoryStorage

# Smallest valid PNG header (signature + IHDR) for 100x50, padded
PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n"
    + b"\x00\x00\x00\rIHDR"
    + (100).to_bytes(4, "big")
    + (50).to_bytes(4, "big")
    + b"\x00" * 100
)


class FakePort(ClipboardPort):
    """Scripted clipboard: each read pops the next queued sample, then repeats the last one."""

    def __init__(self, samples=None):
        self.samples = list(samples or [])
        self.current = ClipboardSample.empty()
        self.reads = 0
        self.written_text: list[str] = []
        self.written_images: list[bytes] = []
        self.read_error: Exception | None = None
        self.write_error: Exception | None = None

    def queue(self, *samples) -> None:
        for sample in samples:
            if isinstance(sample, str):
                sample = ClipboardSample.text(sample)
            self.samples.append(sample)

    def read_clipboard(self) -> ClipboardSample:
        self.reads += 1
        if self.read_error is not None:
            raise self.read_error
        if self.samples:
            self.current = self.samples.pop(0)
        return self.current

    def write_text(self, content: str) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.written_text.append(content)

    def _write_image_file(self, path) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.written_images.append(path.read_bytes())


@pytest.fixture
def fake_port():
    return FakePort()


@pytest.fixture
def history():
    return HistoryStore()


@pytest.fixture
def storage():
    mgr = HistoryStorage(db_path=":memory:")
    yield mgr
    mgr.close()


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "image.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def make_entry():
    """Factory fixture to create HistoryEntry instances for testing."""

    def _make_entry(
        content: str = "hello world",
        kind: ContentKind = ContentKind.TEXT,
        image_path: str | None = None,
        entry_id: str | None = None,
    ) -> HistoryEntry:
        return HistoryEntry(
            id=entry_id or new_entry_id(),
            content=content,
            created_at=datetime.now().replace(microsecond=0),
            kind=kind,
            image_path=image_path,
        )

    return _make_entry


@pytest.fixture
def png_bytes():
    return PNG_BYTES
