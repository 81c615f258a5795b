import threading
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ContentKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"


class SampleKind(str, Enum):
    EMPTY = "empty"
    TEXT = "text"
    IMAGE = "image"


_id_lock = threading.Lock()
_last_id = 0


def new_entry_id() -> str:
    """Return a nanosecond-timestamp id, strictly increasing within the process."""
    global _last_id
    with _id_lock:
        candidate = time.time_ns()
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


@dataclass(frozen=True)
class ClipboardSample:
    """One raw clipboard read, before classification.

    For IMAGE samples ``content`` is already a data URI.
    """

    kind: SampleKind
    content: str = ""

    @classmethod
    def empty(cls) -> "ClipboardSample":
        return cls(SampleKind.EMPTY)

    @classmethod
    def text(cls, content: str) -> "ClipboardSample":
        return cls(SampleKind.TEXT, content)

    @classmethod
    def image(cls, data_uri: str) -> "ClipboardSample":
        return cls(SampleKind.IMAGE, data_uri)


@dataclass
class HistoryEntry:
    id: str
    content: str
    created_at: datetime
    kind: ContentKind = ContentKind.TEXT
    image_path: str | None = None

    @classmethod
    def create(cls, content: str, kind: ContentKind = ContentKind.TEXT, image_path: str | None = None) -> "HistoryEntry":
        return cls(
            id=new_entry_id(),
            content=content,
            created_at=datetime.now().replace(microsecond=0),
            kind=kind,
            image_path=image_path,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "kind": self.kind.value,
            "image_path": self.image_path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "HistoryEntry":
        return cls(
            id=str(data["id"]),
            content=data["content"],
            created_at=datetime.fromisoformat(data["created_at"]),
            kind=ContentKind(data.get("kind", ContentKind.TEXT.value)),
            image_path=data.get("image_path"),
        )
