"""Platform clipboard access behind a single read/write interface."""

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path

from clipbox.errors import PortNotFoundError, PortUnavailableError
from clipbox.models import ClipboardSample

logger = logging.getLogger(__name__)


class ClipboardPort(ABC):
    @abstractmethod
    def read_clipboard(self) -> ClipboardSample:
        """Return the current clipboard content, or an empty sample."""

    @abstractmethod
    def write_text(self, content: str) -> None:
        """Replace the clipboard content with ``content``."""

    def write_image_from_file(self, path: str | Path) -> None:
        path = Path(path)
        if not path.exists():
            raise PortNotFoundError(path)
        self._write_image_file(path)

    @abstractmethod
    def _write_image_file(self, path: Path) -> None:
        """Put the PNG at ``path`` on the clipboard. ``path`` is known to exist."""

    def canonical_image(self, data_uri: str) -> str:
        """Return the data URI a read would produce right after ``data_uri`` is written."""
        return data_uri


class UnsupportedClipboardPort(ClipboardPort):
    def __init__(self, platform: str = sys.platform):
        self._platform = platform

    def _unavailable(self) -> PortUnavailableError:
        return PortUnavailableError(f"Unsupported platform: {self._platform}")

    def read_clipboard(self) -> ClipboardSample:
        raise self._unavailable()

    def write_text(self, content: str) -> None:
        raise self._unavailable()

    def _write_image_file(self, path: Path) -> None:
        raise self._unavailable()


def get_clipboard_port(platform: str = sys.platform) -> ClipboardPort:
    if platform == "darwin":
        from clipbox.clipboard_macos import MacClipboardPort

        return MacClipboardPort()
    if platform == "win32":
        from clipbox.clipboard_windows import WindowsClipboardPort

        return WindowsClipboardPort()
    if platform.startswith("linux"):
        from clipbox.clipboard_linux import LinuxClipboardPort

        return LinuxClipboardPort()
    logger.warning("No clipboard support for platform %s", platform)
    return UnsupportedClipboardPort(platform)
