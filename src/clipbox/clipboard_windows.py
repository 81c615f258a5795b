import logging
from pathlib import Path

import pyperclip
from PIL import Image, ImageGrab

from clipbox.clipboard import ClipboardPort
from clipbox.codec import encode_bytes_to_data_uri
from clipbox.errors import PortExecutionError, PortUnavailableError
from clipbox.imaging import image_to_dib_bytes, image_to_png_bytes, normalize_png_data_uri
from clipbox.models import ClipboardSample

logger = logging.getLogger(__name__)

# CF_DIB has no alpha channel, so images read back as RGB
DIB_MODE = "RGB"


class WindowsClipboardPort(ClipboardPort):
    """Clipboard access through pyperclip for text, Pillow and pywin32 for images."""

    def __init__(self):
        try:
            import win32clipboard
            import win32con
        except ImportError as e:
            raise PortUnavailableError("pywin32 is required for clipboard access on Windows", e) from e
        self._win32clipboard = win32clipboard
        self._win32con = win32con

    def read_clipboard(self) -> ClipboardSample:
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            raise PortExecutionError("Failed to read clipboard text", str(e), e) from e
        if text and text.strip():
            return ClipboardSample.text(text)
        return self._read_image()

    def _read_image(self) -> ClipboardSample:
        try:
            grabbed = ImageGrab.grabclipboard()
        except OSError as e:
            raise PortExecutionError("Failed to read clipboard image", str(e), e) from e
        # A list of file names comes back when files, not pixels, are copied
        if not isinstance(grabbed, Image.Image):
            return ClipboardSample.empty()
        return ClipboardSample.image(encode_bytes_to_data_uri(image_to_png_bytes(grabbed, DIB_MODE)))

    def write_text(self, content: str) -> None:
        try:
            pyperclip.copy(content)
        except pyperclip.PyperclipException as e:
            raise PortExecutionError("Failed to set clipboard content", str(e), e) from e

    def _write_image_file(self, path: Path) -> None:
        try:
            with Image.open(path) as image:
                dib = image_to_dib_bytes(image)
        except OSError as e:
            raise PortExecutionError("Failed to copy image to clipboard", f"{e}. Image path: {path}", e) from e

        clipboard = self._win32clipboard
        try:
            clipboard.OpenClipboard()
        except clipboard.error as e:
            raise PortExecutionError("Failed to open clipboard", str(e), e) from e
        try:
            clipboard.EmptyClipboard()
            clipboard.SetClipboardData(self._win32con.CF_DIB, dib)
        except clipboard.error as e:
            raise PortExecutionError("Failed to copy image to clipboard", f"{e}. Image path: {path}", e) from e
        finally:
            clipboard.CloseClipboard()
        logger.debug("Copied %s to clipboard as CF_DIB (%d bytes)", path, len(dib))

    def canonical_image(self, data_uri: str) -> str:
        return normalize_png_data_uri(data_uri, DIB_MODE)
