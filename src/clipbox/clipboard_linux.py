import logging
import subprocess
from pathlib import Path

import pyperclip
from PIL import Image, ImageGrab

from clipbox.clipboard import ClipboardPort
from clipbox.codec import encode_bytes_to_data_uri
from clipbox.config import CLIPBOARD_TIMEOUT
from clipbox.errors import PortExecutionError, PortUnavailableError
from clipbox.imaging import image_to_png_bytes, normalize_png_data_uri
from clipbox.models import ClipboardSample

logger = logging.getLogger(__name__)

XCLIP = ["xclip", "-selection", "clipboard"]
PNG_TARGET = "image/png"


class LinuxClipboardPort(ClipboardPort):
    """Clipboard access through pyperclip and Pillow; image writes go through xclip."""

    def read_clipboard(self) -> ClipboardSample:
        try:
            text = pyperclip.paste()
        except pyperclip.PyperclipException as e:
            raise PortUnavailableError("No clipboard mechanism found (install xclip, xsel or wl-clipboard)", e) from e
        if text and text.strip():
            return ClipboardSample.text(text)
        return self._read_image()

    def _read_image(self) -> ClipboardSample:
        try:
            grabbed = ImageGrab.grabclipboard()
        except NotImplementedError as e:
            raise PortUnavailableError("xclip or wl-paste is required to read clipboard images", e) from e
        except OSError as e:
            raise PortExecutionError("Failed to read clipboard image", str(e), e) from e
        if not isinstance(grabbed, Image.Image):
            return ClipboardSample.empty()
        return ClipboardSample.image(encode_bytes_to_data_uri(image_to_png_bytes(grabbed)))

    def write_text(self, content: str) -> None:
        try:
            pyperclip.copy(content)
        except pyperclip.PyperclipException as e:
            raise PortUnavailableError("No clipboard mechanism found (install xclip, xsel or wl-clipboard)", e) from e

    def _write_image_file(self, path: Path) -> None:
        # xclip forks to serve the selection, and the fork would keep captured pipes open
        try:
            proc = subprocess.Popen(
                XCLIP + ["-t", PNG_TARGET, "-i", str(path)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                close_fds=True,
            )
        except FileNotFoundError as e:
            raise PortUnavailableError("Clipboard utility not found: xclip", e) from e
        try:
            proc.wait(timeout=CLIPBOARD_TIMEOUT)
        except subprocess.TimeoutExpired as e:
            proc.kill()
            proc.wait()
            raise PortExecutionError(
                "Failed to copy image to clipboard", f"xclip timed out after {CLIPBOARD_TIMEOUT}s. Image path: {path}", e
            ) from e
        if proc.returncode != 0:
            raise PortExecutionError(
                "Failed to copy image to clipboard", f"xclip exited with {proc.returncode}. Image path: {path}"
            )
        logger.debug("Copied %s to clipboard with xclip", path)

    def canonical_image(self, data_uri: str) -> str:
        return normalize_png_data_uri(data_uri)
