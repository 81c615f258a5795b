import logging
from pathlib import Path

from clipbox.clipboard import ClipboardPort
from clipbox.codec import encode_bytes_to_data_uri
from clipbox.errors import PortExecutionError, PortUnavailableError
from clipbox.models import ClipboardSample

logger = logging.getLogger(__name__)

NS_PNG_FILE_TYPE = 4  # NSBitmapImageFileTypePNG


class MacClipboardPort(ClipboardPort):
    """Clipboard access through the general NSPasteboard."""

    def __init__(self):
        try:
            import AppKit
            import Foundation
        except ImportError as e:
            raise PortUnavailableError("pyobjc (AppKit) is required for clipboard access on macOS", e) from e
        self._appkit = AppKit
        self._foundation = Foundation
        self._pasteboard = AppKit.NSPasteboard.generalPasteboard()

    def read_clipboard(self) -> ClipboardSample:
        types = self._pasteboard.types()
        if types is None:
            return ClipboardSample.empty()

        if self._appkit.NSPasteboardTypeString in types:
            text = self._pasteboard.stringForType_(self._appkit.NSPasteboardTypeString)
            if text:
                return ClipboardSample.text(str(text))

        if self._appkit.NSPasteboardTypePNG in types:
            data = self._pasteboard.dataForType_(self._appkit.NSPasteboardTypePNG)
            if data:
                return ClipboardSample.image(encode_bytes_to_data_uri(bytes(data)))

        if self._appkit.NSPasteboardTypeTIFF in types:
            png_bytes = self._tiff_to_png(self._pasteboard.dataForType_(self._appkit.NSPasteboardTypeTIFF))
            if png_bytes:
                return ClipboardSample.image(encode_bytes_to_data_uri(png_bytes))

        return ClipboardSample.empty()

    def _tiff_to_png(self, tiff_data) -> bytes | None:
        if not tiff_data:
            return None
        bitmap_rep = self._appkit.NSBitmapImageRep.imageRepWithData_(tiff_data)
        if not bitmap_rep:
            logger.debug("TIFF clipboard data could not be decoded")
            return None
        png_data = bitmap_rep.representationUsingType_properties_(NS_PNG_FILE_TYPE, None)
        return bytes(png_data) if png_data else None

    def write_text(self, content: str) -> None:
        self._pasteboard.clearContents()
        if not self._pasteboard.setString_forType_(content, self._appkit.NSPasteboardTypeString):
            raise PortExecutionError("Failed to set clipboard text")

    def _write_image_file(self, path: Path) -> None:
        img_data = self._foundation.NSData.dataWithContentsOfFile_(str(path))
        if img_data is None:
            raise PortExecutionError("Failed to copy image to clipboard", f"could not read {path}")
        self._pasteboard.clearContents()
        if not self._pasteboard.setData_forType_(img_data, self._appkit.NSPasteboardTypePNG):
            raise PortExecutionError("Failed to copy image to clipboard", f"Image path: {path}")
