import base64
import binascii
import struct

from clipbox.config import DATA_DIR


def truncate_text(text: str, max_len: int) -> str:
    single_line = " ".join(text.split())
    if len(single_line) <= max_len:
        return single_line
    return single_line[: max_len - 3] + "..."


def ensure_dirs() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def get_image_dimensions(png_bytes: bytes) -> tuple[int, int]:
    if len(png_bytes) < 24 or png_bytes[:8] != b"\x89PNG\r\n\x1a\n":
        return (0, 0)
    width = struct.unpack(">I", png_bytes[16:20])[0]
    height = struct.unpack(">I", png_bytes[20:24])[0]
    return (width, height)


def image_preview(data_uri: str) -> str:
    """Label an image entry by its size, read from the PNG header inside the data URI."""
    _, _, payload = data_uri.partition(",")
    try:
        # 32 Base64 characters decode to the 24 header bytes holding width and height
        header = base64.b64decode(payload[:32])
    except (binascii.Error, ValueError):
        return "[Image]"
    width, height = get_image_dimensions(header)
    return f"[Image: {width}x{height}]" if width > 0 else "[Image]"
