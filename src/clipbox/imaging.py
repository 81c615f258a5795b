"""Pillow helpers for the clipboard ports that exchange images as PIL objects."""

from io import BytesIO

from PIL import Image

from clipbox.codec import decode_data_uri, encode_bytes_to_data_uri
from clipbox.errors import InvalidEncodingError

BMP_FILE_HEADER_SIZE = 14


def image_to_png_bytes(image: Image.Image, mode: str | None = None) -> bytes:
    if mode is not None and image.mode != mode:
        image = image.convert(mode)
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def image_to_dib_bytes(image: Image.Image) -> bytes:
    """Return the CF_DIB payload for ``image``: a BMP without its file header."""
    if image.mode != "RGB":
        image = image.convert("RGB")
    buf = BytesIO()
    image.save(buf, format="BMP")
    return buf.getvalue()[BMP_FILE_HEADER_SIZE:]


def normalize_png_data_uri(data_uri: str, mode: str | None = None) -> str:
    """Re-encode a PNG data URI the way a clipboard read through Pillow would produce it."""
    raw = decode_data_uri(data_uri)
    try:
        with Image.open(BytesIO(raw)) as image:
            image.load()
            return encode_bytes_to_data_uri(image_to_png_bytes(image, mode))
    except (OSError, ValueError) as e:
        raise InvalidEncodingError("Data URI does not hold a readable image", e) from e
