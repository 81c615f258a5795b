"""Conversion between image files and ``data:image/png;base64,...`` URIs."""

import base64
import binascii
import contextlib
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from clipbox.config import TEMP_PREFIX
from clipbox.errors import CodecIOError, InvalidEncodingError, MalformedInputError

logger = logging.getLogger(__name__)

DATA_URI_PREFIX = "data:image/png;base64,"


def encode_bytes_to_data_uri(data: bytes) -> str:
    return DATA_URI_PREFIX + base64.b64encode(data).decode("ascii")


def encode_file_to_data_uri(path: str | Path) -> str:
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise CodecIOError(f"Failed to read image file: {path}", e) from e
    return encode_bytes_to_data_uri(data)


def decode_data_uri(data_uri: str) -> bytes:
    parts = data_uri.split(",")
    if len(parts) < 2:
        raise MalformedInputError("Invalid base64 image format")
    payload = parts[1].strip()
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidEncodingError("Failed to decode base64", e) from e


def make_temp_path(suffix: str = ".png") -> Path:
    """Create an empty, uniquely named temp file and return its path."""
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
    os.close(fd)
    return Path(name)


def remove_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove temporary file %s", path)


def decode_data_uri_to_temp_file(data_uri: str) -> Path:
    """Decode a data URI into a fresh temp file. The caller must delete it."""
    image_data = decode_data_uri(data_uri)
    try:
        path = make_temp_path()
    except OSError as e:
        raise CodecIOError("Failed to create temp file", e) from e
    try:
        path.write_bytes(image_data)
    except OSError as e:
        remove_quietly(path)
        raise CodecIOError(f"Failed to write temp file: {path}", e) from e
    return path


@contextlib.contextmanager
def temp_image_file(data_uri: str) -> Iterator[Path]:
    path = decode_data_uri_to_temp_file(data_uri)
    try:
        yield path
    finally:
        remove_quietly(path)
