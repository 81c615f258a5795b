"""Decide whether a clipboard sample is noise, a repeat, or something worth recording.

Polling the clipboard invites two kinds of junk: osascript image probes leave
diagnostic text behind that would otherwise be read back and recorded, and
every tick re-reads whatever is already there. Both are filtered here so the
monitor only has to act on the outcome.
"""

from enum import Enum

from clipbox.config import NOISE_PATTERNS
from clipbox.models import ClipboardSample, SampleKind

IMAGE_URI_PREFIX = "data:image/"
BASE64_MARKER = "base64,"


class Outcome(Enum):
    IGNORE = "ignore"
    PASS_THROUGH = "pass_through"
    NOVEL_TEXT = "novel_text"
    NOVEL_IMAGE = "novel_image"


def is_noise(text: str) -> bool:
    return any(pattern in text for pattern in NOISE_PATTERNS)


def is_image_data_uri(text: str) -> bool:
    return text.startswith(IMAGE_URI_PREFIX) and BASE64_MARKER in text


def classify(sample: ClipboardSample, last_seen: str) -> Outcome:
    if sample.kind == SampleKind.EMPTY or not sample.content.strip():
        return Outcome.IGNORE

    pass_through = False
    if sample.kind == SampleKind.TEXT:
        if is_noise(sample.content):
            return Outcome.IGNORE
        pass_through = is_image_data_uri(sample.content)

    # Repeats are ignored for every kind, pass-through included
    if sample.content == last_seen:
        return Outcome.IGNORE

    if pass_through:
        return Outcome.PASS_THROUGH
    if sample.kind == SampleKind.IMAGE:
        return Outcome.NOVEL_IMAGE
    return Outcome.NOVEL_TEXT
