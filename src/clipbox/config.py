import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("CLIPBOX_DATA_DIR", Path.home() / ".local" / "share" / "clipbox"))
DB_PATH = DATA_DIR / "clipbox.db"
LOG_PATH = DATA_DIR / "clipbox.log"

POLL_INTERVAL = 0.5  # seconds between clipboard checks
MAX_HISTORY_SIZE = 100  # entries kept in memory, oldest evicted first
CLIPBOARD_TIMEOUT = 5  # seconds allowed for one clipboard utility call
TEMP_PREFIX = "clipbox_"  # prefix for temporary image files
PREVIEW_LENGTH = 60  # characters shown in menu item


def _parse_menu_display_count() -> int:
    raw = os.environ.get("CLIPBOX_MENU_DISPLAY_COUNT")
    if raw is None:
        return 10
    try:
        value = int(raw)
    except ValueError:
        return 10
    return max(5, min(50, value))


MENU_DISPLAY_COUNT = _parse_menu_display_count()

# Diagnostic text from osascript clipboard image probes (AppleScript errors and
# the "osascript 输出" log line); never user content
NOISE_PATTERNS = (
    "execution error",
    "osascript 输出",
)
