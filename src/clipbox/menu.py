"""Menu layout for the menu bar host, kept free of any GUI toolkit."""

from collections.abc import Callable
from dataclasses import dataclass

from clipbox import __version__
from clipbox.config import MENU_DISPLAY_COUNT, PREVIEW_LENGTH
from clipbox.models import ContentKind, HistoryEntry
from clipbox.utils import image_preview, truncate_text

ENTRY_KEY_PREFIX = "clipbox_entry_"


@dataclass
class MenuItemSpec:
    """Specification for a menu item, separating logic from rumps rendering."""

    title: str
    callback: Callable | None = None
    entry_id: str | None = None

    @property
    def key(self) -> str | None:
        return entry_key(self.entry_id) if self.entry_id is not None else None


def entry_key(entry_id: str) -> str:
    return f"{ENTRY_KEY_PREFIX}{entry_id}"


def entry_preview(entry: HistoryEntry, max_len: int = PREVIEW_LENGTH) -> str:
    if entry.kind == ContentKind.IMAGE:
        return image_preview(entry.content)
    return truncate_text(entry.content, max_len) or "(blank)"


def compute_menu_specs(
    entries: list[HistoryEntry],
    on_entry: Callable | None = None,
    on_clear: Callable | None = None,
    on_quit: Callable | None = None,
    limit: int = MENU_DISPLAY_COUNT,
) -> list[MenuItemSpec | None]:
    """Build the menu top to bottom; ``None`` marks a separator."""
    specs: list[MenuItemSpec | None] = [
        MenuItemSpec(f"ClipBox v{__version__} - Clipboard History"),
        None,
    ]

    if not entries:
        specs.append(MenuItemSpec("(No clipboard history)"))
    else:
        for entry in entries[:limit]:
            specs.append(MenuItemSpec(entry_preview(entry), callback=on_entry, entry_id=entry.id))

    specs.extend([
        None,
        MenuItemSpec("Clear History", callback=on_clear),
        None,
        MenuItemSpec("Quit ClipBox", callback=on_quit),
    ])
    return specs
