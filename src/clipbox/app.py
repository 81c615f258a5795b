import logging

import rumps

from clipbox.config import DB_PATH
from clipbox.errors import ClipBoxError
from clipbox.menu import MenuItemSpec, compute_menu_specs
from clipbox.service import ClipboardService
from clipbox.storage import HistoryStorage
from clipbox.utils import ensure_dirs

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = 0.5  # seconds between checks for monitor updates


class ClipBoxApp(rumps.App):
    def __init__(self):
        super().__init__("ClipBox", title="📋", quit_button=None)
        self._init_app()

    def _init_app(self) -> None:
        """Initialize app components. Separated for testability."""
        ensure_dirs()
        self._storage = HistoryStorage(DB_PATH)
        self._service = ClipboardService()
        self._restore_history()
        self._dirty = False
        self._entry_ids: dict[str, str] = {}
        self._service.subscribe(self._on_clipboard_changed)
        self._service.start_monitor()
        self._build_menu()

    def _restore_history(self) -> None:
        entries = self._storage.load()
        self._service.replace_history(entries)
        if entries:
            # The newest entry may still be on the clipboard; do not record it twice
            self._service.monitor.mark_seen(entries[0].content)
        logger.info("Restored %d history entries", len(entries))

    def _on_clipboard_changed(self, _event: str, _content: str) -> None:
        # Runs on the monitor thread; menu work is left to the main-thread timer
        self._dirty = True

    @rumps.timer(REFRESH_INTERVAL)
    def _refresh_if_dirty(self, _sender) -> None:
        if not self._dirty:
            return
        self._dirty = False
        self._persist()
        self._build_menu()

    def _persist(self) -> None:
        self._storage.save(self._service.get_history())

    def _build_menu(self) -> None:
        self.menu.clear()
        self._entry_ids.clear()
        specs = compute_menu_specs(
            self._service.get_history(),
            on_entry=self._on_entry_click,
            on_clear=self._on_clear,
            on_quit=self._on_quit,
        )
        self.menu = [self._render_single_spec(spec) for spec in specs]

    def _render_single_spec(self, spec: MenuItemSpec | None) -> rumps.MenuItem | None:
        if spec is None:
            return None
        item = rumps.MenuItem(spec.title, callback=spec.callback)
        if spec.key is not None:
            item._id = spec.key
            self._entry_ids[spec.key] = spec.entry_id
        return item

    def _on_entry_click(self, sender) -> None:
        entry_id = self._entry_ids.get(getattr(sender, "_id", ""))
        if entry_id is None:
            return
        entry = self._service.history.get(entry_id)
        if entry is None:
            return
        try:
            self._service.copy_entry(entry)
        except ClipBoxError as e:
            logger.error("Error copying entry to clipboard: %s", e)
            rumps.notification("ClipBox", "Copy failed", str(e), sound=False)
            return
        rumps.notification("ClipBox", "", "Copied to clipboard", sound=False)

    def _on_clear(self, _sender) -> None:
        if rumps.alert("ClipBox", "Clear all clipboard history?", ok="Clear", cancel="Cancel"):
            self._service.clear_history()
            self._persist()
            self._build_menu()

    def _on_quit(self, _sender) -> None:
        self._service.stop_monitor(timeout=2)
        self._persist()
        self._storage.close()
        rumps.quit_application()
