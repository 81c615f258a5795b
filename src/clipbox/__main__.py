import argparse
import json
import logging
import sys
import threading

from clipbox.classifier import is_image_data_uri
from clipbox.config import DB_PATH, LOG_PATH, PREVIEW_LENGTH
from clipbox.errors import ClipBoxError
from clipbox.menu import entry_preview
from clipbox.service import ClipboardService
from clipbox.storage import HistoryStorage
from clipbox.utils import ensure_dirs

def setup_logging() -> None:
    ensure_dirs()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(LOG_PATH),
            logging.StreamHandler(sys.stderr),
        ],
    )


def run_app() -> int:
    """Run the ClipBox menu bar application."""
    if sys.platform != "darwin":
        print("The menu bar app requires macOS. Use: clipbox watch", file=sys.stderr)
        return 1

    setup_logging()

    from clipbox.app import ClipBoxApp

    app = ClipBoxApp()
    app.run()
    return 0


def watch(stop_event: threading.Event | None = None) -> int:
    """Record clipboard changes in the foreground until interrupted."""
    setup_logging()
    stop_event = stop_event or threading.Event()
    storage = HistoryStorage(DB_PATH)
    service = ClipboardService()
    entries = storage.load()
    service.replace_history(entries)
    if entries:
        service.monitor.mark_seen(entries[0].content)

    def on_change(_event: str, _content: str) -> None:
        storage.save(service.get_history())
        entry = service.get_history()[0]
        print(f"{entry.created_at:%H:%M:%S}  {entry_preview(entry, PREVIEW_LENGTH)}", flush=True)

    service.subscribe(on_change)
    service.start_monitor()
    print("Watching clipboard. Press Ctrl-C to stop.", flush=True)
    try:
        stop_event.wait()
    except KeyboardInterrupt:
        pass
    finally:
        service.stop_monitor(timeout=5)
        storage.save(service.get_history())
        storage.close()
    return 0


def show_history(limit: int | None = None, as_json: bool = False) -> int:
    ensure_dirs()
    storage = HistoryStorage(DB_PATH)
    try:
        entries = storage.load()
    finally:
        storage.close()
    if limit is not None:
        entries = entries[:limit]

    if as_json:
        print(json.dumps([e.to_dict() for e in entries], indent=2, ensure_ascii=False))
        return 0
    if not entries:
        print("(No clipboard history)")
        return 0
    for index, entry in enumerate(entries, start=1):
        print(f"{index:3d}. {entry.created_at:%Y-%m-%d %H:%M:%S}  {entry_preview(entry, PREVIEW_LENGTH)}")
    return 0


def clear_history() -> int:
    ensure_dirs()
    storage = HistoryStorage(DB_PATH)
    try:
        storage.clear()
    finally:
        storage.close()
    print("Clipboard history cleared.")
    return 0


def copy_text(text: str) -> int:
    ClipboardService().write_text(text)
    return 0


def copy_image(source: str) -> int:
    service = ClipboardService()
    if is_image_data_uri(source):
        service.write_image_from_data_uri(source)
    else:
        service.write_image_from_file(source)
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="ClipBox - Clipboard history manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  run (default)       Run the menu bar app (macOS)
  watch               Record clipboard changes in the terminal
  history             Show saved clipboard history
  clear               Delete saved clipboard history
  copy TEXT           Put TEXT on the clipboard
  copy-image SOURCE   Put an image file or PNG data URI on the clipboard

Examples:
  clipbox watch
  clipbox history --limit 5
  clipbox copy-image ~/Desktop/screenshot.png
""",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("run", help="Run the menu bar app")
    subparsers.add_parser("watch", help="Record clipboard changes in the terminal")
    history_parser = subparsers.add_parser("history", help="Show saved clipboard history")
    history_parser.add_argument("--limit", type=int, default=None, help="Show at most N entries")
    history_parser.add_argument("--json", action="store_true", help="Print entries as JSON")
    subparsers.add_parser("clear", help="Delete saved clipboard history")
    copy_parser = subparsers.add_parser("copy", help="Put text on the clipboard")
    copy_parser.add_argument("text")
    copy_image_parser = subparsers.add_parser("copy-image", help="Put an image on the clipboard")
    copy_image_parser.add_argument("source", help="PNG file path or data:image/png;base64 URI")

    args = parser.parse_args()

    try:
        if args.command == "watch":
            sys.exit(watch())
        elif args.command == "history":
            sys.exit(show_history(limit=args.limit, as_json=args.json))
        elif args.command == "clear":
            sys.exit(clear_history())
        elif args.command == "copy":
            sys.exit(copy_text(args.text))
        elif args.command == "copy-image":
            sys.exit(copy_image(args.source))
        else:
            sys.exit(run_app())
    except ClipBoxError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
