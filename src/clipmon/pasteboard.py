"""macOS adapters for the general pasteboard and the frontmost application."""

import logging

from AppKit import NSPasteboard, NSPasteboardTypeString, NSWorkspace

logger = logging.getLogger(__name__)


class Pasteboard:
    def __init__(self):
        self._pasteboard = NSPasteboard.generalPasteboard()

    def change_count(self) -> int:
        return int(self._pasteboard.changeCount())

    def current_text(self) -> str | None:
        text = self._pasteboard.stringForType_(NSPasteboardTypeString)
        if text is None:
            return None
        return str(text)


def frontmost_app() -> tuple[str | None, str | None] | None:
    """Return (name, bundle id) of the application that currently has focus."""
    try:
        app = NSWorkspace.sharedWorkspace().frontmostApplication()
    except Exception:
        logger.debug("Could not query frontmost application", exc_info=True)
        return None
    if app is None:
        return None
    name = app.localizedName()
    bundle_id = app.bundleIdentifier()
    return (
        str(name) if name is not None else None,
        str(bundle_id) if bundle_id is not None else None,
    )
