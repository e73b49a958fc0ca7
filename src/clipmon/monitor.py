import logging
from collections.abc import Callable
from datetime import datetime, timezone
from enum import Enum

from clipmon.classifier import LanguageIdentifier, classify
from clipmon.config import LOG_PREVIEW_LENGTH, POLL_INTERVAL
from clipmon.models import ClipboardEntry
from clipmon.scheduler import CancellationToken, Ticker
from clipmon.storage import EntryStore, StorageError
from clipmon.utils import compute_hash, truncate_text

logger = logging.getLogger(__name__)

AppIdentitySource = Callable[[], tuple[str | None, str | None] | None]


class MonitorState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class ChangeDetector:
    """Reports new clipboard text by watching the clipboard's change counter.

    `clipboard` must provide change_count() -> int and current_text() -> str | None.
    """

    def __init__(self, clipboard):
        self._clipboard = clipboard
        self._last_change_count: int | None = None

    @property
    def last_change_count(self) -> int | None:
        return self._last_change_count

    def start(self) -> None:
        self.sync_change_count()

    def sync_change_count(self) -> None:
        self._last_change_count = self._clipboard.change_count()

    def poll(self) -> str | None:
        current_count = self._clipboard.change_count()
        if current_count == self._last_change_count:
            return None

        self._last_change_count = current_count

        try:
            text = self._clipboard.current_text()
            if text:
                text.encode("utf-8")
        except Exception:
            logger.debug("Unreadable clipboard payload, skipping", exc_info=True)
            return None

        if not text:
            return None
        return text


class ClipboardMonitor:
    def __init__(
        self,
        storage: EntryStore,
        clipboard,
        app_identity: AppIdentitySource | None = None,
        language_identifier: LanguageIdentifier | None = None,
    ):
        self._storage = storage
        self._detector = ChangeDetector(clipboard)
        self._app_identity = app_identity
        self._language_identifier = language_identifier
        self._token = CancellationToken()
        self._state = MonitorState.STOPPED

    @property
    def state(self) -> MonitorState:
        return self._state

    @property
    def token(self) -> CancellationToken:
        return self._token

    def start(self) -> None:
        if self._state == MonitorState.RUNNING:
            return
        if self._token.cancelled:
            raise RuntimeError("Monitor has been stopped; create a new instance to restart")
        self._detector.start()
        self._state = MonitorState.RUNNING
        logger.info("Clipboard monitoring started")

    def stop(self) -> None:
        if self._token.cancelled:
            return
        self._token.cancel()
        self._state = MonitorState.STOPPED
        logger.info("Clipboard monitoring stopped")

    def run(self, interval: float = POLL_INTERVAL) -> None:
        """Poll the clipboard every `interval` seconds until stop() is called."""
        self.start()
        for _tick in Ticker(interval, self._token):
            self.check_clipboard()

    def check_clipboard(self) -> bool:
        """Process one tick. Returns True if a new entry was stored."""
        text = self._detector.poll()
        if text is None:
            return False

        entry = self._build_entry(text)
        try:
            inserted = self._storage.insert(entry)
        except StorageError:
            logger.exception("Failed to save clipboard entry")
            return False

        if inserted:
            logger.info(
                "Clipboard entry saved: %s [App: %s, Type: %s]",
                truncate_text(entry.content, LOG_PREVIEW_LENGTH),
                entry.app_name or "Unknown",
                entry.content_type.value,
            )
        else:
            logger.debug("Duplicate clipboard content ignored: %s", entry.content_hash)
        return inserted

    def _build_entry(self, text: str) -> ClipboardEntry:
        app_name, app_bundle_id = self._frontmost_app()
        metadata = classify(text, self._language_identifier)
        return ClipboardEntry(
            content=text,
            content_hash=compute_hash(text),
            timestamp=datetime.now(timezone.utc),
            character_count=metadata.character_count,
            word_count=metadata.word_count,
            line_count=metadata.line_count,
            content_type=metadata.content_type,
            is_url=metadata.is_url,
            is_email=metadata.is_email,
            app_name=app_name,
            app_bundle_id=app_bundle_id,
            language_detected=metadata.language_detected,
        )

    def _frontmost_app(self) -> tuple[str | None, str | None]:
        if self._app_identity is None:
            return None, None
        app = self._app_identity()
        if app is None:
            return None, None
        return app
