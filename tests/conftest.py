from datetime import datetime, timezone

import pytest

from clipmon.classifier import classify
from clipmon.models import ClipboardEntry
from clipmon.storage import EntryStore
from clipmon.utils import compute_hash


class FakeClipboard:
    """In-memory stand-in for the pasteboard: a change counter plus a text payload."""

    def __init__(self, change_count: int = 0, text: str | None = None):
        self.count = change_count
        self.text = text

    def change_count(self) -> int:
        return self.count

    def current_text(self) -> str | None:
        return self.text

    def copy(self, text: str | None) -> None:
        self.count += 1
        self.text = text


@pytest.fixture
def storage():
    store = EntryStore(db_path=":memory:")
    yield store
    store.close()


@pytest.fixture
def clipboard():
    return FakeClipboard()


@pytest.fixture
def make_entry():
    """Factory fixture to create ClipboardEntry instances for testing."""

    def _make_entry(
        text: str = "hello world",
        content_hash: str | None = None,
        app_name: str | None = None,
        app_bundle_id: str | None = None,
        language_detected: str | None = None,
        timestamp: datetime | None = None,
    ) -> ClipboardEntry:
        metadata = classify(text)
        return ClipboardEntry(
            content=text,
            content_hash=content_hash or compute_hash(text),
            timestamp=timestamp or datetime.now(timezone.utc).replace(microsecond=0),
            character_count=metadata.character_count,
            word_count=metadata.word_count,
            line_count=metadata.line_count,
            content_type=metadata.content_type,
            is_url=metadata.is_url,
            is_email=metadata.is_email,
            app_name=app_name,
            app_bundle_id=app_bundle_id,
            language_detected=language_detected,
        )

    return _make_entry
