from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ContentType(str, Enum):
    URL = "url"
    EMAIL = "email"
    DATE_CONTAINING = "date_containing"
    NUMERIC_CONTAINING = "numeric_containing"
    LONG_TEXT = "long_text"
    SHORT_TEXT = "short_text"


@dataclass(frozen=True)
class Classification:
    character_count: int
    word_count: int
    line_count: int
    content_type: ContentType
    is_url: bool
    is_email: bool
    language_detected: str | None = None


@dataclass(frozen=True)
class ClipboardEntry:
    content: str
    content_hash: str
    timestamp: datetime
    character_count: int
    word_count: int
    line_count: int
    content_type: ContentType
    is_url: bool = False
    is_email: bool = False
    app_name: str | None = None
    app_bundle_id: str | None = None
    language_detected: str | None = None
    id: int | None = None
