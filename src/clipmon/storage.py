import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from clipmon.config import DEFAULT_DB_PATH
from clipmon.models import ClipboardEntry, ContentType

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS clipboard_entries (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    content           TEXT NOT NULL,
    content_hash      TEXT UNIQUE,
    app_name          TEXT,
    app_bundle_id     TEXT,
    timestamp         DATETIME DEFAULT CURRENT_TIMESTAMP,
    character_count   INTEGER,
    word_count        INTEGER,
    line_count        INTEGER,
    content_type      TEXT,
    is_url            INTEGER DEFAULT 0,
    is_email          INTEGER DEFAULT 0,
    language_detected TEXT
);
"""


class StorageError(Exception):
    """A clipboard entry store could not be opened or written."""


class EntryStore:
    """Append-only SQLite ledger of clipboard entries, deduplicated by content hash."""

    def __init__(self, db_path: str | Path | None = None, connect: bool = True):
        self._db_path = str(db_path) if db_path else str(DEFAULT_DB_PATH)
        self._conn: sqlite3.Connection | None = None
        self._closed = False
        if connect:
            self.open()

    @property
    def db_path(self) -> str:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self) -> None:
        """Connect and create the schema. Raises StorageError on failure."""
        if self._closed:
            raise StorageError(f"Database at {self._db_path} is closed")
        if self._conn is not None:
            return
        conn = None
        try:
            if self._db_path != ":memory:":
                Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(self._db_path)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(SCHEMA)
            conn.commit()
        except (OSError, sqlite3.Error) as e:
            if conn is not None:
                conn.close()
            raise StorageError(f"Unable to open database at {self._db_path}: {e}") from e
        self._conn = conn
        logger.info("Database opened at: %s", self._db_path)

    def _connection(self) -> sqlite3.Connection:
        self.open()
        return self._conn

    def insert(self, entry: ClipboardEntry) -> bool:
        """Insert an entry unless its content hash is already stored.

        Opens the database first if an earlier open failed. Returns True if
        a row was written, False if it was a duplicate. Raises StorageError
        for any other database failure.
        """
        conn = self._connection()
        try:
            with conn:
                cursor = conn.execute(
                    """INSERT OR IGNORE INTO clipboard_entries
                       (content, content_hash, app_name, app_bundle_id, timestamp,
                        character_count, word_count, line_count, content_type,
                        is_url, is_email, language_detected)
                       VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                    (
                        entry.content,
                        entry.content_hash,
                        entry.app_name,
                        entry.app_bundle_id,
                        format_timestamp(entry.timestamp),
                        entry.character_count,
                        entry.word_count,
                        entry.line_count,
                        entry.content_type.value,
                        int(entry.is_url),
                        int(entry.is_email),
                        entry.language_detected,
                    ),
                )
        except sqlite3.Error as e:
            raise StorageError(f"Error inserting clipboard entry: {e}") from e
        return cursor.rowcount > 0

    def count(self) -> int:
        row = self._connection().execute("SELECT COUNT(*) as cnt FROM clipboard_entries").fetchone()
        return row["cnt"]

    def get_recent(self, limit: int = 25) -> list[ClipboardEntry]:
        rows = self._connection().execute(
            "SELECT * FROM clipboard_entries ORDER BY id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return [self._row_to_entry(r) for r in rows]

    def get_entry(self, entry_id: int) -> ClipboardEntry | None:
        row = self._connection().execute(
            "SELECT * FROM clipboard_entries WHERE id = ?", (entry_id,)
        ).fetchone()
        return self._row_to_entry(row) if row else None

    def find_by_hash(self, content_hash: str) -> ClipboardEntry | None:
        row = self._connection().execute(
            "SELECT * FROM clipboard_entries WHERE content_hash = ?",
            (content_hash,),
        ).fetchone()
        return self._row_to_entry(row) if row else None

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _row_to_entry(self, row: sqlite3.Row) -> ClipboardEntry:
        return ClipboardEntry(
            id=row["id"],
            content=row["content"],
            content_hash=row["content_hash"],
            app_name=row["app_name"],
            app_bundle_id=row["app_bundle_id"],
            timestamp=parse_timestamp(row["timestamp"]),
            character_count=row["character_count"],
            word_count=row["word_count"],
            line_count=row["line_count"],
            content_type=ContentType(row["content_type"]),
            is_url=bool(row["is_url"]),
            is_email=bool(row["is_email"]),
            language_detected=row["language_detected"],
        )


def format_timestamp(value: datetime) -> str:
    """UTC ISO 8601 with a Z suffix, e.g. 2025-08-20T10:00:00Z. Naive values are local time."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_timestamp(value: str) -> datetime:
    # fromisoformat() only accepts a trailing "Z" from Python 3.11 on.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        # CURRENT_TIMESTAMP defaults are UTC without an offset
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
