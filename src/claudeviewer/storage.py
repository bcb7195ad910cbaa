"""Persistent conversation store over a pluggable key-value backend."""

from __future__ import annotations

import logging
import sqlite3
from datetime import timezone
from pathlib import Path
from typing import Protocol, Sequence, runtime_checkable

from pydantic import TypeAdapter, ValidationError

from .config import STORAGE_KEY
from .errors import DecodeError, PersistError
from .models import Conversation
from .ordering import EARLIEST, parse_timestamp

logger = logging.getLogger(__name__)

_conversation_list = TypeAdapter(list[Conversation])


@runtime_checkable
class KeyValueBackend(Protocol):
    """String key-value persistence used by ConversationStore.

    ``get`` raises DecodeError when the underlying storage is unreadable.
    ``set`` must either fully apply or leave the previous value in place,
    raising PersistError on failure.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def close(self) -> None: ...


class InMemoryBackend:
    """Process-local backend, mostly for tests."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def close(self) -> None:
        pass


class SqliteBackend:
    """SQLite-backed key-value table.

    The database is opened on first use. An unreadable database surfaces as
    DecodeError on reads and PersistError on writes.
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path))
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                self._migrate(conn)
            except sqlite3.Error:
                conn.close()
                raise
            self._conn = conn
        return self._conn

    def _migrate(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)
        conn.commit()

    def get(self, key: str) -> str | None:
        try:
            row = self.conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise DecodeError(f"Could not read {self.db_path}: {exc}") from exc
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with self.conn:
                self.conn.execute(
                    """INSERT INTO kv (key, value) VALUES (?, ?)
                       ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                    (key, value),
                )
        except sqlite3.Error as exc:
            raise PersistError(f"Could not save conversations: {exc}") from exc

    def delete(self, key: str) -> None:
        try:
            with self.conn:
                self.conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            raise PersistError(f"Could not clear conversations: {exc}") from exc

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None


class ConversationStore:
    """The whole conversation collection, stored as one JSON document under ``key``."""

    def __init__(self, backend: KeyValueBackend, key: str = STORAGE_KEY):
        self.backend = backend
        self.key = key

    def replace_all(self, conversations: Sequence[Conversation]):
        """Overwrite the stored collection. Previous contents survive a failed write."""
        payload = _conversation_list.dump_json(list(conversations), by_alias=True).decode("utf-8")
        self.backend.set(self.key, payload)
        logger.info("Stored %d conversations under '%s'", len(conversations), self.key)

    def _decode(self, payload: str) -> list[Conversation]:
        try:
            return _conversation_list.validate_json(payload)
        except ValidationError as exc:
            raise DecodeError() from exc

    def load_all(self) -> list[Conversation]:
        """Return the stored collection, or [] if nothing is stored or it is unreadable."""
        try:
            payload = self.backend.get(self.key)
            if payload is None:
                return []
            return self._decode(payload)
        except DecodeError:
            logger.warning("Stored conversations under '%s' could not be decoded", self.key, exc_info=True)
            return []

    def find_by_id(self, conversation_id: str) -> Conversation | None:
        for conv in self.load_all():
            if conv.id == conversation_id:
                return conv
        return None

    def clear(self):
        self.backend.delete(self.key)

    def close(self):
        self.backend.close()

    def get_stats(self) -> dict:
        """Get overall collection statistics."""
        conversations = self.load_all()
        msg_count = sum(c.message_count for c in conversations)
        dated = sorted(
            ts.astimezone(timezone.utc)
            for ts in (parse_timestamp(c.created_at) for c in conversations)
            if ts != EARLIEST
        )

        return {
            "total_conversations": len(conversations),
            "total_messages": msg_count,
            "date_range_start": dated[0].strftime("%Y-%m-%d") if dated else None,
            "date_range_end": dated[-1].strftime("%Y-%m-%d") if dated else None,
            "avg_messages_per_conversation": (
                round(msg_count / len(conversations), 1) if conversations else 0
            ),
        }
