"""
Durable storage for board messages.

``MessageStore`` is the only component that touches the ``messages``
table.  It allocates identifiers, stamps creation times and owns the
read‑modify‑write of the ``likes`` counter: ``increment_likes`` runs
``likes = likes + 1`` inside a write transaction, so concurrent likes
of the same message are never lost.

SQLite errors are translated into the board's error taxonomy.  A lock
that cannot be obtained within the configured timeout becomes
``StoreTimeout``; any other database failure becomes
``StoreUnavailable``.  Read operations are retried a few times with
exponential backoff.  Writes are not retried because an increment that
actually committed would be applied twice.
"""

import logging
import sqlite3
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypeVar

from ..core.db import Database
from ..core.errors import NotFound, StoreTimeout, StoreUnavailable
from ..schemas.message import Message

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COLUMNS = "id, text, author_email, likes, created_at"


def _now() -> str:
    # timezone-aware UTC with trailing Z
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _to_message(row: sqlite3.Row) -> Message:
    return Message(
        id=row["id"],
        text=row["text"],
        author_email=row["author_email"],
        likes=row["likes"],
        created_at=row["created_at"],
    )


def _translate(exc: sqlite3.Error) -> Exception:
    text = str(exc).lower()
    if isinstance(exc, sqlite3.OperationalError) and ("locked" in text or "busy" in text):
        return StoreTimeout()
    return StoreUnavailable(f"Message store unavailable: {exc}")


class MessageStore:
    """SQLite backed message records."""

    def __init__(self, database: Database, retries: int = 2, backoff: float = 0.05) -> None:
        self.database = database
        self.retries = retries
        self.backoff = backoff

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _write(self, operation: Callable[[sqlite3.Cursor], T]) -> T:
        try:
            with self.database.transaction() as cursor:
                return operation(cursor)
        except sqlite3.Error as exc:
            logger.error("Message store write failed: %s", exc)
            raise _translate(exc) from exc

    def _read(self, operation: Callable[[sqlite3.Cursor], T]) -> T:
        attempt = 0
        while True:
            try:
                with self.database.cursor() as cursor:
                    return operation(cursor)
            except sqlite3.Error as exc:
                error = _translate(exc)
                if attempt >= self.retries:
                    logger.error("Message store read failed after %d attempts: %s", attempt + 1, exc)
                    raise error from exc
                attempt += 1
                delay = self.backoff * 2 ** (attempt - 1)
                logger.warning(
                    "Message store read failure #%d, retrying in %.2fs: %s", attempt, delay, exc
                )
                time.sleep(delay)

    @staticmethod
    def _fetch(cursor: sqlite3.Cursor, message_id: str) -> Optional[sqlite3.Row]:
        return cursor.execute(
            f"SELECT {_COLUMNS} FROM messages WHERE id = ?", (message_id,)
        ).fetchone()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def insert(self, text: str, author_email: Optional[str]) -> Message:
        """Persist a new message with zero likes and return the stored record."""
        message_id = uuid.uuid4().hex
        created_at = _now()

        def operation(cursor: sqlite3.Cursor) -> Message:
            cursor.execute(
                "INSERT INTO messages (id, text, author_email, likes, created_at) "
                "VALUES (?, ?, ?, 0, ?)",
                (message_id, text, author_email, created_at),
            )
            return _to_message(self._fetch(cursor, message_id))

        message = self._write(operation)
        logger.info("Stored message %s", message_id)
        return message

    def list(self) -> List[Message]:
        """Return every message in insertion order."""

        def operation(cursor: sqlite3.Cursor) -> List[Message]:
            rows = cursor.execute(f"SELECT {_COLUMNS} FROM messages ORDER BY seq ASC").fetchall()
            return [_to_message(row) for row in rows]

        return self._read(operation)

    def get(self, message_id: str) -> Message:
        def operation(cursor: sqlite3.Cursor) -> Message:
            row = self._fetch(cursor, message_id)
            if row is None:
                raise NotFound(message_id)
            return _to_message(row)

        return self._read(operation)

    def count(self) -> int:
        return self._read(
            lambda cursor: cursor.execute("SELECT COUNT(*) AS count FROM messages").fetchone()["count"]
        )

    def increment_likes(self, message_id: str) -> Message:
        """Atomically add one like to ``message_id`` and return the updated record.

        Raises ``NotFound`` without writing anything when the id is unknown.
        """

        def operation(cursor: sqlite3.Cursor) -> Message:
            cursor.execute("UPDATE messages SET likes = likes + 1 WHERE id = ?", (message_id,))
            if cursor.rowcount == 0:
                raise NotFound(message_id)
            return _to_message(self._fetch(cursor, message_id))

        message = self._write(operation)
        logger.info("Message %s now has %d likes", message_id, message.likes)
        return message

    def delete(self, message_id: str) -> None:
        def operation(cursor: sqlite3.Cursor) -> None:
            cursor.execute("DELETE FROM messages WHERE id = ?", (message_id,))
            if cursor.rowcount == 0:
                raise NotFound(message_id)

        self._write(operation)
        logger.info("Deleted message %s", message_id)
