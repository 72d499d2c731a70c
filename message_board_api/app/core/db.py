"""
SQLite database integration and simple migration system.

``Database`` wraps the path of the SQLite file and hands out
connections, cursors and write transactions.  ``init_db`` applies
pending migrations when the application starts.  Applied migration
versions are stored in the ``migrations`` table and new migrations are
executed in order.

Every connection is opened with a busy timeout.  A writer that cannot
obtain the database lock within that time fails with
``sqlite3.OperationalError: database is locked``, which the message
store reports as ``StoreTimeout``.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)

MIGRATIONS: List[Tuple[int, str]] = [
    # Migration 1: messages table
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS messages (
            seq INTEGER PRIMARY KEY AUTOINCREMENT,
            id TEXT NOT NULL UNIQUE,
            text TEXT NOT NULL CHECK (length(text) <= 500),
            author_email TEXT,
            likes INTEGER NOT NULL DEFAULT 0 CHECK (likes >= 0),
            created_at TEXT NOT NULL
        );
        """,
    ),
]


def resolve_database_path(database_url: str) -> str:
    """Return an absolute filesystem path for ``database_url``.

    Absolute paths are used as given; relative paths are resolved
    against the current working directory.  A ``sqlite:///`` prefix is
    tolerated.
    """
    if database_url.startswith("sqlite:///"):
        database_url = database_url[len("sqlite:///"):]
    if os.path.isabs(database_url):
        return database_url
    return str(Path(database_url).resolve())


class Database:
    """Connection factory for one SQLite file."""

    def __init__(self, database_url: str, timeout: float = 5.0) -> None:
        self.path = resolve_database_path(database_url)
        self.timeout = timeout

    def connect(self, autocommit: bool = False) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` so columns can be read by
        name.  With ``autocommit`` the connection does not open implicit
        transactions; callers issue ``BEGIN`` themselves.
        """
        conn = sqlite3.connect(
            self.path,
            timeout=self.timeout,
            isolation_level=None if autocommit else "DEFERRED",
        )
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self.connect()
        try:
            yield conn.cursor()
            conn.commit()
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor inside a write transaction.

        ``BEGIN IMMEDIATE`` takes the database's write lock up front, so
        every statement run on the cursor observes and modifies the
        data as one indivisible step.  Any exception rolls the
        transaction back.
        """
        conn = self.connect(autocommit=True)
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn.cursor()
            except BaseException:
                if conn.in_transaction:
                    conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()


def init_db(database: Database) -> int:
    """Create the database file if needed and apply pending migrations.

    Returns the schema version after migrating.
    """
    Path(database.path).parent.mkdir(parents=True, exist_ok=True)
    with database.cursor() as cursor:
        cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        cursor.execute("SELECT MAX(version) AS version FROM migrations")
        row = cursor.fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version > current_version:
                logger.info("Applying migration %s to %s", version, database.path)
                cursor.executescript(sql)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                current_version = version
    return current_version
