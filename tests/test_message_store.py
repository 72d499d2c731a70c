"""Tests for the SQLite message store."""

import sqlite3
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager

import pytest

from message_board_api.app.core.db import Database, init_db
from message_board_api.app.core.errors import NotFound, StoreTimeout, StoreUnavailable
from message_board_api.app.services.message_store import MessageStore


def test_init_db_creates_file_and_tables(tmp_path):
    db = Database(str(tmp_path / "nested" / "board.db"))
    assert init_db(db) == 1
    # Re-running is a no-op.
    assert init_db(db) == 1

    with db.cursor() as cursor:
        tables = {row[0] for row in cursor.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    assert {"messages", "migrations"}.issubset(tables)


def test_insert_sets_defaults(store):
    message = store.insert("hello", "a@b.com")
    assert message.id
    assert message.text == "hello"
    assert message.author_email == "a@b.com"
    assert message.likes == 0
    assert message.created_at.endswith("Z")


def test_insert_allows_missing_email(store):
    assert store.insert("anonymous", None).author_email is None


def test_ids_are_unique(store):
    ids = {store.insert(f"message {i}", None).id for i in range(50)}
    assert len(ids) == 50


def test_list_returns_insertion_order(store):
    created = [store.insert(text, None) for text in ["first", "second", "third"]]
    assert store.list() == created


def test_get_and_not_found(store):
    message = store.insert("hello", None)
    assert store.get(message.id) == message
    with pytest.raises(NotFound) as exc_info:
        store.get("missing")
    assert exc_info.value.message == "Message missing not found"


def test_increment_likes_sequentially(store):
    message = store.insert("hello", "a@b.com")
    assert store.increment_likes(message.id).likes == 1
    liked = store.increment_likes(message.id)
    assert liked.likes == 2
    assert liked.created_at == message.created_at
    assert liked.text == message.text


def test_increment_unknown_id_leaves_store_unchanged(store):
    message = store.insert("hello", None)
    with pytest.raises(NotFound):
        store.increment_likes("missing")
    assert store.list() == [message]


def test_concurrent_increments_are_not_lost(store):
    message = store.insert("popular", None)
    workers = 16
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda _: store.increment_likes(message.id), range(workers)))

    assert store.get(message.id).likes == workers
    # Every increment observed a distinct value.
    assert sorted(r.likes for r in results) == list(range(1, workers + 1))


def test_concurrent_increments_on_different_messages(store):
    first = store.insert("first", None)
    second = store.insert("second", None)
    ids = [first.id, second.id] * 8
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(store.increment_likes, ids))
    assert store.get(first.id).likes == 8
    assert store.get(second.id).likes == 8


def test_delete(store):
    keep = store.insert("keep", None)
    drop = store.insert("drop", None)
    store.delete(drop.id)
    assert store.list() == [keep]
    with pytest.raises(NotFound):
        store.delete(drop.id)


def test_messages_survive_a_new_store_instance(settings, store):
    message = store.insert("durable", "a@b.com")
    store.increment_likes(message.id)

    reopened = MessageStore(Database(settings.database_url))
    assert reopened.list() == [store.get(message.id)]
    assert reopened.get(message.id).likes == 1


def test_locked_database_times_out_without_partial_state(database):
    store = MessageStore(Database(database.path, timeout=0.1))
    message = store.insert("hello", None)

    blocker = sqlite3.connect(database.path, isolation_level=None)
    blocker.execute("BEGIN IMMEDIATE")
    try:
        with pytest.raises(StoreTimeout):
            store.increment_likes(message.id)
        with pytest.raises(StoreTimeout):
            store.insert("blocked", None)
    finally:
        blocker.execute("ROLLBACK")
        blocker.close()

    assert store.count() == 1
    assert store.get(message.id).likes == 0


class FlakyDatabase:
    """Wraps a Database and fails the first ``failures`` cursor() calls."""

    def __init__(self, database, failures):
        self.database = database
        self.failures = failures
        self.calls = 0

    @contextmanager
    def cursor(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise sqlite3.OperationalError("disk I/O error")
        with self.database.cursor() as cursor:
            yield cursor

    def transaction(self):
        return self.database.transaction()


def test_reads_are_retried_on_transient_failure(database):
    MessageStore(database).insert("hello", None)
    flaky = FlakyDatabase(database, failures=2)
    store = MessageStore(flaky, retries=2, backoff=0.001)
    assert [m.text for m in store.list()] == ["hello"]
    assert flaky.calls == 3


def test_reads_give_up_after_configured_retries(database):
    flaky = FlakyDatabase(database, failures=10)
    store = MessageStore(flaky, retries=1, backoff=0.001)
    with pytest.raises(StoreUnavailable):
        store.list()
    assert flaky.calls == 2


def test_missing_database_is_unavailable(tmp_path):
    # The directory does not exist, so SQLite cannot open the file.
    store = MessageStore(Database(str(tmp_path / "absent" / "board.db")), retries=0)
    with pytest.raises(StoreUnavailable):
        store.list()
    with pytest.raises(StoreUnavailable):
        store.insert("hello", None)
