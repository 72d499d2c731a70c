import pytest
from fastapi.testclient import TestClient

from message_board_api.app.core.config import Settings
from message_board_api.app.core.db import Database, init_db
from message_board_api.app.core.security import create_access_token, create_api_key
from message_board_api.app.main import create_app
from message_board_api.app.services.message_service import MessageService
from message_board_api.app.services.message_store import MessageStore

SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a temporary SQLite database for each test."""
    return Settings(
        database_url=str(tmp_path / "board.db"),
        secret_key=SECRET,
        require_api_key=True,
        store_timeout=2.0,
        store_retries=2,
    )


@pytest.fixture
def database(settings):
    db = Database(settings.database_url, timeout=settings.store_timeout)
    init_db(db)
    return db


@pytest.fixture
def store(database):
    return MessageStore(database, retries=2, backoff=0.001)


@pytest.fixture
def service(store):
    return MessageService(store)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    # Entering the context runs the lifespan, which applies migrations.
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def session_token():
    return create_access_token({"sub": "alice", "email": "alice@example.com"}, SECRET)


@pytest.fixture
def api_key():
    return create_api_key(SECRET)


@pytest.fixture
def auth_headers(session_token):
    return {"Authorization": f"Bearer {session_token}"}


@pytest.fixture
def public_headers(api_key):
    return {"X-API-Key": api_key}
