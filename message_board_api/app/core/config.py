"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  Values
are read when a ``Settings`` instance is created, not at import time,
so an application built with ``create_app(Settings(...))`` carries its
own configuration and tests can build as many independent instances as
they need.  There is no process‑wide settings object.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: _env("PROJECT_NAME", "Message Board API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    # Secret used to sign both session tokens and public API keys.
    secret_key: str = field(default_factory=lambda: _env("SECRET_KEY", "change_me"))
    access_token_expire_minutes: int = field(
        default_factory=lambda: int(_env("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))
    )

    # Public API keys grant read access only and expire after this many days.
    api_key_expire_days: int = field(default_factory=lambda: int(_env("API_KEY_EXPIRE_DAYS", "7")))

    # When true, anonymous requests must present an API key to read.
    require_api_key: bool = field(default_factory=lambda: _env_bool("REQUIRE_API_KEY", "true"))

    # Path to the SQLite database.  Relative paths are resolved against
    # the current working directory by the ``db`` module.
    database_url: str = field(default_factory=lambda: _env("DATABASE_URL", "message_board.db"))

    # Seconds a store operation waits for the database lock before
    # failing with ``StoreTimeout``.
    store_timeout: float = field(default_factory=lambda: float(_env("STORE_TIMEOUT", "5.0")))

    # How many times read operations are retried on transient failures.
    store_retries: int = field(default_factory=lambda: int(_env("STORE_RETRIES", "2")))
