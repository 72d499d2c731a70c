"""
Main entrypoint for the Message Board API.

This module assembles the FastAPI application.  ``create_app`` takes
an explicit :class:`Settings` instance, builds the database, store and
service for it and keeps them on ``app.state``; nothing is configured
globally.  The lifespan handler applies migrations on startup and logs
shutdown.  A default instance is created at import time as ``app`` so
the application can be served with::

    uvicorn message_board_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request

from .api.v1.router import router as v1_router
from .core.config import Settings
from .core.db import Database, init_db
from .core.logging_config import setup_logging
from .services.message_service import MessageService
from .services.message_store import MessageStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration for this application.  When omitted, settings are
        read from the environment.

    Returns
    -------
    FastAPI
        A configured application instance ready to be served.
    """
    settings = settings or Settings()
    # Initialise logging before anything else so the startup below can log.
    setup_logging(settings)

    database = Database(settings.database_url, timeout=settings.store_timeout)
    store = MessageStore(database, retries=settings.store_retries)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        version = init_db(database)
        logger.info("Message store ready at %s (schema version %s)", database.path, version)
        yield
        logger.info("Shutting down %s", settings.project_name)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.message_service = MessageService(store)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log basic information about incoming requests and outgoing responses."""
        logger.info("Request %s %s", request.method, request.url.path)
        response = await call_next(request)
        logger.info("Response %s %s", response.status_code, request.url.path)
        return response

    app.include_router(v1_router, prefix="/api/v1")
    return app


app = create_app()
