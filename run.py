"""Entry point for serving the Message Board API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``8000``).  All other configuration
(database path, secret key, log level, ...) is read by
``message_board_api.app.core.config.Settings``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from message_board_api.app.core.config import Settings
from message_board_api.app.main import create_app


async def main() -> None:
    """Build the application from the environment and serve it until stopped."""
    settings = Settings()
    app = create_app(settings)
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Serving %s on %s:%s", settings.project_name, host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
