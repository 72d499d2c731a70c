"""
Logging configuration for the message board.

``setup_logging`` attaches a console handler (and a file handler when
``LOG_FILE`` is set) to the root logger the first time it is called.
Later calls only adjust the level, so building several applications in
one process (as the tests do) never duplicates handlers.
"""

import logging
from pathlib import Path

from .config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(settings: Settings) -> None:
    """Configure the root logger from ``settings``.

    ``settings.debug`` forces the ``DEBUG`` level regardless of
    ``settings.log_level``; unknown level names fall back to ``INFO``.
    """
    root = logging.getLogger()
    level_name = "DEBUG" if settings.debug else settings.log_level.upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    if root.handlers:
        return

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(Path(settings.log_file).resolve(), encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
