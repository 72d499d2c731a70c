"""
Top‑level package for the Message Board API.

This file makes ``message_board_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``message_board_api.app.main``.  The HTTP client for the board
lives in :mod:`message_board_api.client`; all server functionality
lives in submodules under ``app``.
"""

__all__ = []
