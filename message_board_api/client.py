"""Message board API client.

This module defines a small client wrapper around the board's REST
API.  It exposes exactly the three operations a board front‑end
needs:

* :meth:`MessageBoardClient.list_messages` – return all messages.
* :meth:`MessageBoardClient.create_message` – post a new message.
* :meth:`MessageBoardClient.like_message` – add one like to a message.

Reading works with a public API key (sent as ``X-API-Key``); posting
and liking need a session token (sent as ``Authorization: Bearer``).
Failed calls raise the same error classes the server uses, rebuilt from
the HTTP status code, so callers can handle ``NotFound`` or
``Unauthorized`` without looking at status codes.  The client uses
the ``requests`` library internally.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from message_board_api.app.core.errors import (
    ERRORS_BY_STATUS,
    MessageBoardError,
    StoreTimeout,
    StoreUnavailable,
)
from message_board_api.app.schemas.message import Message


logger = logging.getLogger(__name__)

MESSAGES_PATH = "/api/v1/messages"


class MessageBoardClient:
    """Client for the message board API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL for the API, e.g. ``https://board.example.com``.
            token: Optional session token.  Required for posting and liking.
            api_key: Optional public API key used for reading.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Seconds to wait for each request.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _request(self, method: str, path: str, *, json_body: Any | None = None) -> Any:
        """Perform an HTTP request and return the decoded JSON body.

        Raises:
            MessageBoardError: the subclass matching the response status,
                ``StoreTimeout`` when the request timed out and
                ``StoreUnavailable`` for other transport failures.
        """
        url = f"{self.base_url}{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                json=json_body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            logger.error("API request to %s timed out: %s", url, exc)
            raise StoreTimeout(str(exc)) from exc
        except requests.RequestException as exc:
            logger.error("API request to %s failed: %s", url, exc)
            raise StoreUnavailable(str(exc)) from exc

        if response.status_code >= 400:
            message = ""
            try:
                err_json = response.json()
                if isinstance(err_json, dict):
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                else:
                    message = str(err_json)
            except ValueError:
                message = response.text
            message = str(message or f"HTTP {response.status_code}")
            logger.error("API request failed (%s): %s", response.status_code, message)
            error_class = ERRORS_BY_STATUS.get(response.status_code, MessageBoardError)
            raise error_class(message=message)

        if response.content:
            return response.json()
        return None

    # ------------------------------------------------------------------
    # Board operations
    # ------------------------------------------------------------------
    def list_messages(self) -> List[Message]:
        """Retrieve every message on the board."""
        data = self._request("GET", f"{MESSAGES_PATH}/")
        return [Message(**item) for item in data or []]

    def create_message(self, text: str, author_email: Optional[str] = None) -> Message:
        """Post a new message and return it as stored."""
        payload: Dict[str, Any] = {"text": text}
        if author_email is not None:
            payload["author_email"] = author_email
        return Message(**self._request("POST", f"{MESSAGES_PATH}/", json_body=payload))

    def like_message(self, message_id: str, current_likes: Optional[int] = None) -> Message:
        """Add one like to ``message_id``.

        ``current_likes`` is sent along for older servers; this server
        ignores it and increments the stored count.
        """
        payload = {"current_likes": current_likes} if current_likes is not None else None
        return Message(
            **self._request("POST", f"{MESSAGES_PATH}/{message_id}/like", json_body=payload)
        )
