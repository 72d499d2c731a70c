"""
Business logic for the message board.

``MessageService`` is the single entry point for board operations.
Every operation first checks the caller against the permission table,
then validates any incoming payload, and only then touches the store.
A request that fails either check therefore never reaches the store.

Store calls are blocking SQLite work and are run in worker threads so
that concurrent requests do not stall the event loop.  Errors from the
store propagate unchanged.
"""

import asyncio
import logging
from typing import List, Optional

from ..core.permissions import Caller, Operation, require
from ..core.validation import is_valid_email, validate_message
from ..schemas.message import Message
from .message_store import MessageStore

logger = logging.getLogger(__name__)


class MessageService:
    """Service for listing, posting and liking board messages."""

    def __init__(self, store: MessageStore) -> None:
        self.store = store

    async def list_messages(self, caller: Caller) -> List[Message]:
        """Return all messages.  Any caller may read."""
        require(Operation.READ, caller)
        return await asyncio.to_thread(self.store.list)

    async def get_message(self, message_id: str, caller: Caller) -> Message:
        require(Operation.READ, caller)
        return await asyncio.to_thread(self.store.get, message_id)

    async def create_message(
        self, text: str, author_email: Optional[str], caller: Caller
    ) -> Message:
        """Post a new message.

        Only authenticated callers may post.  When ``author_email`` is
        omitted, the email claim of the caller's session is used when it is
        a valid address.
        """
        require(Operation.CREATE, caller)
        validate_message(text, author_email)
        # A malformed email claim is dropped rather than rejected: the
        # caller did not send it.
        if author_email is None and caller.email and is_valid_email(caller.email):
            author_email = caller.email
        message = await asyncio.to_thread(self.store.insert, text, author_email)
        logger.info("User %s posted message %s", caller.principal, message.id)
        return message

    async def like_message(
        self, message_id: str, caller: Caller, current_likes: Optional[int] = None
    ) -> Message:
        """Add one like to a message.

        ``current_likes`` is what the client believed the count to be.
        It never overrides the stored value; the store increments
        atomically.
        """
        require(Operation.UPDATE, caller)
        message = await asyncio.to_thread(self.store.increment_likes, message_id)
        if current_likes is not None and current_likes + 1 != message.likes:
            logger.debug(
                "Client saw %d likes on message %s; stored count is now %d",
                current_likes,
                message_id,
                message.likes,
            )
        return message

    async def delete_message(self, message_id: str, caller: Caller) -> None:
        require(Operation.DELETE, caller)
        await asyncio.to_thread(self.store.delete, message_id)
        logger.info("User %s deleted message %s", caller.principal, message_id)
