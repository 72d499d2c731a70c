"""
Message endpoints for API v1.

Anyone holding a public API key (or, when ``REQUIRE_API_KEY`` is off,
anyone at all) may list and read messages.  Posting, liking and
deleting require a session token.  Service errors are translated into
HTTP errors here: validation failures become 422 with the rule that was
broken, permission failures a generic 403, unknown ids 404 and store
trouble 503/504.
"""

from typing import List, NoReturn, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request, status

from message_board_api.app.core.errors import MessageBoardError
from message_board_api.app.core.permissions import Caller
from message_board_api.app.core.security import resolve_caller
from message_board_api.app.schemas.message import Message, MessageCreate, MessageLike
from message_board_api.app.services.message_service import MessageService


router = APIRouter()


def get_message_service(request: Request) -> MessageService:
    return request.app.state.message_service


def _raise_http(exc: MessageBoardError) -> NoReturn:
    raise HTTPException(status_code=exc.status_code, detail=exc.message) from exc


@router.get("/", response_model=List[Message], summary="List messages")
async def list_messages(
    caller: Caller = Depends(resolve_caller),
    service: MessageService = Depends(get_message_service),
) -> List[Message]:
    """List every message in the order it was posted."""
    try:
        return await service.list_messages(caller)
    except MessageBoardError as e:
        _raise_http(e)


@router.get("/{message_id}", response_model=Message, summary="Get a single message")
async def get_message(
    message_id: str,
    caller: Caller = Depends(resolve_caller),
    service: MessageService = Depends(get_message_service),
) -> Message:
    try:
        return await service.get_message(message_id, caller)
    except MessageBoardError as e:
        _raise_http(e)


@router.post(
    "/",
    response_model=Message,
    status_code=status.HTTP_201_CREATED,
    summary="Post a message",
)
async def create_message(
    data: MessageCreate,
    caller: Caller = Depends(resolve_caller),
    service: MessageService = Depends(get_message_service),
) -> Message:
    """Post a new message.

    Returns the stored message with ``likes`` set to 0.  Text longer
    than 500 characters is rejected with 422 and nothing is stored.
    """
    try:
        return await service.create_message(data.text, data.author_email, caller)
    except MessageBoardError as e:
        _raise_http(e)


@router.post("/{message_id}/like", response_model=Message, summary="Like a message")
async def like_message(
    message_id: str,
    data: Optional[MessageLike] = Body(None),
    caller: Caller = Depends(resolve_caller),
    service: MessageService = Depends(get_message_service),
) -> Message:
    """Add one like to a message and return it with the new count."""
    current_likes = data.current_likes if data is not None else None
    try:
        return await service.like_message(message_id, caller, current_likes)
    except MessageBoardError as e:
        _raise_http(e)


@router.delete(
    "/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a message",
)
async def delete_message(
    message_id: str,
    caller: Caller = Depends(resolve_caller),
    service: MessageService = Depends(get_message_service),
) -> None:
    try:
        await service.delete_message(message_id, caller)
    except MessageBoardError as e:
        _raise_http(e)
    return None
