"""
Pydantic schemas for board messages.

``MessageCreate`` and ``MessageLike`` describe request bodies and
``Message`` is both the store's record type and the response shape.
The 500‑character limit on ``text`` is deliberately not declared on
``MessageCreate``: it is enforced by the service after the caller has
been authorized, so an anonymous caller learns nothing about the
payload rules.
"""

from typing import Optional

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    """Schema for posting a new message."""

    text: str = Field(..., description="Message body, at most 500 characters")
    author_email: Optional[str] = Field(
        None,
        description="Author's email address.  Defaults to the email claim of the caller's token.",
        examples=["a@b.com"],
    )


class MessageLike(BaseModel):
    """Optional body for liking a message.

    ``current_likes`` is the count the client last displayed.  It is
    accepted for compatibility with older clients and ignored: the
    store increments the stored value atomically.
    """

    current_likes: Optional[int] = Field(None, ge=0)


class Message(BaseModel):
    """A stored board message."""

    id: str
    text: str
    author_email: Optional[str] = None
    likes: int = 0
    created_at: str

    model_config = {
        "from_attributes": True,
    }
