"""
Error taxonomy for the message board.

Every failure the service can report derives from
``MessageBoardError``.  Each class carries the HTTP status code it is
translated to by the API layer and by the board client, so both sides
of the wire agree on what a status code means.
"""

from typing import Optional


class MessageBoardError(Exception):
    """Base class for all message board errors."""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(MessageBoardError):
    """A message payload violates a field constraint."""

    status_code = 422
    default_message = "Invalid message"


class TextTooLong(ValidationError):
    default_message = "text may not exceed 500 characters"


class MissingText(ValidationError):
    default_message = "text is required"


class InvalidText(ValidationError):
    default_message = "text must be valid Unicode"


class InvalidEmail(ValidationError):
    default_message = "author_email must be a valid email address"


class Unauthorized(MessageBoardError):
    """The caller may not perform the operation.

    The message is deliberately generic and never names the rule that
    denied the request.
    """

    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(MessageBoardError):
    status_code = 404
    default_message = "Message not found"

    def __init__(self, message_id: Optional[str] = None, message: Optional[str] = None) -> None:
        self.message_id = message_id
        if message is None and message_id is not None:
            message = f"Message {message_id} not found"
        super().__init__(message)


class StoreTimeout(MessageBoardError):
    """The store did not answer within the configured timeout."""

    status_code = 504
    default_message = "Message store timed out"


class StoreUnavailable(MessageBoardError):
    """The store could not be reached or failed transiently."""

    status_code = 503
    default_message = "Message store unavailable"


# Status code → error class, used by the client to rebuild errors from
# HTTP responses.  401 and 403 both surface as ``Unauthorized``.
ERRORS_BY_STATUS = {
    401: Unauthorized,
    403: Unauthorized,
    404: NotFound,
    422: ValidationError,
    503: StoreUnavailable,
    504: StoreTimeout,
}
