"""
Field rules for message payloads.

These checks run before anything is written to the store, so a message
that breaks a rule never leaves a trace.  All functions are pure: they
either return ``None`` or raise a ``ValidationError`` subclass.
"""

import re
from typing import Optional

from .errors import InvalidEmail, InvalidText, MissingText, TextTooLong

MAX_TEXT_LENGTH = 500

# Syntactic check only: one "@", no whitespace, a dot in the domain part.
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _is_utf8_encodable(value: str) -> bool:
    # JSON allows lone surrogates such as "\ud800", which SQLite cannot store.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_text(text: Optional[str]) -> None:
    """Reject missing text, text longer than ``MAX_TEXT_LENGTH`` characters
    and text that is not valid Unicode."""
    if text is None:
        raise MissingText()
    if len(text) > MAX_TEXT_LENGTH:
        raise TextTooLong(f"text may not exceed {MAX_TEXT_LENGTH} characters")
    if not _is_utf8_encodable(text):
        raise InvalidText()


def is_valid_email(email: str) -> bool:
    return _is_utf8_encodable(email) and EMAIL_PATTERN.match(email) is not None


def validate_email(email: Optional[str]) -> None:
    """Accept ``None`` or anything that looks like ``local@domain.tld``."""
    if email is None:
        return
    if not is_valid_email(email):
        raise InvalidEmail()


def validate_message(text: Optional[str], author_email: Optional[str]) -> None:
    validate_text(text)
    validate_email(author_email)
