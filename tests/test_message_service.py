"""Tests for MessageService orchestration: authorization, validation, storage."""

import asyncio

import pytest

from message_board_api.app.core.errors import (
    InvalidEmail,
    InvalidText,
    NotFound,
    TextTooLong,
    Unauthorized,
)
from message_board_api.app.core.permissions import Caller

USER = Caller.authenticated("alice", "alice@example.com")
PUBLIC = Caller.public()


def run(coro):
    return asyncio.run(coro)


@pytest.mark.parametrize("text", ["", "hello", "x" * 500])
def test_authenticated_create_succeeds(service, text):
    message = run(service.create_message(text, "a@b.com", USER))
    assert message.text == text
    assert message.likes == 0
    assert message.author_email == "a@b.com"


def test_text_too_long_is_rejected_without_writing(service, store):
    run(service.create_message("existing", None, USER))
    with pytest.raises(TextTooLong):
        run(service.create_message("x" * 501, "a@b.com", USER))
    assert store.count() == 1


def test_invalid_email_is_rejected_without_writing(service, store):
    with pytest.raises(InvalidEmail):
        run(service.create_message("hello", "nope", USER))
    assert store.count() == 0


@pytest.mark.parametrize("text", ["hello", "x" * 501])
def test_public_create_is_unauthorized_regardless_of_text(service, store, text):
    with pytest.raises(Unauthorized):
        run(service.create_message(text, "a@b.com", PUBLIC))
    assert store.count() == 0


def test_author_email_defaults_to_caller_email(service):
    message = run(service.create_message("hello", None, USER))
    assert message.author_email == "alice@example.com"


def test_author_email_stays_empty_without_email_claim(service):
    message = run(service.create_message("hello", None, Caller.authenticated("bot")))
    assert message.author_email is None


def test_list_is_identical_for_public_and_authenticated(service):
    run(service.create_message("one", None, USER))
    run(service.create_message("two", None, USER))
    public_view = run(service.list_messages(PUBLIC))
    user_view = run(service.list_messages(USER))
    assert public_view == user_view
    assert [m.text for m in public_view] == ["one", "two"]


def test_create_then_list_returns_the_created_record(service):
    created = run(service.create_message("hello", "a@b.com", USER))
    assert run(service.list_messages(PUBLIC)) == [created]


def test_like_twice_scenario(service):
    created = run(service.create_message("hello", "a@b.com", USER))
    assert created.id
    assert created.created_at
    run(service.like_message(created.id, USER))
    liked = run(service.like_message(created.id, USER))
    assert liked.likes == 2


def test_like_ignores_stale_client_count(service):
    created = run(service.create_message("hello", None, USER))
    run(service.like_message(created.id, USER, current_likes=0))
    # A second client still believes the count is zero.
    liked = run(service.like_message(created.id, USER, current_likes=0))
    assert liked.likes == 2


def test_public_like_is_unauthorized(service):
    created = run(service.create_message("hello", None, USER))
    with pytest.raises(Unauthorized):
        run(service.like_message(created.id, PUBLIC))
    assert run(service.get_message(created.id, PUBLIC)).likes == 0


def test_like_unknown_message(service, store):
    created = run(service.create_message("hello", None, USER))
    with pytest.raises(NotFound):
        run(service.like_message("missing", USER))
    assert store.list() == [created]


def test_public_like_of_unknown_message_is_unauthorized_not_missing(service):
    with pytest.raises(Unauthorized):
        run(service.like_message("missing", PUBLIC))


def test_concurrent_likes_count_exactly(service):
    created = run(service.create_message("hello", None, USER))
    likes = 12

    async def like_many():
        return await asyncio.gather(*(service.like_message(created.id, USER) for _ in range(likes)))

    run(like_many())
    assert run(service.get_message(created.id, PUBLIC)).likes == likes


def test_delete_requires_authentication(service):
    created = run(service.create_message("hello", None, USER))
    with pytest.raises(Unauthorized):
        run(service.delete_message(created.id, PUBLIC))
    run(service.delete_message(created.id, USER))
    assert run(service.list_messages(PUBLIC)) == []
    with pytest.raises(NotFound):
        run(service.get_message(created.id, PUBLIC))


def test_unencodable_text_is_rejected_without_writing(service, store):
    with pytest.raises(InvalidText):
        run(service.create_message("\udfff", None, USER))
    assert store.count() == 0


def test_malformed_email_claim_is_dropped(service):
    caller = Caller.authenticated("bob", "not-an-email")
    message = run(service.create_message("hello", None, caller))
    assert message.author_email is None


def test_explicit_email_still_wins_over_claim(service):
    message = run(service.create_message("hello", "a@b.com", USER))
    assert message.author_email == "a@b.com"
