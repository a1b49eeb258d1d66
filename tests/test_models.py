"""Tests for request validation, wire serialization and result models."""

import json
import sys
import os
from datetime import datetime, timezone

import pytest

# Ensure the project root is importable.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tg.exceptions import (
    EmptyChatIDError,
    EmptyTextError,
    IncorrectMessageIDError,
    IncorrectMessageThreadIDError,
    InvalidFieldError,
    RequestValidationError,
    TextTooLongError,
    UnknownParseModeError,
)
from tg.models import (
    MAX_TEXT_SIZE,
    DeleteMessage,
    EditMessage,
    Message,
    ParseMode,
    Response,
    SendMessage,
    User,
)


# ── Rule 1: chat target ──────────────────────────────────────────────────────


class TestEmptyChatID:
    """A zero chat id is reported first, whatever else is wrong."""

    @pytest.mark.parametrize(
        "request_",
        [
            SendMessage(chat_id=0, text="hi"),
            SendMessage(chat_id=0, text=""),
            SendMessage(chat_id=0, text="x" * (MAX_TEXT_SIZE + 1), parse_mode="bogus"),
            SendMessage(chat_id=0, text="hi", message_thread_id=-1),
            EditMessage(chat_id=0, message_id=0, text=""),
            DeleteMessage(chat_id=0, message_id=0),
            DeleteMessage(chat_id=0, message_id=5),
        ],
    )
    def test_zero_chat_id(self, request_) -> None:
        with pytest.raises(EmptyChatIDError):
            request_.check()

    def test_negative_chat_id_is_valid(self) -> None:
        """Group and channel ids are negative."""
        SendMessage(chat_id=-1001234, text="hi").check()


# ── Rules 2 and 3: text ──────────────────────────────────────────────────────


class TestText:
    """Validate text presence and length bounds."""

    @pytest.mark.parametrize("length", [1, 2, 100, MAX_TEXT_SIZE - 1, MAX_TEXT_SIZE])
    def test_length_within_bounds(self, length: int) -> None:
        SendMessage(chat_id=1, text="x" * length).check()
        EditMessage(chat_id=1, message_id=1, text="x" * length).check()

    def test_empty_text(self) -> None:
        with pytest.raises(EmptyTextError):
            SendMessage(chat_id=1, text="").check()
        with pytest.raises(EmptyTextError):
            EditMessage(chat_id=1, message_id=1, text="").check()

    def test_text_too_long(self) -> None:
        with pytest.raises(TextTooLongError):
            SendMessage(chat_id=1, text="x" * (MAX_TEXT_SIZE + 1)).check()
        with pytest.raises(TextTooLongError):
            EditMessage(chat_id=1, message_id=1, text="x" * (MAX_TEXT_SIZE + 1)).check()

    def test_length_counts_characters(self) -> None:
        """Multi-byte characters count once each."""
        SendMessage(chat_id=1, text="é" * MAX_TEXT_SIZE).check()

    def test_empty_text_reported_before_message_id(self) -> None:
        with pytest.raises(EmptyTextError):
            EditMessage(chat_id=1, message_id=0, text="").check()


# ── Rule 4: parse mode ───────────────────────────────────────────────────────


class TestParseMode:
    """Validate the enumerated parse modes."""

    @pytest.mark.parametrize("mode", ["", "MarkdownV2", "Markdown", "HTML"])
    def test_known_modes(self, mode: str) -> None:
        SendMessage(chat_id=1, text="hi", parse_mode=mode).check()
        EditMessage(chat_id=1, message_id=1, text="hi", parse_mode=mode).check()

    @pytest.mark.parametrize("mode", ["markdown", "html", "MarkdownV3", " ", "plain", "HTML "])
    def test_unknown_modes(self, mode: str) -> None:
        with pytest.raises(UnknownParseModeError):
            SendMessage(chat_id=1, text="hi", parse_mode=mode).check()
        with pytest.raises(UnknownParseModeError):
            EditMessage(chat_id=1, message_id=1, text="hi", parse_mode=mode).check()

    def test_enum_member_accepted(self) -> None:
        sm = SendMessage(chat_id=1, text="hi", parse_mode=ParseMode.MARKDOWN_V2)
        sm.check()
        assert sm.parse_mode == "MarkdownV2"

    def test_unknown_mode_reported_before_thread_id(self) -> None:
        with pytest.raises(UnknownParseModeError):
            SendMessage(chat_id=1, text="hi", parse_mode="bogus", message_thread_id=-1).check()


# ── Rules 5 and 6: identifiers ───────────────────────────────────────────────


class TestIdentifiers:
    """Validate message_thread_id and message_id."""

    def test_thread_id_zero_is_unset(self) -> None:
        SendMessage(chat_id=1, text="hi", message_thread_id=0).check()

    def test_negative_thread_id(self) -> None:
        with pytest.raises(IncorrectMessageThreadIDError):
            SendMessage(chat_id=1, text="hi", message_thread_id=-1).check()

    @pytest.mark.parametrize("message_id", [0, -1])
    def test_non_positive_message_id(self, message_id: int) -> None:
        with pytest.raises(IncorrectMessageIDError):
            EditMessage(chat_id=1, message_id=message_id, text="hi").check()
        with pytest.raises(IncorrectMessageIDError):
            DeleteMessage(chat_id=1, message_id=message_id).check()

    def test_positive_message_id(self) -> None:
        EditMessage(chat_id=1, message_id=7, text="hi").check()
        DeleteMessage(chat_id=1, message_id=7).check()


class TestCheckIsPure:
    """check() never mutates the request."""

    @pytest.mark.parametrize(
        "request_",
        [
            SendMessage(chat_id=1, text="hi", parse_mode="HTML"),
            SendMessage(chat_id=1, text=""),
            EditMessage(chat_id=1, message_id=0, text="hi"),
            DeleteMessage(chat_id=0, message_id=1),
        ],
    )
    def test_repeated_check_same_outcome(self, request_) -> None:
        before = request_.model_dump()
        outcomes = []
        for _ in range(2):
            try:
                request_.check()
                outcomes.append(None)
            except RequestValidationError as exc:
                outcomes.append((type(exc), str(exc)))
        assert outcomes[0] == outcomes[1]
        assert request_.model_dump() == before


# ── Factories ────────────────────────────────────────────────────────────────


class TestCreate:
    """Validate the create() factories."""

    def test_send_create_applies_options(self) -> None:
        sm = SendMessage.create(42, "hi", parse_mode="HTML", message_thread_id=3, protect_content=True)
        assert sm.chat_id == 42
        assert sm.parse_mode == "HTML"
        assert sm.message_thread_id == 3
        assert sm.protect_content is True

    def test_send_create_prefixes_model_name(self) -> None:
        with pytest.raises(EmptyTextError) as exc_info:
            SendMessage.create(42, "")
        assert str(exc_info.value) == "SendMessage: empty text"

    def test_edit_create(self) -> None:
        em = EditMessage.create(42, 7, "hi", parse_mode="Markdown")
        assert (em.chat_id, em.message_id, em.text, em.parse_mode) == (42, 7, "hi", "Markdown")

    def test_edit_create_error(self) -> None:
        with pytest.raises(IncorrectMessageIDError) as exc_info:
            EditMessage.create(42, 0, "hi")
        assert str(exc_info.value) == "EditMessage: incorrect message_id"

    def test_delete_create_error(self) -> None:
        with pytest.raises(EmptyChatIDError) as exc_info:
            DeleteMessage.create(0, 1)
        assert str(exc_info.value) == "DeleteMessage: empty chat_id"

    def test_wrong_field_type(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            SendMessage.create("not-a-number", "hi")  # type: ignore[arg-type]
        assert str(exc_info.value).startswith("SendMessage: chat_id: ")
        assert isinstance(exc_info.value, RequestValidationError)


# ── Serialization ────────────────────────────────────────────────────────────


def _wire(model) -> dict:
    return json.loads(model.model_dump_json(exclude_defaults=True))


class TestWireFormat:
    """Field names and omission rules must match the Bot API."""

    def test_send_minimal(self) -> None:
        assert _wire(SendMessage(chat_id=42, text="hi")) == {"chat_id": 42, "text": "hi"}

    def test_send_full(self) -> None:
        sm = SendMessage(
            chat_id=42,
            text="hi",
            parse_mode=ParseMode.HTML,
            message_thread_id=9,
            disable_web_page_preview=True,
            disable_notification=True,
            protect_content=True,
        )
        assert _wire(sm) == {
            "chat_id": 42,
            "text": "hi",
            "parse_mode": "HTML",
            "message_thread_id": 9,
            "disable_web_page_preview": True,
            "disable_notification": True,
            "protect_content": True,
        }

    def test_edit(self) -> None:
        em = EditMessage(chat_id=42, message_id=7, text="hi", parse_mode="MarkdownV2")
        assert _wire(em) == {"chat_id": 42, "message_id": 7, "text": "hi", "parse_mode": "MarkdownV2"}

    def test_delete(self) -> None:
        assert _wire(DeleteMessage(chat_id=42, message_id=7)) == {"chat_id": 42, "message_id": 7}


# ── Results and envelope ─────────────────────────────────────────────────────


class TestResults:
    """Validate result models and the generic envelope."""

    def test_user_from_envelope(self) -> None:
        envelope = Response[User].model_validate_json('{"ok":true,"result":{"id":1,"first_name":"test"}}')
        assert envelope.ok is True
        assert envelope.result == User(id=1, first_name="test", username="")

    def test_user_ignores_unknown_fields(self) -> None:
        user = User.model_validate({"id": 5, "is_bot": True, "first_name": "Bot", "username": "the_bot"})
        assert user.username == "the_bot"

    def test_message_created_at(self) -> None:
        msg = Message(message_id=1, date=1700000000)
        assert msg.created_at == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_bool_result(self) -> None:
        envelope = Response[bool].model_validate_json('{"ok":true,"result":true}')
        assert envelope.result is True

    def test_error_envelope(self) -> None:
        envelope = Response[User].model_validate_json(
            '{"ok":false,"error_code":429,"description":"Too Many Requests","parameters":{"retry_after":5}}'
        )
        assert envelope.ok is False
        assert envelope.error_code == 429
        assert envelope.retry_after == 5

    def test_defaults(self) -> None:
        envelope = Response[User].model_validate_json("{}")
        assert envelope.ok is False
        assert envelope.description == ""
        assert envelope.result is None
        assert envelope.retry_after is None
