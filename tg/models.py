"""Pydantic models for the Telegram Bot API text-message endpoints.

Request models (:class:`SendMessage`, :class:`EditMessage`,
:class:`DeleteMessage`) serialize to the exact wire field names and expose
:meth:`check` for the local validation rules.  Result models and the generic
:class:`Response` envelope are decode targets for :meth:`tg.client.Client.invoke`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ValidationError, field_validator

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

MAX_TEXT_SIZE: int = 4096

T = TypeVar("T")


class ParseMode(str, Enum):
    """Text formatting directives understood by the Bot API."""

    NONE = ""
    MARKDOWN_V2 = "MarkdownV2"
    MARKDOWN = "Markdown"
    HTML = "HTML"


_PARSE_MODES: frozenset[str] = frozenset(mode.value for mode in ParseMode)


def _build(model: type[BaseModel], **fields: Any) -> Any:
    """Construct *model* and run its checks, prefixing errors with the model name."""
    try:
        request = model(**fields)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidFieldError(f"{location}: {first['msg']}").add_context(model.__name__) from exc
    try:
        request.check()
    except RequestValidationError as exc:
        exc.add_context(model.__name__)
        raise
    return request


# ── Requests ─────────────────────────────────────────────────────────────────


class BaseMessage(BaseModel):
    """Fields shared by the send and edit requests."""

    chat_id: int
    text: str
    parse_mode: str = ""

    @field_validator("parse_mode", mode="before")
    @classmethod
    def unwrap_parse_mode(cls, value: Any) -> Any:
        if isinstance(value, ParseMode):
            return value.value
        return value

    def check(self) -> None:
        """Raise the first violated rule: chat, text, length, parse mode."""
        if self.chat_id == 0:
            raise EmptyChatIDError()
        if self.text == "":
            raise EmptyTextError()
        if len(self.text) > MAX_TEXT_SIZE:
            raise TextTooLongError()
        if self.parse_mode not in _PARSE_MODES:
            raise UnknownParseModeError()


class SendMessage(BaseMessage):
    """Body of ``sendMessage``."""

    message_thread_id: int = 0
    disable_web_page_preview: bool = False
    disable_notification: bool = False
    protect_content: bool = False

    def check(self) -> None:
        super().check()
        if self.message_thread_id < 0:
            raise IncorrectMessageThreadIDError()

    @classmethod
    def create(cls, chat_id: int, text: str, **options: Any) -> "SendMessage":
        """Build a checked request; *options* are any of the optional fields."""
        return _build(cls, chat_id=chat_id, text=text, **options)


class EditMessage(BaseMessage):
    """Body of ``editMessageText``."""

    message_id: int

    def check(self) -> None:
        super().check()
        if self.message_id <= 0:
            raise IncorrectMessageIDError()

    @classmethod
    def create(cls, chat_id: int, message_id: int, text: str, parse_mode: str = "") -> "EditMessage":
        return _build(cls, chat_id=chat_id, message_id=message_id, text=text, parse_mode=parse_mode)


class DeleteMessage(BaseModel):
    """Body of ``deleteMessage``."""

    chat_id: int
    message_id: int

    def check(self) -> None:
        if self.chat_id == 0:
            raise EmptyChatIDError()
        if self.message_id <= 0:
            raise IncorrectMessageIDError()

    @classmethod
    def create(cls, chat_id: int, message_id: int) -> "DeleteMessage":
        return _build(cls, chat_id=chat_id, message_id=message_id)


# ── Results ──────────────────────────────────────────────────────────────────


class User(BaseModel):
    """The bot's own account, as returned by ``getMe``."""

    id: int = 0
    first_name: str = ""
    username: str = ""


class Message(BaseModel):
    """A sent or edited message."""

    message_id: int = 0
    date: int = 0

    @property
    def created_at(self) -> datetime:
        """``date`` as an aware UTC datetime."""
        return datetime.fromtimestamp(self.date, tz=timezone.utc)


# ── Envelope ─────────────────────────────────────────────────────────────────


class ResponseParameters(BaseModel):
    """Extra hints attached to a failed response."""

    retry_after: Optional[int] = None
    migrate_to_chat_id: Optional[int] = None


class Response(BaseModel, Generic[T]):
    """Uniform envelope wrapping every Bot API response.

    The shape of ``result`` is fixed by the caller through the type
    parameter; the payload itself is not self-describing.
    """

    ok: bool = False
    result: Optional[T] = None
    error_code: int = 0
    description: str = ""
    parameters: Optional[ResponseParameters] = None

    @property
    def retry_after(self) -> Optional[int]:
        if self.parameters is None:
            return None
        return self.parameters.retry_after
