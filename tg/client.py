"""Client -- service layer for the Telegram Bot API text-message endpoints.

:meth:`Client.invoke` is the single generic call: it serializes a request
model, POSTs it to ``<endpoint><method>`` through the injected transport and
decodes the ``{"ok", "result", ...}`` envelope into the caller's result type.
The four public operations are thin wrappers around it.

The module also provides async free-function helpers (``get_me``,
``send_message``, ``edit_message``, ``delete_message``) that offload the
blocking call via :func:`asyncio.to_thread`.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re
from typing import Any, Callable, Iterator, Optional, TypeVar, Union
from urllib.parse import urlsplit

import requests
from pydantic import BaseModel, ValidationError

from tg.exceptions import (
    APIException,
    DecodeError,
    EmptyHostError,
    EmptyMethodError,
    HTTPClientNilError,
    IncorrectSchemeError,
    IncorrectTokenError,
    InvalidAPIServerError,
    TgError,
    TransportError,
    ValueNilError,
    ValueNotModelError,
    ValueNotModelOrBoolError,
    ValueNotTypeError,
    redact_token,
)
from tg.models import DeleteMessage, EditMessage, Message, Response, SendMessage, User
from tg.transport import HTTPClient, default_transport

_sdk_logger = logging.getLogger("tg.client")

T = TypeVar("T")

DEFAULT_API_SERVER: str = "https://api.telegram.org"

GET_ME_METHOD = "getMe"
SEND_MESSAGE_METHOD = "sendMessage"
EDIT_MESSAGE_TEXT_METHOD = "editMessageText"
DELETE_MESSAGE_METHOD = "deleteMessage"

_TOKEN_RE = re.compile(r"\d+:[\w\-]+", re.ASCII)

Option = Callable[["Client"], None]


# ── Options ──────────────────────────────────────────────────────────────────


def with_api_server(server: str) -> Option:
    """Point the client at another Bot API server (e.g. a local one)."""

    def apply(client: "Client") -> None:
        try:
            parts = urlsplit(server)
        except ValueError as exc:
            raise InvalidAPIServerError(str(exc)).add_context("apiserver") from exc
        if not parts.scheme:
            raise InvalidAPIServerError().add_context("apiserver")
        if parts.scheme not in ("http", "https"):
            raise IncorrectSchemeError().add_context("url").add_context("apiserver")
        if not parts.netloc:
            raise EmptyHostError().add_context("url").add_context("apiserver")
        client._endpoint = server.rstrip("/")

    return apply


def with_http_client(http_client: Optional[HTTPClient]) -> Option:
    """Use *http_client* instead of the shared default transport."""

    def apply(client: "Client") -> None:
        if http_client is None:
            raise HTTPClientNilError()
        client._http = http_client

    return apply


# ── Helpers (private) ────────────────────────────────────────────────────────


@contextlib.contextmanager
def _operation(name: str) -> Iterator[None]:
    """Prefix any :class:`TgError` escaping the block with *name*."""
    try:
        yield
    except TgError as exc:
        exc.add_context(name)
        raise


def _check_request(request: Any) -> None:
    if not isinstance(request, BaseModel):
        raise ValueNotModelError().add_context("validate: request")


def _check_result_type(result_type: Any) -> None:
    if result_type is None:
        raise ValueNilError().add_context("validate: result")
    if not isinstance(result_type, type):
        raise ValueNotTypeError().add_context("validate: result")
    if result_type is not bool and not issubclass(result_type, BaseModel):
        raise ValueNotModelOrBoolError().add_context("validate: result")


def _decode(body: bytes, result_type: type[T]) -> T:
    """Decode an envelope, returning the result or raising the reported error."""
    try:
        envelope = Response[result_type].model_validate_json(body, strict=True)  # type: ignore[valid-type]
    except ValidationError as exc:
        raise DecodeError(str(exc.errors()[0]["msg"])).add_context("json").add_context("response") from exc

    if not envelope.ok:
        raise APIException(envelope.error_code, envelope.description, envelope.retry_after)

    if envelope.result is None:
        try:
            return result_type()
        except ValidationError as exc:
            raise DecodeError("missing result").add_context("response") from exc
    return envelope.result


class Client:
    """Client-side service layer for the Telegram Bot API.

    Holds no mutable state after construction; thread safety is that of the
    injected transport.
    """

    def __init__(self, token: str, *options: Option) -> None:
        """Create a client for the bot identified by *token*.

        Args:
            token: Bot token of the form ``<digits>:<secret>``.
            *options: Configuration steps (:func:`with_api_server`,
                :func:`with_http_client`), applied in order.

        Raises:
            IncorrectTokenError: *token* has the wrong shape.
            ConfigurationError: An option rejected its value.
        """
        if not isinstance(token, str) or not _TOKEN_RE.fullmatch(token):
            raise IncorrectTokenError().add_context("Client")

        self._endpoint: str = DEFAULT_API_SERVER
        self._http: Optional[HTTPClient] = None

        with _operation("Client"):
            for option in options:
                option(self)

        if self._http is None:
            self._http = default_transport()

        self._endpoint += "/bot" + token + "/"

    def __repr__(self) -> str:
        return f"Client(endpoint={redact_token(self._endpoint)!r})"

    # ------------------------------------------------------------------
    #  Generic call
    # ------------------------------------------------------------------

    def invoke(
        self,
        method: str,
        request: Optional[BaseModel],
        result_type: type[T],
        *,
        timeout: Optional[float] = None,
    ) -> T:
        """Call remote operation *method* and decode its result as *result_type*.

        Args:
            method: Remote operation name, e.g. ``"sendMessage"``.
            request: Request model already checked by the caller, or ``None``
                for operations without a body.
            result_type: A pydantic model class or ``bool``.
            timeout: Seconds allowed for this call; ``None`` keeps the
                transport default.

        Raises:
            RequestValidationError: Bad *method*, *request* or *result_type*;
                raised before any I/O.
            TransportError: The exchange or the body read failed.
            DecodeError: The body is not a valid envelope.
            APIException: The server answered ``"ok": false``.
        """
        if not method:
            raise EmptyMethodError()

        body: Optional[bytes] = None
        if request is not None:
            _check_request(request)
            body = request.model_dump_json(exclude_defaults=True).encode("utf-8")

        _check_result_type(result_type)

        prepared = requests.Request(
            "POST",
            self._endpoint + method,
            data=body,
            headers={"Content-Type": "application/json"},
        ).prepare()

        try:
            response = self._http.send(prepared, timeout=timeout)  # type: ignore[union-attr]
        except (requests.RequestException, OSError) as exc:
            _sdk_logger.debug("Bot API request failed", extra={"api_endpoint": method, "error": redact_token(str(exc))})
            raise TransportError(str(exc)).add_context("request") from exc

        try:
            _sdk_logger.debug("Bot API response", extra={"api_endpoint": method, "status_code": getattr(response, "status_code", None)})
            try:
                content = response.content
            except (requests.RequestException, OSError) as exc:
                raise TransportError(str(exc)).add_context("body").add_context("response") from exc
            return _decode(content, result_type)
        finally:
            response.close()

    # ------------------------------------------------------------------
    #  Operations
    # ------------------------------------------------------------------

    def get_me(self, *, timeout: Optional[float] = None) -> User:
        """Return the bot's own account; a cheap way to test the token."""
        with _operation(GET_ME_METHOD):
            return self.invoke(GET_ME_METHOD, None, User, timeout=timeout)

    def send_message(
        self,
        chat_id: int,
        text: str,
        *,
        parse_mode: str = "",
        message_thread_id: int = 0,
        disable_web_page_preview: bool = False,
        disable_notification: bool = False,
        protect_content: bool = False,
        timeout: Optional[float] = None,
    ) -> Message:
        """Send a text message and return the created :class:`Message`."""
        with _operation(SEND_MESSAGE_METHOD):
            request = SendMessage.create(
                chat_id,
                text,
                parse_mode=parse_mode,
                message_thread_id=message_thread_id,
                disable_web_page_preview=disable_web_page_preview,
                disable_notification=disable_notification,
                protect_content=protect_content,
            )
            return self.invoke(SEND_MESSAGE_METHOD, request, Message, timeout=timeout)

    def edit_message(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        *,
        parse_mode: str = "",
        timeout: Optional[float] = None,
    ) -> Message:
        """Replace the text of message *message_id*."""
        with _operation(EDIT_MESSAGE_TEXT_METHOD):
            request = EditMessage.create(chat_id, message_id, text, parse_mode=parse_mode)
            return self.invoke(EDIT_MESSAGE_TEXT_METHOD, request, Message, timeout=timeout)

    def delete_message(self, chat_id: int, message_id: int, *, timeout: Optional[float] = None) -> bool:
        """Delete message *message_id*; returns the server's confirmation flag."""
        with _operation(DELETE_MESSAGE_METHOD):
            request = DeleteMessage.create(chat_id, message_id)
            return self.invoke(DELETE_MESSAGE_METHOD, request, bool, timeout=timeout)


# ── Async helpers ────────────────────────────────────────────────────────────


async def _in_thread(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking client call inside a thread to keep the event loop free.

    Cancelling the awaiting task does not stop the worker thread; pass
    ``timeout`` to bound the HTTP exchange itself.
    """
    return await asyncio.to_thread(func, *args, **kwargs)


async def get_me(client: Client, timeout: Optional[float] = None) -> User:
    return await _in_thread(client.get_me, timeout=timeout)


async def send_message(client: Client, chat_id: int, text: str, **options: Union[str, int, float, bool, None]) -> Message:
    """Async :meth:`Client.send_message`; *options* are its keyword arguments."""
    return await _in_thread(client.send_message, chat_id, text, **options)


async def edit_message(
    client: Client,
    chat_id: int,
    message_id: int,
    text: str,
    parse_mode: str = "",
    timeout: Optional[float] = None,
) -> Message:
    return await _in_thread(client.edit_message, chat_id, message_id, text, parse_mode=parse_mode, timeout=timeout)


async def delete_message(client: Client, chat_id: int, message_id: int, timeout: Optional[float] = None) -> bool:
    return await _in_thread(client.delete_message, chat_id, message_id, timeout=timeout)
