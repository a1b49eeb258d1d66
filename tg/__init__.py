"""Telegram Bot API text-message client — pydantic models, service client, and exceptions.

The :class:`Client` class wraps ``getMe``, ``sendMessage``,
``editMessageText`` and ``deleteMessage`` with synchronous methods.
Module-level async free functions in :mod:`tg.client` provide non-blocking
wrappers around the same calls.

Usage::

    from tg import Client, with_api_server, TgError
    from tg.models import ParseMode

    client = Client(token, with_api_server("http://localhost:8081"))
    message = client.send_message(chat_id, "*hi*", parse_mode=ParseMode.MARKDOWN)
"""

from tg.client import Client, with_api_server, with_http_client
from tg.exceptions import (
    APIException,
    ConfigurationError,
    DecodeError,
    RequestValidationError,
    TgError,
    TransportError,
)
from tg.models import MAX_TEXT_SIZE, ParseMode
from tg.transport import HTTPClient, SessionTransport

__all__ = [
    "Client",
    "with_api_server",
    "with_http_client",
    "APIException",
    "ConfigurationError",
    "DecodeError",
    "RequestValidationError",
    "TgError",
    "TransportError",
    "MAX_TEXT_SIZE",
    "ParseMode",
    "HTTPClient",
    "SessionTransport",
]
