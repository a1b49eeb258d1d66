"""Exception hierarchy for the tg Telegram Bot API client.

Every error raised by the package derives from :class:`TgError`.  Layers
that re-raise an error prepend their own name with :meth:`TgError.add_context`
instead of wrapping it in a new exception, so the original class survives
and callers can still ``except EmptyChatIDError`` after it has passed through
``sendMessage``.
"""

from __future__ import annotations

import re
from typing import Optional

_TOKEN_PATH_RE = re.compile(r"/bot\d+:[\w\-]+/", re.ASCII)

REDACTED_PATH = "/bot<redacted>/"


def redact_token(text: str) -> str:
    """Replace every ``/bot<token>/`` path segment in *text* with a placeholder."""
    return _TOKEN_PATH_RE.sub(REDACTED_PATH, text)


class TgError(Exception):
    """Base exception for the tg client.

    Attributes:
        message: The bare error message, without context prefixes.
        context: Names of the layers the error passed through, outermost first.
    """

    default_message: str = "tg error"

    def __init__(self, message: Optional[str] = None) -> None:
        """Initialise with *message*, falling back to the class default."""
        self.message = redact_token(message) if message is not None else self.default_message
        self.context: list[str] = []
        super().__init__(self.message)

    def add_context(self, name: str) -> "TgError":
        """Prefix the error with *name* and return the same instance."""
        self.context.insert(0, name)
        return self

    def __str__(self) -> str:
        return redact_token(": ".join([*self.context, self.message]))


# ── Local validation ─────────────────────────────────────────────────────────


class RequestValidationError(TgError, ValueError):
    """A caller-supplied request or result type violates a precondition."""

    default_message = "invalid request"


class EmptyChatIDError(RequestValidationError):
    default_message = "empty chat_id"


class EmptyTextError(RequestValidationError):
    default_message = "empty text"


class TextTooLongError(RequestValidationError):
    default_message = "text too long"


class UnknownParseModeError(RequestValidationError):
    default_message = "unknown parse_mode"


class IncorrectMessageThreadIDError(RequestValidationError):
    default_message = "incorrect message_thread_id"


class IncorrectMessageIDError(RequestValidationError):
    default_message = "incorrect message_id"


class InvalidFieldError(RequestValidationError):
    """A request field has the wrong type (rejected by pydantic)."""

    default_message = "invalid field"


class EmptyMethodError(RequestValidationError):
    default_message = "empty method"


class ValueNilError(RequestValidationError, TypeError):
    default_message = "value is None"


class ValueNotTypeError(RequestValidationError, TypeError):
    default_message = "value is not a type"


class ValueNotModelOrBoolError(RequestValidationError, TypeError):
    default_message = "value is not a model or bool"


class ValueNotModelError(RequestValidationError, TypeError):
    default_message = "value is not a model"


# ── Configuration ────────────────────────────────────────────────────────────


class ConfigurationError(TgError, ValueError):
    """Client construction failed; raised only from :class:`tg.client.Client`."""

    default_message = "invalid configuration"


class IncorrectTokenError(ConfigurationError):
    default_message = "incorrect token"


class HTTPClientNilError(ConfigurationError):
    default_message = "http client is None"


class InvalidAPIServerError(ConfigurationError):
    default_message = "invalid api server url"


class IncorrectSchemeError(InvalidAPIServerError):
    default_message = "incorrect scheme"


class EmptyHostError(InvalidAPIServerError):
    default_message = "empty host"


# ── Exchange ─────────────────────────────────────────────────────────────────


class TransportError(TgError):
    """The HTTP exchange itself failed (network, timeout, body read).

    The underlying exception is available as ``__cause__`` so callers can
    test its kind (e.g. :class:`requests.Timeout`).  Its own text is not
    redacted and may contain the request URL with the bot token: log it
    through :class:`core.logger.TgLogger` configured with
    :func:`redact_token`, never with a bare formatter.
    """

    default_message = "transport error"


class DecodeError(TgError):
    """The response body was not a well-formed envelope."""

    default_message = "malformed response"


class APIException(TgError):
    """Error reported by the Telegram Bot API (``"ok": false``).

    Attributes:
        error_code: Numeric code from the envelope (``0`` when absent).
        description: Human-readable description; also the display string.
        retry_after: Seconds the server asks the caller to wait, if any.
    """

    def __init__(self, error_code: int = 0, description: str = "", retry_after: Optional[int] = None) -> None:
        """Initialise from the envelope's error fields."""
        self.error_code = error_code
        self.description = description
        self.retry_after = retry_after
        super().__init__(description or "Unknown error")
