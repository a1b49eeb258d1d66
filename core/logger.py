"""TgLogger — process-wide JSON logger for the tg client and CLI.

Every record is one JSON line on stdout, mirrored to a rotating file when
``TG_LOG_FILE`` is set.  Library modules log through children of ``"tg"``
(``logging.getLogger("tg.client")``) so they pick up the same handlers.

Records may carry a Bot API URL, and those URLs embed the bot token.  The
formatter therefore accepts a ``redact`` callable that is applied to the
rendered message, to string extras and to any traceback before output.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Callable, Optional

Redactor = Callable[[str], str]

# Attributes every LogRecord has; whatever else is on the record came in via ``extra``.
_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime"}


class _JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    ``timestamp``, ``level``, ``logger``, ``message``, ``module`` and
    ``func_name`` are always present; ``extra`` fields are merged in::

        logger.info("Success send message", extra={"chat_id": 42, "message_id": 7})
        {"timestamp": "…", "level": "INFO", …, "chat_id": 42, "message_id": 7}

    An ``exception`` key holds the formatted traceback when ``exc_info`` is set.
    """

    def __init__(self, redact: Optional[Redactor] = None) -> None:
        super().__init__()
        self._redact: Redactor = redact or (lambda text: text)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._redact(record.getMessage()),
            "module": record.module,
            "func_name": record.funcName,
        }

        for key, value in record.__dict__.items():
            if key in _RECORD_ATTRS or key in entry:
                continue
            entry[key] = self._redact(value) if isinstance(value, str) else value

        if record.exc_info:
            entry["exception"] = self._redact(self.formatException(record.exc_info))

        return json.dumps(entry, ensure_ascii=False, default=str)


class TgLogger:
    """Owner of the ``"tg"`` logger and its handlers.

    The first :meth:`get_logger` call configures level, file and redaction;
    later calls return the same logger unchanged.
    """

    _instance: Optional["TgLogger"] = None
    _logger: Optional[logging.Logger] = None

    _MAX_BYTES: int = 5 * 1024 * 1024  # 5 MB
    _BACKUP_COUNT: int = 5

    def __new__(
        cls,
        level: int = logging.INFO,
        log_file: Optional[str] = None,
        redact: Optional[Redactor] = None,
    ) -> "TgLogger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._configure(level, log_file, redact)
        return cls._instance

    def _configure(self, level: int, log_file: Optional[str], redact: Optional[Redactor]) -> None:
        self._logger = logging.getLogger("tg")
        self._logger.setLevel(level)

        # Handlers survive module reloads.
        if self._logger.handlers:
            return

        formatter = _JsonFormatter(redact)
        handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

        if log_file:
            log_dir = os.path.dirname(log_file)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)
            handlers.append(RotatingFileHandler(
                log_file,
                maxBytes=self._MAX_BYTES,
                backupCount=self._BACKUP_COUNT,
                encoding="utf-8",
            ))

        for handler in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    @staticmethod
    def get_logger(
        level: int = logging.INFO,
        log_file: Optional[str] = None,
        redact: Optional[Redactor] = None,
    ) -> logging.Logger:
        """Return the shared ``"tg"`` logger, configuring it on first use."""
        instance = TgLogger(level, log_file, redact)
        assert instance._logger is not None
        return instance._logger

    def cleanup(self) -> None:
        """Flush, close and detach all handlers."""
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            handler.flush()
            handler.close()
            self._logger.removeHandler(handler)

    def __del__(self) -> None:
        self.cleanup()
