"""Application configuration — environment variables and derived constants.

Loads ``TG_TOKEN``, ``TG_API_SERVER``, ``TG_TIMEOUT``, ``TG_LOG_LEVEL`` and
``TG_LOG_FILE`` from the environment via ``python-dotenv``.  All values are
resolved at import time so other modules can ``from config import …``
without repeated lookups.
"""

# ── stdlib ───────────────────────────────────────────────────────────────────
import logging
import os

# ── third-party ──────────────────────────────────────────────────────────────
from dotenv import load_dotenv

# ── local ────────────────────────────────────────────────────────────────────
from core.logger import TgLogger
from tg.exceptions import redact_token

# ── Environment bootstrap ────────────────────────────────────────────────────
load_dotenv()

_DEFAULT_TIMEOUT: float = 10.0


# ── Helper functions (private) ───────────────────────────────────────────────


def _parse_log_level(raw: str | None) -> int:
    """Map a level name such as ``"debug"`` to its :mod:`logging` constant.

    Unknown names fall back to ``INFO``.
    """
    if not raw:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _parse_timeout(raw: str | None) -> tuple[float, bool]:
    """Parse ``TG_TIMEOUT`` seconds; returns ``(value, valid)``."""
    if not raw:
        return _DEFAULT_TIMEOUT, True
    try:
        value = float(raw)
    except ValueError:
        return _DEFAULT_TIMEOUT, False
    if value <= 0:
        return _DEFAULT_TIMEOUT, False
    return value, True


# ── Public constants ─────────────────────────────────────────────────────────

TG_TOKEN: str | None = os.environ.get("TG_TOKEN")
TG_API_SERVER: str | None = os.environ.get("TG_API_SERVER") or None
TG_LOG_LEVEL: int = _parse_log_level(os.environ.get("TG_LOG_LEVEL"))
TG_LOG_FILE: str | None = os.environ.get("TG_LOG_FILE") or None
TG_TIMEOUT, _timeout_valid = _parse_timeout(os.environ.get("TG_TIMEOUT"))

# ── Logger (used for startup diagnostics at the bottom of this module) ───────
logger = TgLogger.get_logger(TG_LOG_LEVEL, TG_LOG_FILE, redact=redact_token)


# ── Startup diagnostics ─────────────────────────────────────────────────────

if TG_TOKEN:
    logger.debug("Config loaded — TG_TOKEN is set")
else:
    logger.debug("Config loaded — TG_TOKEN is NOT set")

if TG_API_SERVER:
    logger.debug("TG_API_SERVER loaded", extra={"api_server": TG_API_SERVER})

if not _timeout_valid:
    logger.warning("Invalid TG_TIMEOUT, using default", extra={"timeout": TG_TIMEOUT})
