"""Application infrastructure — logging.

This package is framework-agnostic. It must NEVER import from ``tg/``.
"""

from core.logger import TgLogger

__all__ = [
    "TgLogger",
]
