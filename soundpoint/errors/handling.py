from __future__ import annotations

import logging

from ..logs.logger import logger
from .economy import InsufficientFundsError
from .internal import ConfigurationError, SoundPointError
from .irc import SessionError
from .playback import PlaybackServerError


def categorize_error(error: BaseException) -> str:
    """Map an exception onto the coarse category used in log lines."""
    if isinstance(error, SessionError | OSError | ConnectionError):
        return "network"
    if isinstance(error, ConfigurationError):
        return "config"
    if isinstance(error, InsufficientFundsError):
        return "economy"
    if isinstance(error, PlaybackServerError):
        return "playback"
    if isinstance(error, SoundPointError):
        return "internal"
    return "unknown"


def log_error(
    message: str,
    error: BaseException,
    context: dict[str, object] | None = None,
    level: int = logging.ERROR,
) -> None:
    """Log an error message with the associated exception details.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
        level: Logging level (default: ERROR).
    """
    extra: dict[str, object] = dict(context or {})
    if isinstance(error, SoundPointError):
        for key, value in error.data.items():
            extra.setdefault(key, value)
    logger.log_event(
        "error",
        categorize_error(error),
        level=level,
        human=f"{message}: {error}",
        error=str(error),
        error_type=type(error).__name__,
        **extra,
    )
