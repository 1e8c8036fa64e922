"""Centralized internal error hierarchy.

These exceptions provide semantic categories for the session, command and
startup layers. Raw socket / websocket / JSON errors are wrapped into one of
these at the boundary where they occur; callers never see the raw error.

Classes:
  SoundPointError      – Base for all internal errors.
  ConfigurationError   – Invalid or missing settings (fatal at startup).
"""

from __future__ import annotations

from collections.abc import Mapping


class SoundPointError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class ConfigurationError(SoundPointError):
    """Raised when settings are invalid.

    Covers unreadable settings files, schema violations and a command prefix
    that is not exactly one character. Never recovered from at runtime.
    """


__all__ = ["SoundPointError", "ConfigurationError"]
