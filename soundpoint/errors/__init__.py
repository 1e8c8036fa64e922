"""Error hierarchy for the sound point bot."""

from .economy import InsufficientFundsError  # noqa: F401
from .handling import categorize_error, log_error  # noqa: F401
from .internal import ConfigurationError, SoundPointError  # noqa: F401
from .irc import (  # noqa: F401
    AlreadyJoinedError,
    ConnectionBrokenError,
    ConnectionClosedError,
    NotConnectedError,
    NotJoinedError,
    SessionError,
    TransportConnectError,
)
from .playback import PlaybackServerError  # noqa: F401

__all__ = [
    "SoundPointError",
    "ConfigurationError",
    "SessionError",
    "TransportConnectError",
    "ConnectionClosedError",
    "ConnectionBrokenError",
    "NotConnectedError",
    "AlreadyJoinedError",
    "NotJoinedError",
    "InsufficientFundsError",
    "PlaybackServerError",
    "categorize_error",
    "log_error",
]
