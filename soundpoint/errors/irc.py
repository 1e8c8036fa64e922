"""Chat session error hierarchy.

Every error carries the channel and operation it relates to (when known) so
log lines can be correlated without string parsing.
"""

from __future__ import annotations

from .internal import SoundPointError


class SessionError(SoundPointError):
    """Base exception for all chat session errors.

    Args:
        message (str): Error message.
        channel (str | None): Channel involved, already normalized.
        operation_type (str | None): Operation that failed (e.g. 'join', 'send').
    """

    def __init__(
        self,
        message: str,
        channel: str | None = None,
        operation_type: str | None = None,
    ) -> None:
        super().__init__(
            message, data={"channel": channel, "operation_type": operation_type}
        )
        self.channel = channel
        self.operation_type = operation_type


class TransportConnectError(SessionError):
    """Raised when the duplex socket cannot be opened.

    Fatal for startup; retrying is the caller's decision.
    """


class ConnectionClosedError(SessionError):
    """Raised by a read when the remote side closed or the read failed."""


class ConnectionBrokenError(SessionError):
    """Raised when writing a line fails; the connection is considered lost."""


class NotConnectedError(SessionError):
    """Raised when an operation needs a connection and none is open."""


class AlreadyJoinedError(SessionError):
    """Raised by join for a channel already in the membership set."""


class NotJoinedError(SessionError):
    """Raised by part for a channel missing from the membership set."""


__all__ = [
    "SessionError",
    "TransportConnectError",
    "ConnectionClosedError",
    "ConnectionBrokenError",
    "NotConnectedError",
    "AlreadyJoinedError",
    "NotJoinedError",
]
