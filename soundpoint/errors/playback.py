"""Playback server errors."""

from __future__ import annotations

from .internal import SoundPointError


class PlaybackServerError(SoundPointError):
    """Raised when the renderer server cannot listen on its address.

    Args:
        host: Interface the server tried to bind.
        port: Port the server tried to bind.
        reason: Underlying socket error text.
    """

    def __init__(self, host: str, port: int, reason: str) -> None:
        super().__init__(
            f"Playback server could not listen on {host}:{port}: {reason}",
            data={"host": host, "port": port},
        )
        self.host = host
        self.port = port


__all__ = ["PlaybackServerError"]
