"""Joined-channel bookkeeping."""

from __future__ import annotations

from .models import normalize_channel


class MembershipTracker:
    """Set of joined channel names, normalized to lower case.

    Not synchronized by itself; ``TwitchSession`` serializes join/part with
    its membership lock before touching the tracker.
    """

    def __init__(self) -> None:
        self._channels: set[str] = set()

    def __contains__(self, channel: object) -> bool:
        return isinstance(channel, str) and normalize_channel(channel) in self._channels

    def __len__(self) -> int:
        return len(self._channels)

    def add(self, channel: str) -> bool:
        """Mark joined; returns False if it already was."""
        key = normalize_channel(channel)
        if key in self._channels:
            return False
        self._channels.add(key)
        return True

    def discard(self, channel: str) -> bool:
        """Mark parted; returns False if it was not joined."""
        key = normalize_channel(channel)
        if key not in self._channels:
            return False
        self._channels.remove(key)
        return True

    def clear(self) -> None:
        self._channels.clear()

    @property
    def channels(self) -> frozenset[str]:
        return frozenset(self._channels)
