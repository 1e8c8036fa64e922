"""Shared IRC data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class ConnectionState(Enum):
    DISCONNECTED = auto()
    CONNECTING = auto()
    AUTHENTICATED = auto()
    JOINED = auto()


@dataclass(frozen=True, slots=True)
class SelfJoinAck:
    channel: str


@dataclass(frozen=True, slots=True)
class SelfPartAck:
    channel: str


@dataclass(frozen=True, slots=True)
class ChatMessage:
    login_name: str
    display_name: str
    host_fragment: str
    channel: str
    text: str
    tags: dict[str, str] = field(default_factory=dict, compare=False)


@dataclass(frozen=True, slots=True)
class KeepAlivePing:
    raw: str = ""


@dataclass(frozen=True, slots=True)
class Unrecognized:
    raw: str


ClassifiedEvent = SelfJoinAck | SelfPartAck | ChatMessage | KeepAlivePing | Unrecognized


def normalize_channel(channel: str) -> str:
    """Canonical channel key: trimmed, no leading '#', lower-cased."""
    return channel.strip().lstrip("#").lower()
