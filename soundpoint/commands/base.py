"""Command handler contract and the per-invocation context."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Protocol


class ReplyChannel(Protocol):
    """What a handler needs from the session to answer in chat."""

    async def send_message(self, channel: str, text: str) -> None:
        ...


class CommandOutcome(Enum):
    SUCCESS = auto()
    REJECTED = auto()  # understood but refused (funds, cooldown, unknown sound)
    INVALID = auto()  # malformed arguments, usage was sent


@dataclass(frozen=True, slots=True)
class DispatchContext:
    """Everything a handler gets for one invocation.

    Attributes:
        user: Invoking user's login (lower case), used as the balance key.
        display_name: Name used when addressing the user in replies.
        channel: Channel the command was typed in.
        command: Matched command token.
        args: Text after the command token, whitespace-trimmed.
        prefix: Configured command prefix character.
        session: Where replies are sent.
    """

    user: str
    display_name: str
    channel: str
    command: str
    args: str
    prefix: str
    session: ReplyChannel

    async def reply(self, text: str) -> None:
        await self.session.send_message(self.channel, f"@{self.display_name} {text}")


class Command(ABC):
    """A chat command; registered once, executed per matching message."""

    @abstractmethod
    async def execute(self, context: DispatchContext) -> CommandOutcome:  # pragma: no cover - interface
        raise NotImplementedError
