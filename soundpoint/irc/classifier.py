"""Inbound line classification.

A ``MessageClassifier`` is built once per session from the bot's own nick, so
the self-join / self-part patterns never leak between sessions.
"""

from __future__ import annotations

import re

from ..constants import TWITCH_SERVER_SUFFIX
from .models import (
    ChatMessage,
    ClassifiedEvent,
    KeepAlivePing,
    SelfJoinAck,
    SelfPartAck,
    Unrecognized,
)
from .parser import parse_tags

_SUFFIX = re.escape(TWITCH_SERVER_SUFFIX)

_PRIVMSG_PATTERN = re.compile(
    r"^(?:@(?P<tags>\S*) )?"
    r":(?P<login>[^!\s]+)!(?P<user>[^@\s]+)@(?P<host>\S+?)\." + _SUFFIX
    + r" PRIVMSG #(?P<channel>\S+) :(?P<text>.+)$"
)


def _self_pattern(nick: str, verb: str) -> re.Pattern[str]:
    n = re.escape(nick)
    return re.compile(
        rf"^:{n}!{n}@{n}\.{_SUFFIX} {verb} #(?P<channel>\S+)$", re.IGNORECASE
    )


class MessageClassifier:
    """Turns one raw protocol line into a ``ClassifiedEvent``.

    Precedence: self-join ack, self-part ack, chat message, PING. Anything
    else is ``Unrecognized``; classification never raises on bad input.
    """

    def __init__(self, nick: str) -> None:
        self.nick = nick.strip().lower()
        self._join_pattern = _self_pattern(self.nick, "JOIN")
        self._part_pattern = _self_pattern(self.nick, "PART")

    def classify(self, line: str) -> ClassifiedEvent:
        line = line.rstrip("\r\n")
        if match := self._join_pattern.match(line):
            return SelfJoinAck(channel=match["channel"].lower())
        if match := self._part_pattern.match(line):
            return SelfPartAck(channel=match["channel"].lower())
        if match := _PRIVMSG_PATTERN.match(line):
            return self._build_chat_message(match)
        if line.startswith("PING"):
            return KeepAlivePing(raw=line)
        return Unrecognized(raw=line)

    @staticmethod
    def _build_chat_message(match: re.Match[str]) -> ChatMessage:
        tags = parse_tags(match["tags"]) if match["tags"] else {}
        display_name = tags.get("display-name") or match["user"]
        return ChatMessage(
            login_name=match["login"].lower(),
            display_name=display_name,
            host_fragment=match["host"],
            channel=match["channel"].lower(),
            text=match["text"],
            tags=tags,
        )


def classify(line: str, self_nick: str) -> ClassifiedEvent:
    """One-shot classification; prefer a long-lived ``MessageClassifier``."""
    return MessageClassifier(self_nick).classify(line)
