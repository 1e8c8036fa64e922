"""Outbound line builders.

Pure functions: every builder returns exactly one protocol line without the
line terminator (the transport appends ``\\r\\n``).
"""

from __future__ import annotations

from ..constants import CAP_COMMANDS, CAP_MEMBERSHIP, CAP_TAGS, KEEPALIVE_PONG

PASS = "PASS {}"
NICK = "NICK {}"
CAP_REQ = "CAP REQ :{} {} {}"
JOIN = "JOIN #{}"
PART = "PART #{}"
PRIVMSG = "PRIVMSG #{} :{}"


def _clean(arg: object) -> str:
    # A stray CR/LF would smuggle a second command onto the wire.
    return str(arg).replace("\r", "").replace("\n", " ")


def format_line(template: str, *args: object) -> str:
    return template.format(*(_clean(a) for a in args))


def pass_line(token: str) -> str:
    token = token.strip()
    if not token.startswith("oauth:"):
        token = f"oauth:{token}"
    return format_line(PASS, token)


def nick_line(nick: str) -> str:
    return format_line(NICK, nick.lower())


def cap_request_line(
    caps: tuple[str, str, str] = (CAP_COMMANDS, CAP_TAGS, CAP_MEMBERSHIP),
) -> str:
    return format_line(CAP_REQ, *caps)


def join_line(channel: str) -> str:
    return format_line(JOIN, channel)


def part_line(channel: str) -> str:
    return format_line(PART, channel)


def pong_line(ping: str | None = None) -> str:
    """Build the reply to a server PING.

    Without an argument the canonical keep-alive pong is returned; otherwise
    the ping's payload is echoed back as the protocol requires.
    """
    if ping is None:
        return KEEPALIVE_PONG
    payload = ping[len("PING") :].strip()
    return f"PONG {_clean(payload)}" if payload else "PONG"


def privmsg_line(channel: str, text: str) -> str:
    return format_line(PRIVMSG, channel, text)


def handshake_lines(token: str, nick: str) -> list[str]:
    """Authentication, identity and capability lines, in send order."""
    return [pass_line(token), nick_line(nick), cap_request_line()]
