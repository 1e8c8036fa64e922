"""Command registry and prefix dispatcher."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from types import MappingProxyType

from ..errors import ConfigurationError
from ..irc.models import ChatMessage, ClassifiedEvent, Unrecognized
from ..logs.logger import logger
from .base import Command, CommandOutcome, DispatchContext, ReplyChannel

_FIRST_WHITESPACE = re.compile(r"\s")


class CommandRegistry:
    """Immutable name -> handler mapping plus the single prefix character.

    Lookup is exact and case-sensitive. Unknown commands are ignored without
    a reply; handler exceptions are logged here and never propagate.
    """

    def __init__(self, prefix: str, commands: Mapping[str, Command]) -> None:
        if not isinstance(prefix, str) or len(prefix) != 1:
            raise ConfigurationError(
                "Command prefix must consist of ONE character", data={"prefix": prefix}
            )
        for name in commands:
            if not name or _FIRST_WHITESPACE.search(name):
                raise ConfigurationError(f"Invalid command name: {name!r}")
        self.prefix = prefix
        self._commands: Mapping[str, Command] = MappingProxyType(dict(commands))

    @property
    def commands(self) -> Mapping[str, Command]:
        return self._commands

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def parse(self, text: str) -> tuple[str, str] | None:
        """Split ``<prefix><command> <args>`` into ``(command, args)``.

        Returns None when the prefix is missing or nothing follows it.
        """
        if not text or text[0] != self.prefix:
            return None
        remainder = text[1:]
        if not remainder:
            return None
        parts = _FIRST_WHITESPACE.split(remainder, maxsplit=1)
        token = parts[0]
        args = parts[1].strip() if len(parts) > 1 else ""
        return token, args

    async def dispatch(
        self, message: ChatMessage, session: ReplyChannel
    ) -> CommandOutcome | None:
        parsed = self.parse(message.text)
        if parsed is None:
            return None
        token, args = parsed
        handler = self._commands.get(token)
        if handler is None:
            logger.log_event(
                "command",
                "unknown",
                level=logging.DEBUG,
                user=message.login_name,
                channel=message.channel,
                command=token,
            )
            return None
        context = DispatchContext(
            user=message.login_name,
            display_name=message.display_name,
            channel=message.channel,
            command=token,
            args=args,
            prefix=self.prefix,
            session=session,
        )
        logger.log_event(
            "command",
            "dispatch",
            level=logging.DEBUG,
            user=message.login_name,
            channel=message.channel,
            command=token,
            args=args,
        )
        try:
            outcome = await handler.execute(context)
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "command",
                "handler_error",
                level=logging.ERROR,
                user=message.login_name,
                channel=message.channel,
                command=token,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None
        logger.log_event(
            "command",
            "completed",
            level=logging.DEBUG,
            user=message.login_name,
            channel=message.channel,
            command=token,
            outcome=outcome.name,
        )
        return outcome

    async def handle_event(self, event: ClassifiedEvent, session: ReplyChannel) -> None:
        """Route one classified event: chat goes to dispatch, the rest is logged."""
        if isinstance(event, ChatMessage):
            logger.log_event(
                "irc",
                "privmsg",
                level=logging.DEBUG,
                channel=event.channel,
                human=f"{event.display_name}: {event.text}",
                author=event.login_name,
            )
            await self.dispatch(event, session)
        elif isinstance(event, Unrecognized):
            logger.log_event(
                "irc", "unrecognized", level=logging.DEBUG, raw=event.raw
            )
