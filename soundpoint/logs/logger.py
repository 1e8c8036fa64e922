"""Structured event logger.

Every call site names an event as ``(domain, action)`` plus keyword context.
The human readable text comes from the JSON event catalog when a template
exists; otherwise it is derived from the event name.
"""

from __future__ import annotations

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def _debug_enabled() -> bool:
    return os.environ.get("DEBUG", "false").lower() in ("true", "1", "yes")


def build_console_formatter() -> logging.Formatter:
    return colorlog.ColoredFormatter(
        "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        log_colors=LOG_COLORS,
        secondary_log_colors={"message": {"ERROR": "red", "CRITICAL": "magenta"}},
        reset=True,
    )


class BotLogger:
    """Console logger keyed by ``(domain, action)`` event names."""

    EVENT_WIDTH = 28
    PREFIX_WIDTH = 24

    def __init__(self, name: str = "soundpoint") -> None:
        self.logger = logging.getLogger(name)
        self.logger.handlers.clear()
        self.logger.setLevel(logging.DEBUG if _debug_enabled() else logging.INFO)
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(build_console_formatter())
        self.logger.addHandler(handler)

    def log_event(
        self,
        domain: str,
        action: str,
        level: int = logging.INFO,
        human: str | None = None,
        *,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        event_name = f"{domain}_{action}".lower()
        human_text = human
        if human_text is None:
            # Local import keeps module init free of the JSON load order.
            from .event_catalog import EVENT_TEMPLATES

            template = EVENT_TEMPLATES.get((domain, action))
            if template:
                try:
                    human_text = template.format(**kwargs)
                except (KeyError, IndexError, ValueError):
                    human_text = template
            else:
                human_text = f"{domain.replace('_', ' ')}: {action.replace('_', ' ')}"
                kwargs.setdefault("derived", True)
        self._log(level, event_name, human_text, exc_info=exc_info, **kwargs)

    def _log(
        self,
        level: int,
        event_name: str,
        human_text: str,
        exc_info: bool = False,
        **kwargs: object,
    ) -> None:
        user = kwargs.pop("user", None)
        channel = kwargs.pop("channel", None)
        where = self._source_label(user, channel)
        if _debug_enabled():
            msg = self._verbose(event_name, where, human_text, kwargs)
        else:
            msg = f"{where} {human_text}"
        self.logger.log(level, msg, exc_info=exc_info)

    @classmethod
    def _source_label(cls, user: object, channel: object) -> str:
        # [user#channel], padded so messages line up in the console
        label = user if isinstance(user, str) and user else "system"
        if isinstance(channel, str) and channel:
            label = f"{label}#{channel}"
        return f"[{label[: cls.PREFIX_WIDTH]:<{cls.PREFIX_WIDTH}}]"

    @classmethod
    def _verbose(
        cls, event_name: str, where: str, human_text: str, context: dict[str, object]
    ) -> str:
        if len(event_name) > cls.EVENT_WIDTH:
            event_name = event_name[: cls.EVENT_WIDTH - 1] + "…"
        parts = [f"{event_name:<{cls.EVENT_WIDTH}}", where, human_text]
        if context:
            parts.append("(" + ", ".join(f"{k}={v}" for k, v in context.items()) + ")")
        return " ".join(parts)


logger = BotLogger()
