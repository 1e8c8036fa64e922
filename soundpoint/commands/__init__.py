"""Chat commands: handler contract, registry/dispatcher and concrete commands."""

from .base import Command, CommandOutcome, DispatchContext, ReplyChannel  # noqa: F401
from .points import PointsCommand  # noqa: F401
from .registry import CommandRegistry  # noqa: F401

__all__ = [
    "Command",
    "CommandOutcome",
    "CommandRegistry",
    "DispatchContext",
    "PointsCommand",
    "ReplyChannel",
]
