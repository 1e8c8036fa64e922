"""The ``points`` command: balance checks and paid sound playback."""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Callable

from ..errors import InsufficientFundsError, log_error
from ..logs.logger import logger
from ..playback.broadcaster import Playback
from ..storage.base import AudioCatalog, PointStore
from .base import Command, CommandOutcome, DispatchContext

CHECK_ACTIONS = frozenset({"check", "balance"})
SPEND_ACTIONS = frozenset({"spend", "play"})


class PointsCommand(Command):
    """``points [check]`` replies with the balance; ``points spend <sound>`` buys a sound.

    A purchase is a single ``adjust_balance`` call, so two concurrent buys
    against a balance that covers only one can never both succeed. The
    sound's cooldown slot is taken before charging and handed back if the
    charge is refused.
    """

    def __init__(
        self,
        store: PointStore,
        catalog: AudioCatalog,
        playback: Playback,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.catalog = catalog
        self.playback = playback
        self._clock = clock
        self._last_played: dict[str, float] = {}

    async def execute(self, context: DispatchContext) -> CommandOutcome:
        parts = context.args.split(None, 1)
        action = parts[0].lower() if parts else ""
        rest = parts[1].strip() if len(parts) > 1 else ""

        if action in CHECK_ACTIONS | {""} and not rest:
            return await self._check(context)
        if action in SPEND_ACTIONS and rest:
            return await self._spend(context, rest.lower())
        await context.reply(
            f"usage: {context.prefix}{context.command} [check | spend <sound>]"
        )
        return CommandOutcome.INVALID

    async def _check(self, context: DispatchContext) -> CommandOutcome:
        balance = await self.store.get_balance(context.user)
        await context.reply(f"you have {balance} points")
        return CommandOutcome.SUCCESS

    async def _spend(self, context: DispatchContext, name: str) -> CommandOutcome:
        reference = self.catalog.get_audio_reference(name)
        if reference is None:
            await context.reply(f"no such sound: {name}")
            return CommandOutcome.REJECTED

        remaining = self._cooldown_remaining(name, reference.cooldown)
        if remaining > 0:
            await context.reply(f"{name} is on cooldown for {math.ceil(remaining)}s")
            return CommandOutcome.REJECTED

        previous = self._reserve(name, reference.cooldown)
        try:
            balance = await self.store.adjust_balance(context.user, -reference.price)
        except InsufficientFundsError as e:
            self._release(name, previous)
            await context.reply(
                f"insufficient points: {name} costs {reference.price}, you have {e.balance}"
            )
            return CommandOutcome.REJECTED
        except BaseException:
            self._release(name, previous)
            raise

        logger.log_event(
            "points",
            "spent",
            user=context.user,
            channel=context.channel,
            sound=name,
            price=reference.price,
            balance=balance,
        )
        try:
            await self.playback.trigger(reference.file_name)
        except Exception as e:  # noqa: BLE001
            log_error("Playback trigger failed", e, context={"sound": name})
        await context.reply(
            f"playing {name} for {reference.price} points, {balance} left"
        )
        return CommandOutcome.SUCCESS

    def _cooldown_remaining(self, name: str, cooldown: int) -> float:
        if cooldown <= 0 or name not in self._last_played:
            return 0.0
        return self._last_played[name] + cooldown - self._clock()

    def _reserve(self, name: str, cooldown: int) -> float | None:
        previous = self._last_played.get(name)
        if cooldown > 0:
            self._last_played[name] = self._clock()
        return previous

    def _release(self, name: str, previous: float | None) -> None:
        if previous is None:
            self._last_played.pop(name, None)
        else:
            self._last_played[name] = previous
        logger.log_event("points", "cooldown_released", level=logging.DEBUG, sound=name)
