"""SignalHandler - turns SIGINT/SIGTERM into a one-shot shutdown request."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable

from .logs.logger import logger


class SignalHandler:
    """Handler for system signals and shutdown coordination."""

    def __init__(self, on_shutdown: Callable[[], None]) -> None:
        self.shutdown_initiated = False
        self._on_shutdown = on_shutdown

    def trigger(self, signum: int | None = None) -> None:
        # Idempotent: only the first signal requests shutdown
        if self.shutdown_initiated:
            return
        self.shutdown_initiated = True
        logger.log_event("app", "signal_received", level=logging.WARNING, signal=signum)
        self._on_shutdown()

    def setup_signal_handlers(self) -> None:  # pragma: no cover
        """Install SIGINT/SIGTERM handlers on the running loop."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.trigger, int(sig))
            except NotImplementedError:
                # Event loops without signal support (Windows)
                signal.signal(
                    sig,
                    lambda signum, _frame: loop.call_soon_threadsafe(self.trigger, signum),
                )
