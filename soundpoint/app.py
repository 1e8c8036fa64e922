"""Application wiring: settings -> collaborators -> session -> dispatcher."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .commands import CommandRegistry, PointsCommand
from .config import Settings, load_settings
from .constants import CONNECT_RETRY_MAX_BACKOFF_SECONDS
from .errors import ConfigurationError, SoundPointError, TransportConnectError, log_error
from .irc import ClassifiedEvent, LineTransport, TwitchSession, connect, create_transport
from .logs.logger import logger
from .playback import DeploymentBroadcaster, NullPlayback, Playback
from .signal_handler import SignalHandler
from .storage import JsonPointStore, PointStore, SettingsAudioCatalog

TransportFactory = Callable[[str], LineTransport]


class SoundPointBot:  # pylint: disable=too-many-instance-attributes
    """Owns one chat session and the collaborators its commands use."""

    def __init__(
        self,
        settings: Settings,
        *,
        store: PointStore | None = None,
        playback: Playback | None = None,
        transport_factory: TransportFactory = create_transport,
    ) -> None:
        self.settings = settings
        self.store = store if store is not None else JsonPointStore(settings.storage.path)
        self.catalog = SettingsAudioCatalog(settings.audio.references)
        if playback is not None:
            self.playback = playback
        elif settings.server.playback_enabled:
            self.playback = DeploymentBroadcaster()
        else:
            self.playback = NullPlayback()
        self.registry = CommandRegistry(
            settings.command.prefix,
            {"points": PointsCommand(self.store, self.catalog, self.playback)},
        )
        self.session: TwitchSession | None = None
        self._transport_factory = transport_factory
        self._shutdown = asyncio.Event()
        self._stopped = False

    # ---------------- Lifecycle -----------------
    async def start(self) -> None:
        """Start playback, connect, run the receive loop and join the channel."""
        if isinstance(self.playback, DeploymentBroadcaster):
            await self.playback.start(
                self.settings.server.playback_host, self.settings.server.playback_port
            )
        self.session = await self._connect()
        self.session.start(self._on_event)
        await self.session.join(self.settings.bot.channel)

    async def _connect(self) -> TwitchSession:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.settings.connect_attempts),
            wait=wait_exponential(multiplier=1, max=CONNECT_RETRY_MAX_BACKOFF_SECONDS),
            retry=retry_if_exception_type(TransportConnectError),
            before_sleep=self._log_retry,
            reraise=True,
        )
        return await retrying(self._connect_once)

    async def _connect_once(self) -> TwitchSession:
        endpoint = self.settings.server.endpoint
        return await connect(
            endpoint,
            self.settings.bot.auth_token,
            self.settings.bot.name,
            transport=self._transport_factory(endpoint),
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.log_event(
            "app",
            "connect_retry",
            level=logging.WARNING,
            attempt=retry_state.attempt_number,
            error=str(error),
        )

    async def _on_event(self, event: ClassifiedEvent) -> None:
        if self.session is not None:
            await self.registry.handle_event(event, self.session)

    def request_shutdown(self) -> None:
        self._shutdown.set()

    async def wait_until_stopped(self) -> None:
        """Block until a shutdown request arrives or the session drops."""
        waiters = [asyncio.create_task(self._shutdown.wait())]
        if self.session is not None:
            waiters.append(asyncio.create_task(self.session.wait_closed()))
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in waiters:
                task.cancel()
        if not self._shutdown.is_set():
            logger.log_event("app", "session_lost", level=logging.ERROR)

    async def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self.session is not None:
            await self.session.stop()
            await self.session.wait_receive_loop()
        if isinstance(self.playback, DeploymentBroadcaster):
            await self.playback.stop()
        logger.log_event("app", "stopped")


async def run(settings_file: str | None = None) -> int:
    """Run the bot until a signal arrives; returns the process exit code."""
    try:
        settings = load_settings(settings_file)
        bot = SoundPointBot(settings)
    except ConfigurationError as e:
        log_error("Startup aborted", e, level=logging.CRITICAL)
        return 1

    handler = SignalHandler(bot.request_shutdown)
    handler.setup_signal_handlers()
    try:
        await bot.start()
    except SoundPointError as e:
        log_error("Startup aborted", e, level=logging.CRITICAL)
        await bot.stop()
        return 1

    try:
        await bot.wait_until_stopped()
    finally:
        logger.log_event("app", "shutdown")
        await bot.stop()
    return 0
