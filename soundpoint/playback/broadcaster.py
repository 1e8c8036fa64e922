"""Playback notification to browser-source renderers.

Renderers connect to ``GET /sound/deployment`` with a WebSocket upgrade and
receive one JSON frame per purchased sound.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from aiohttp import WSCloseCode, web

from ..constants import PLAYBACK_SEND_TIMEOUT
from ..errors import PlaybackServerError
from ..logs.logger import logger

DEPLOYMENT_ROUTE = "/sound/deployment"


class Playback(Protocol):
    """Fire-and-forget sound trigger."""

    async def trigger(self, file_reference: str) -> None:
        ...


class NullPlayback:
    """Logs the trigger and nothing else (playback server disabled)."""

    async def trigger(self, file_reference: str) -> None:
        logger.log_event("playback", "skipped", level=logging.DEBUG, file=file_reference)


class DeploymentBroadcaster:
    """aiohttp app that fans play requests out to connected renderers."""

    def __init__(self) -> None:
        self.clients: set[web.WebSocketResponse] = set()
        self.app = web.Application()
        self.app.router.add_get(DEPLOYMENT_ROUTE, self.handle_deployment)
        self._runner: web.AppRunner | None = None

    async def handle_deployment(self, request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)
        self.clients.add(ws)
        logger.log_event(
            "playback", "client_connected", clients=len(self.clients), peer=request.remote
        )
        try:
            # Renderers only listen; drain whatever they send until close.
            async for _ in ws:
                pass
        finally:
            self.clients.discard(ws)
            logger.log_event(
                "playback",
                "client_disconnected",
                level=logging.DEBUG,
                clients=len(self.clients),
            )
        return ws

    async def trigger(self, file_reference: str) -> None:
        payload = {"type": "play", "file": file_reference}
        clients = list(self.clients)
        if not clients:
            logger.log_event(
                "playback", "no_clients", level=logging.WARNING, file=file_reference
            )
            return
        results = await asyncio.gather(
            *(self._send(ws, payload) for ws in clients), return_exceptions=True
        )
        dropped = 0
        for ws, result in zip(clients, results, strict=True):
            if isinstance(result, BaseException):
                self.clients.discard(ws)
                dropped += 1
        logger.log_event(
            "playback",
            "triggered",
            file=file_reference,
            clients=len(clients) - dropped,
            dropped=dropped,
        )

    @staticmethod
    async def _send(ws: web.WebSocketResponse, payload: dict[str, str]) -> None:
        if ws.closed:
            raise ConnectionResetError("renderer socket closed")
        await asyncio.wait_for(ws.send_json(payload), timeout=PLAYBACK_SEND_TIMEOUT)

    async def start(self, host: str, port: int) -> None:
        """Listen on ``host:port``; a bind failure raises ``PlaybackServerError``."""
        runner = web.AppRunner(self.app)
        await runner.setup()
        try:
            await web.TCPSite(runner, host, port).start()
        except OSError as e:
            await runner.cleanup()
            raise PlaybackServerError(host, port, str(e)) from e
        self._runner = runner
        logger.log_event("playback", "server_started", host=host, port=port)

    async def stop(self) -> None:
        for ws in list(self.clients):
            await ws.close(code=WSCloseCode.GOING_AWAY, message=b"shutdown")
        self.clients.clear()
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.log_event("playback", "server_stopped", level=logging.DEBUG)
