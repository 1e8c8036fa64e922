"""Line-oriented duplex transports.

Two implementations share one small contract: plain TCP IRC through asyncio
streams and IRC-over-WebSocket through ``websockets``. Both frame outbound
lines with ``\\r\\n`` and surface failures as session errors.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Protocol
from urllib.parse import urlsplit

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..constants import IRC_CLOSE_TIMEOUT, IRC_CONNECT_TIMEOUT, IRC_READ_LIMIT
from ..errors import (
    ConfigurationError,
    ConnectionBrokenError,
    ConnectionClosedError,
    TransportConnectError,
)
from ..logs.logger import logger

LINE_TERMINATOR = "\r\n"


class LineTransport(Protocol):
    """Protocol for a newline-delimited UTF-8 duplex connection."""

    endpoint: str

    async def open(self) -> None:
        """Open the connection or raise ``TransportConnectError``."""
        ...

    async def read_line(self) -> str:
        """Block until one line arrives; raise ``ConnectionClosedError`` on EOF/error."""
        ...

    async def write_line(self, line: str) -> None:
        """Write one line; raise ``ConnectionBrokenError`` on failure."""
        ...

    async def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        ...


class StreamLineTransport:
    """Plain TCP IRC connection (``irc://host:port``)."""

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self.endpoint = f"irc://{host}:{port}"
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None

    async def open(self) -> None:
        try:
            self.reader, self.writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port, limit=IRC_READ_LIMIT),
                timeout=IRC_CONNECT_TIMEOUT,
            )
        except (OSError, TimeoutError) as e:
            raise TransportConnectError(
                f"Could not connect to {self.endpoint}: {e}", operation_type="connect"
            ) from e

    async def read_line(self) -> str:
        if self.reader is None:
            raise ConnectionClosedError("Transport not open", operation_type="read")
        try:
            data = await self.reader.readline()
        except (OSError, ValueError, asyncio.IncompleteReadError) as e:
            raise ConnectionClosedError(
                f"Read failed: {e}", operation_type="read"
            ) from e
        if not data:
            raise ConnectionClosedError("Connection closed by remote", operation_type="read")
        return data.decode("utf-8", errors="replace").rstrip("\r\n")

    async def write_line(self, line: str) -> None:
        writer = self.writer
        if writer is None or writer.is_closing():
            raise ConnectionBrokenError("Transport not writable", operation_type="send")
        try:
            writer.write(f"{line}{LINE_TERMINATOR}".encode())
            await writer.drain()
        except (OSError, RuntimeError) as e:
            raise ConnectionBrokenError(
                f"Write failed: {e}", operation_type="send"
            ) from e

    async def close(self) -> None:
        writer = self.writer
        self.writer = None
        self.reader = None
        if writer is None:
            return
        writer.close()
        try:
            await asyncio.wait_for(writer.wait_closed(), timeout=IRC_CLOSE_TIMEOUT)
        except (OSError, TimeoutError) as e:
            logger.log_event(
                "transport",
                "close_error",
                level=logging.DEBUG,
                endpoint=self.endpoint,
                error=str(e),
            )


class WebSocketLineTransport:
    """IRC over WebSocket (``ws://irc-ws.chat.twitch.tv:80``).

    One frame may carry several ``\\r\\n`` separated lines; they are queued and
    handed out one per ``read_line`` call.
    """

    def __init__(self, url: str) -> None:
        self.endpoint = url
        self.ws = None
        self._pending: deque[str] = deque()

    async def open(self) -> None:
        try:
            self.ws = await asyncio.wait_for(
                websockets.connect(self.endpoint, ping_interval=None),
                timeout=IRC_CONNECT_TIMEOUT,
            )
        except (OSError, TimeoutError, WebSocketException) as e:
            raise TransportConnectError(
                f"Could not connect to {self.endpoint}: {e}", operation_type="connect"
            ) from e

    async def read_line(self) -> str:
        while not self._pending:
            if self.ws is None:
                raise ConnectionClosedError("Transport not open", operation_type="read")
            try:
                frame = await self.ws.recv()
            except ConnectionClosed as e:
                raise ConnectionClosedError(
                    f"WebSocket closed: {e}", operation_type="read"
                ) from e
            if isinstance(frame, bytes):
                frame = frame.decode("utf-8", errors="replace")
            self._pending.extend(part for part in frame.split(LINE_TERMINATOR) if part)
        return self._pending.popleft()

    async def write_line(self, line: str) -> None:
        if self.ws is None:
            raise ConnectionBrokenError("Transport not writable", operation_type="send")
        try:
            await self.ws.send(f"{line}{LINE_TERMINATOR}")
        except (ConnectionClosed, OSError) as e:
            raise ConnectionBrokenError(
                f"Write failed: {e}", operation_type="send"
            ) from e

    async def close(self) -> None:
        ws = self.ws
        self.ws = None
        self._pending.clear()
        if ws is None:
            return
        try:
            await asyncio.wait_for(ws.close(), timeout=IRC_CLOSE_TIMEOUT)
        except (OSError, TimeoutError, WebSocketException) as e:
            logger.log_event(
                "transport",
                "close_error",
                level=logging.DEBUG,
                endpoint=self.endpoint,
                error=str(e),
            )


def create_transport(endpoint: str) -> LineTransport:
    """Pick a transport from the endpoint URL scheme."""
    parts = urlsplit(endpoint)
    scheme = parts.scheme.lower()
    if scheme in ("ws", "wss"):
        return WebSocketLineTransport(endpoint)
    if scheme in ("irc", "tcp"):
        if not parts.hostname:
            raise ConfigurationError(f"Endpoint has no host: {endpoint}")
        return StreamLineTransport(parts.hostname, parts.port or 6667)
    raise ConfigurationError(f"Unsupported endpoint scheme: {endpoint}")
