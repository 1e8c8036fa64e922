"""Twitch chat session: handshake, membership, keep-alive and receive loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from ..constants import KEEPALIVE_PING
from ..errors import (
    AlreadyJoinedError,
    ConnectionBrokenError,
    ConnectionClosedError,
    NotConnectedError,
    NotJoinedError,
    TransportConnectError,
)
from ..logs.logger import logger
from .classifier import MessageClassifier
from .formatter import handshake_lines, join_line, part_line, pong_line, privmsg_line
from .membership import MembershipTracker
from .models import (
    ClassifiedEvent,
    ConnectionState,
    SelfJoinAck,
    SelfPartAck,
    normalize_channel,
)
from .transport import LineTransport, create_transport

EventHandler = Callable[[ClassifiedEvent], Awaitable[None] | None]


class TwitchSession:  # pylint: disable=too-many-instance-attributes
    """One chat connection and the channels joined through it.

    Writes are serialized by ``_write_lock`` so any task may send. join/part
    hold ``_membership_lock`` across check, send and mark. The receive loop
    runs on its own task and handles events strictly in arrival order.
    """

    def __init__(self, transport: LineTransport, nick: str) -> None:
        self.nick = nick.strip().lower()
        self.endpoint = transport.endpoint
        self.classifier = MessageClassifier(self.nick)
        self.membership = MembershipTracker()
        self.state = ConnectionState.DISCONNECTED
        self._transport: LineTransport | None = None
        self._unopened: LineTransport | None = transport
        self._write_lock = asyncio.Lock()
        self._membership_lock = asyncio.Lock()
        self._closed = asyncio.Event()
        self._closed.set()
        self._receive_task: asyncio.Task[None] | None = None

    # ---------------- State -----------------
    @property
    def connected(self) -> bool:
        return self._transport is not None

    @property
    def channels(self) -> frozenset[str]:
        return self.membership.channels

    def has_joined(self, channel: str) -> bool:
        return channel in self.membership

    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "irc",
                "state_change",
                level=logging.DEBUG,
                user=self.nick,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    def _refresh_membership_state(self) -> None:
        if self._transport is None:
            return
        self._set_state(
            ConnectionState.JOINED if len(self.membership) else ConnectionState.AUTHENTICATED
        )

    # ---------------- Lifecycle -----------------
    async def open(self, auth_token: str) -> None:
        """Open the socket and send PASS, NICK and CAP REQ, in that order."""
        transport = self._unopened
        if transport is None:
            raise TransportConnectError(
                "Session was already opened", operation_type="connect"
            )
        self._unopened = None
        self._set_state(ConnectionState.CONNECTING)
        logger.log_event("irc", "connect_start", user=self.nick, endpoint=self.endpoint)
        try:
            await transport.open()
        except TransportConnectError as e:
            self._set_state(ConnectionState.DISCONNECTED)
            logger.log_event(
                "irc",
                "connect_failed",
                level=logging.ERROR,
                user=self.nick,
                endpoint=self.endpoint,
                error=str(e),
            )
            raise
        self._transport = transport
        self._closed.clear()
        for line in handshake_lines(auth_token, self.nick):
            await self.send(line)
        self._set_state(ConnectionState.AUTHENTICATED)
        logger.log_event("irc", "auth_sent", user=self.nick, endpoint=self.endpoint)

    async def stop(self) -> None:
        """Close the connection. Idempotent and safe from any task."""
        transport = self._transport
        if transport is None:
            return
        self._transport = None
        self.membership.clear()
        self._set_state(ConnectionState.DISCONNECTED)
        try:
            await transport.close()
        finally:
            self._closed.set()
            logger.log_event("irc", "disconnected", level=logging.WARNING, user=self.nick)

    async def wait_closed(self) -> None:
        """Block until the session has been stopped (locally or by the remote)."""
        await self._closed.wait()

    async def wait_receive_loop(self) -> None:
        """Wait for the receive task to finish; call after ``stop`` from another task."""
        task = self._receive_task
        if task is not None and task is not asyncio.current_task():
            await asyncio.wait([task])

    # ---------------- Outbound -----------------
    async def send(self, line: str) -> None:
        """Write one line; a failed write stops the session and re-raises."""
        broken: ConnectionBrokenError | None = None
        async with self._write_lock:
            transport = self._transport
            if transport is None:
                raise NotConnectedError("Not connected", operation_type="send")
            try:
                await transport.write_line(line)
            except ConnectionBrokenError as e:
                broken = e
        if broken is not None:
            logger.log_event(
                "irc", "send_failed", level=logging.ERROR, user=self.nick, error=str(broken)
            )
            await self.stop()
            raise broken

    async def send_message(self, channel: str, text: str) -> None:
        await self.send(privmsg_line(normalize_channel(channel), text))

    async def join(self, channel: str) -> None:
        """Send JOIN and mark the channel joined without waiting for the ack."""
        key = self._require_channel(channel)
        async with self._membership_lock:
            if self._transport is None:
                raise NotConnectedError("Not connected", channel=key, operation_type="join")
            if key in self.membership:
                raise AlreadyJoinedError(
                    f"Already joined the channel {key}", channel=key, operation_type="join"
                )
            await self.send(join_line(key))
            self.membership.add(key)
            self._refresh_membership_state()
        logger.log_event("irc", "join_sent", user=self.nick, channel=key)

    async def part(self, channel: str) -> None:
        """Send PART and mark the channel parted without waiting for the ack."""
        key = self._require_channel(channel)
        async with self._membership_lock:
            if self._transport is None:
                raise NotConnectedError("Not connected", channel=key, operation_type="part")
            if key not in self.membership:
                raise NotJoinedError(
                    f"Not a member of the channel {key}", channel=key, operation_type="part"
                )
            await self.send(part_line(key))
            self.membership.discard(key)
            self._refresh_membership_state()
        logger.log_event("irc", "part_sent", user=self.nick, channel=key)

    @staticmethod
    def _require_channel(channel: str) -> str:
        key = normalize_channel(channel)
        if not key:
            raise ValueError("channel name must not be empty")
        return key

    # ---------------- Inbound -----------------
    def start(self, on_event: EventHandler) -> asyncio.Task[None]:
        """Run ``receive_loop`` on a dedicated task (one per session)."""
        if self._receive_task is not None and not self._receive_task.done():
            return self._receive_task
        self._receive_task = asyncio.create_task(
            self.receive_loop(on_event), name=f"irc-receive-{self.nick}"
        )
        return self._receive_task

    async def receive_loop(self, on_event: EventHandler) -> None:
        if self._transport is None:
            raise NotConnectedError("Not connected", operation_type="receive")
        logger.log_event("irc", "listener_start", user=self.nick)
        try:
            while (transport := self._transport) is not None:
                try:
                    line = await transport.read_line()
                except ConnectionClosedError as e:
                    if self._transport is not None:
                        logger.log_event(
                            "irc",
                            "connection_lost",
                            level=logging.ERROR,
                            user=self.nick,
                            error=str(e),
                        )
                    break
                if line == KEEPALIVE_PING:
                    await self._answer_keepalive()
                    continue
                logger.log_event("irc", "raw", level=logging.DEBUG, user=self.nick, raw=line)
                event = self.classifier.classify(line)
                await self._apply_membership_ack(event)
                await self._deliver(on_event, event)
        finally:
            await self.stop()
            logger.log_event("irc", "listener_stopped", level=logging.WARNING, user=self.nick)

    async def _answer_keepalive(self) -> None:
        try:
            await self.send(pong_line())
        except (ConnectionBrokenError, NotConnectedError):
            return
        logger.log_event("irc", "keepalive", level=logging.DEBUG, user=self.nick)

    async def _apply_membership_ack(self, event: ClassifiedEvent) -> None:
        if not isinstance(event, SelfJoinAck | SelfPartAck):
            return
        async with self._membership_lock:
            if self._transport is None:
                return
            if isinstance(event, SelfJoinAck):
                self.membership.add(event.channel)
                action = "join_confirmed"
            else:
                self.membership.discard(event.channel)
                action = "part_confirmed"
            self._refresh_membership_state()
        logger.log_event("irc", action, user=self.nick, channel=event.channel)

    async def _deliver(self, on_event: EventHandler, event: ClassifiedEvent) -> None:
        try:
            result = on_event(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:  # noqa: BLE001
            logger.log_event(
                "irc",
                "event_handler_error",
                level=logging.ERROR,
                user=self.nick,
                error=str(e),
                error_type=type(e).__name__,
            )


async def connect(
    endpoint: str,
    auth_token: str,
    nick: str,
    *,
    transport: LineTransport | None = None,
) -> TwitchSession:
    """Open a session against ``endpoint`` and perform the handshake.

    No retry here; a ``TransportConnectError`` goes straight to the caller.
    """
    session = TwitchSession(transport or create_transport(endpoint), nick)
    await session.open(auth_token)
    return session
