import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from soundpoint.commands.base import CommandOutcome, DispatchContext
from soundpoint.commands.points import PointsCommand
from soundpoint.config.model import AudioReference
from soundpoint.storage import InMemoryPointStore, SettingsAudioCatalog
from tests.fakes import RecordingReplies, YieldingPointStore


class FakeClock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _setup(
    balance: int, *, price: int = 50, cooldown: int = 0, clock=None, store_cls=InMemoryPointStore
):
    store = store_cls({"viewer": balance})
    catalog = SettingsAudioCatalog(
        {"boom": AudioReference(price=price, cooldown=cooldown, file_name="boom.mp3")}
    )
    playback = Mock()
    playback.trigger = AsyncMock()
    command = PointsCommand(store, catalog, playback, clock=clock or FakeClock())
    return command, store, playback


def _context(args: str, replies: RecordingReplies) -> DispatchContext:
    return DispatchContext(
        user="viewer",
        display_name="Viewer",
        channel="chan",
        command="points",
        args=args,
        prefix="!",
        session=replies,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("args", ["", "check", "balance", "CHECK"])
async def test_check_replies_with_balance(args):
    command, _, _ = _setup(30)
    replies = RecordingReplies()
    outcome = await command.execute(_context(args, replies))
    assert outcome is CommandOutcome.SUCCESS
    assert replies.messages == [("chan", "@Viewer you have 30 points")]


@pytest.mark.asyncio
async def test_check_for_unknown_user_creates_zero_balance():
    command, store, _ = _setup(30)
    replies = RecordingReplies()
    context = DispatchContext("newbie", "Newbie", "chan", "points", "", "!", replies)
    await command.execute(context)
    assert replies.texts == ["@Newbie you have 0 points"]
    assert store.snapshot()["newbie"] == 0


@pytest.mark.asyncio
async def test_spend_with_insufficient_points_changes_nothing():
    command, store, playback = _setup(30)
    replies = RecordingReplies()
    outcome = await command.execute(_context("spend boom", replies))
    assert outcome is CommandOutcome.REJECTED
    assert replies.texts == ["@Viewer insufficient points: boom costs 50, you have 30"]
    assert await store.get_balance("viewer") == 30
    playback.trigger.assert_not_awaited()


@pytest.mark.asyncio
async def test_spend_charges_and_triggers_playback_once():
    command, store, playback = _setup(80)
    replies = RecordingReplies()
    outcome = await command.execute(_context("spend Boom", replies))
    assert outcome is CommandOutcome.SUCCESS
    assert await store.get_balance("viewer") == 30
    assert replies.texts == ["@Viewer playing boom for 50 points, 30 left"]
    playback.trigger.assert_awaited_once_with("boom.mp3")


@pytest.mark.asyncio
async def test_concurrent_spends_never_overdraw():
    command, store, playback = _setup(50, store_cls=YieldingPointStore)
    replies = RecordingReplies()
    outcomes = await asyncio.gather(
        command.execute(_context("spend boom", replies)),
        command.execute(_context("play boom", replies)),
    )
    assert outcomes.count(CommandOutcome.SUCCESS) == 1
    assert outcomes.count(CommandOutcome.REJECTED) == 1
    assert await store.get_balance("viewer") == 0
    assert playback.trigger.await_count == 1


@pytest.mark.asyncio
async def test_unknown_sound_is_rejected():
    command, store, playback = _setup(80)
    replies = RecordingReplies()
    outcome = await command.execute(_context("spend nope", replies))
    assert outcome is CommandOutcome.REJECTED
    assert replies.texts == ["@Viewer no such sound: nope"]
    assert await store.get_balance("viewer") == 80
    playback.trigger.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("args", ["spend", "dance", "check extra"])
async def test_malformed_arguments_get_usage(args):
    command, _, _ = _setup(80)
    replies = RecordingReplies()
    outcome = await command.execute(_context(args, replies))
    assert outcome is CommandOutcome.INVALID
    assert replies.texts == ["@Viewer usage: !points [check | spend <sound>]"]


@pytest.mark.asyncio
async def test_cooldown_blocks_repeat_purchases():
    clock = FakeClock(100.0)
    command, store, playback = _setup(200, cooldown=10, clock=clock)
    replies = RecordingReplies()
    assert await command.execute(_context("spend boom", replies)) is CommandOutcome.SUCCESS
    clock.now = 103.0
    assert await command.execute(_context("spend boom", replies)) is CommandOutcome.REJECTED
    assert replies.texts[-1] == "@Viewer boom is on cooldown for 7s"
    assert await store.get_balance("viewer") == 150
    clock.now = 111.0
    assert await command.execute(_context("spend boom", replies)) is CommandOutcome.SUCCESS
    assert playback.trigger.await_count == 2


@pytest.mark.asyncio
async def test_refused_charge_releases_cooldown_slot():
    command, store, _ = _setup(30, cooldown=60)
    replies = RecordingReplies()
    await command.execute(_context("spend boom", replies))
    await store.set_balance("viewer", 100)
    outcome = await command.execute(_context("spend boom", replies))
    assert outcome is CommandOutcome.SUCCESS


@pytest.mark.asyncio
async def test_playback_failure_still_confirms_purchase():
    command, store, playback = _setup(80)
    playback.trigger = AsyncMock(side_effect=ConnectionResetError("renderer gone"))
    replies = RecordingReplies()
    outcome = await command.execute(_context("spend boom", replies))
    assert outcome is CommandOutcome.SUCCESS
    assert await store.get_balance("viewer") == 30
    assert replies.texts == ["@Viewer playing boom for 50 points, 30 left"]


@pytest.mark.asyncio
async def test_failed_charge_keeps_balance_and_frees_cooldown():
    command, store, playback = _setup(80, cooldown=60)
    replies = RecordingReplies()
    with patch.object(store, "_commit", AsyncMock(side_effect=OSError("disk full"))):
        with pytest.raises(OSError):
            await command.execute(_context("spend boom", replies))
    assert await store.get_balance("viewer") == 80
    playback.trigger.assert_not_awaited()
    assert await command.execute(_context("spend boom", replies)) is CommandOutcome.SUCCESS
    assert await store.get_balance("viewer") == 30
