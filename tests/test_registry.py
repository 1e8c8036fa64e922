import pytest

from soundpoint.commands.base import Command, CommandOutcome, DispatchContext
from soundpoint.commands.registry import CommandRegistry
from soundpoint.errors import ConfigurationError
from soundpoint.irc.models import ChatMessage, SelfJoinAck, Unrecognized
from tests.fakes import RecordingReplies


class RecordingCommand(Command):
    def __init__(self) -> None:
        self.contexts: list[DispatchContext] = []

    async def execute(self, context: DispatchContext) -> CommandOutcome:
        self.contexts.append(context)
        await context.reply("ok")
        return CommandOutcome.SUCCESS


class ExplodingCommand(Command):
    async def execute(self, context: DispatchContext) -> CommandOutcome:
        raise RuntimeError("kaboom")


def _message(text: str, display_name: str = "Viewer") -> ChatMessage:
    return ChatMessage(
        login_name="viewer",
        display_name=display_name,
        host_fragment="viewer",
        channel="chan",
        text=text,
    )


def test_parse_splits_command_and_args():
    registry = CommandRegistry("!", {})
    assert registry.parse("!points check") == ("points", "check")
    assert registry.parse("!points") == ("points", "")
    assert registry.parse("!points   spend  boom ") == ("points", "spend  boom")


def test_parse_ignores_text_without_prefix():
    registry = CommandRegistry("!", {})
    assert registry.parse("points check") is None
    assert registry.parse("!") is None
    assert registry.parse("") is None
    assert registry.parse("?points") is None


@pytest.mark.parametrize("prefix", ["", "!!", "ab"])
def test_prefix_must_be_one_character(prefix):
    with pytest.raises(ConfigurationError):
        CommandRegistry(prefix, {})


def test_command_names_are_validated():
    with pytest.raises(ConfigurationError):
        CommandRegistry("!", {"two words": RecordingCommand()})
    with pytest.raises(ConfigurationError):
        CommandRegistry("!", {"": RecordingCommand()})


def test_registry_is_read_only():
    registry = CommandRegistry("!", {"points": RecordingCommand()})
    assert "points" in registry
    with pytest.raises(TypeError):
        registry.commands["other"] = RecordingCommand()  # type: ignore[index]


@pytest.mark.asyncio
async def test_dispatch_invokes_handler_with_context():
    command = RecordingCommand()
    registry = CommandRegistry("!", {"points": command})
    replies = RecordingReplies()
    outcome = await registry.dispatch(_message("!points check"), replies)
    assert outcome is CommandOutcome.SUCCESS
    (context,) = command.contexts
    assert (context.user, context.channel, context.command, context.args) == (
        "viewer",
        "chan",
        "points",
        "check",
    )
    assert replies.messages == [("chan", "@Viewer ok")]


@pytest.mark.asyncio
async def test_lookup_is_case_sensitive_and_unknown_is_silent():
    command = RecordingCommand()
    registry = CommandRegistry("!", {"points": command})
    replies = RecordingReplies()
    assert await registry.dispatch(_message("!Points"), replies) is None
    assert await registry.dispatch(_message("!dance"), replies) is None
    assert await registry.dispatch(_message("points"), replies) is None
    assert command.contexts == []
    assert replies.messages == []


@pytest.mark.asyncio
async def test_custom_prefix():
    command = RecordingCommand()
    registry = CommandRegistry("?", {"points": command})
    await registry.dispatch(_message("!points"), RecordingReplies())
    await registry.dispatch(_message("?points"), RecordingReplies())
    assert len(command.contexts) == 1


@pytest.mark.asyncio
async def test_handler_exception_is_contained():
    registry = CommandRegistry("!", {"points": ExplodingCommand()})
    assert await registry.dispatch(_message("!points"), RecordingReplies()) is None


@pytest.mark.asyncio
async def test_handle_event_routes_only_chat_messages():
    command = RecordingCommand()
    registry = CommandRegistry("!", {"points": command})
    replies = RecordingReplies()
    await registry.handle_event(SelfJoinAck(channel="chan"), replies)
    await registry.handle_event(Unrecognized(raw=":tmi.twitch.tv 001 bot :hi"), replies)
    await registry.handle_event(_message("!points"), replies)
    assert len(command.contexts) == 1
