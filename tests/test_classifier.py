from soundpoint.irc.classifier import MessageClassifier, classify
from soundpoint.irc.models import (
    ChatMessage,
    KeepAlivePing,
    SelfJoinAck,
    SelfPartAck,
    Unrecognized,
)
from soundpoint.irc.parser import parse_tags


def _classifier() -> MessageClassifier:
    return MessageClassifier("SoundBot")


def test_self_join_ack_lowercases_channel():
    event = _classifier().classify(":soundbot!soundbot@soundbot.tmi.twitch.tv JOIN #SomeChan")
    assert event == SelfJoinAck(channel="somechan")


def test_self_part_ack():
    event = _classifier().classify(":soundbot!soundbot@soundbot.tmi.twitch.tv PART #chan\r\n")
    assert event == SelfPartAck(channel="chan")


def test_join_of_another_user_is_not_an_ack():
    event = _classifier().classify(":viewer!viewer@viewer.tmi.twitch.tv JOIN #chan")
    assert isinstance(event, Unrecognized)


def test_privmsg_without_tags():
    event = _classifier().classify(
        ":viewer!viewer@viewer.tmi.twitch.tv PRIVMSG #Chan :!points check"
    )
    assert event == ChatMessage(
        login_name="viewer",
        display_name="viewer",
        host_fragment="viewer",
        channel="chan",
        text="!points check",
    )


def test_privmsg_with_tags_uses_display_name():
    line = (
        "@badge-info=;color=#FF0000;display-name=Viewer_One "
        ":viewer_one!viewer_one@viewer_one.tmi.twitch.tv PRIVMSG #chan :hi there"
    )
    event = _classifier().classify(line)
    assert isinstance(event, ChatMessage)
    assert event.display_name == "Viewer_One"
    assert event.login_name == "viewer_one"
    assert event.tags["color"] == "#FF0000"
    assert event.text == "hi there"


def test_privmsg_text_keeps_inner_colons():
    event = _classifier().classify(
        ":viewer!viewer@viewer.tmi.twitch.tv PRIVMSG #chan :a :b: c"
    )
    assert isinstance(event, ChatMessage)
    assert event.text == "a :b: c"


def test_ping_is_keepalive():
    assert isinstance(_classifier().classify("PING :tmi.twitch.tv"), KeepAlivePing)


def test_garbage_is_unrecognized():
    c = _classifier()
    assert c.classify("") == Unrecognized(raw="")
    assert isinstance(c.classify(":tmi.twitch.tv 001 soundbot :Welcome, GLHF!"), Unrecognized)
    assert isinstance(c.classify("PRIVMSG without prefix"), Unrecognized)


def test_module_level_classify():
    event = classify(":bot!bot@bot.tmi.twitch.tv JOIN #chan", "bot")
    assert event == SelfJoinAck(channel="chan")


def test_parse_tags_unescapes_values():
    tags = parse_tags("@display-name=A\\sB;flag;msg=semi\\:colon")
    assert tags == {"display-name": "A B", "flag": "", "msg": "semi;colon"}
