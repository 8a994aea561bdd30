"""Tests for IRC line parsing."""

from notifier.core.irc import (
    format_password,
    normalize_channel,
    parse_line,
    parse_tags,
    unescape_tag_value,
)

PRIVMSG = (
    "@badge-info=;badges=broadcaster/1;color=#0D4200;display-name=Ronni;"
    "user-type= :ronni!ronni@ronni.tmi.twitch.tv PRIVMSG #ronni :Kappa Keepo Kappa"
)


class TestParseLine:
    def test_privmsg(self):
        message = parse_line(PRIVMSG + "\r\n")
        assert message is not None
        assert message.is_privmsg()
        assert message.nick == "ronni"
        assert message.params == ["#ronni", "Kappa Keepo Kappa"]
        assert message.trailing == "Kappa Keepo Kappa"
        assert message.tags["display-name"] == "Ronni"
        assert message.tags["badge-info"] == ""

    def test_trailing_keeps_colons(self):
        message = parse_line(":a!a@a.tmi.twitch.tv PRIVMSG #chan :time is 12:30 :)")
        assert message.trailing == "time is 12:30 :)"

    def test_ping(self):
        message = parse_line("PING :tmi.twitch.tv")
        assert message.command == "PING"
        assert message.prefix is None
        assert message.trailing == "tmi.twitch.tv"

    def test_numeric_welcome(self):
        message = parse_line(":tmi.twitch.tv 001 justinfan0 :Welcome, GLHF!")
        assert message.command == "001"
        assert message.params == ["justinfan0", "Welcome, GLHF!"]

    def test_blank_line(self):
        assert parse_line("") is None
        assert parse_line("\r\n") is None

    def test_action(self):
        message = parse_line(":a!a@a.tmi.twitch.tv PRIVMSG #chan :\x01ACTION waves\x01")
        assert message.is_action()
        assert not parse_line(":a!a@a.tmi.twitch.tv PRIVMSG #chan :waves").is_action()


class TestTags:
    def test_unescape(self):
        assert unescape_tag_value(r"hello\sworld\:\\") == "hello world;\\"

    def test_unescape_plain(self):
        assert unescape_tag_value("plain") == "plain"

    def test_parse_tags(self):
        assert parse_tags(r"a=1;b=;c=x\sy") == {"a": "1", "b": "", "c": "x y"}


class TestFormatting:
    def test_normalize_channel(self):
        assert normalize_channel("Ninja") == "#ninja"
        assert normalize_channel("#shroud") == "#shroud"

    def test_format_password(self):
        assert format_password("abc") == "oauth:abc"
        assert format_password("oauth:abc") == "oauth:abc"
