"""Tests for color/target pipelines and the Formatter."""

from unittest.mock import MagicMock

import pytest

from chatfmt.codes import COLOR_CHAR as S
from chatfmt.colors import GradientColorCodec, HexColorCodec, LegacyColorCodec
from chatfmt.pipeline import ColorPipeline, Formatter, TargetPipeline
from chatfmt.events import EventSegment
from chatfmt.receiver import ACTION_BAR, CHAT, EVENTS, SOUND, BufferedConsole, BufferedPlayer
from chatfmt.replacer import Replacer
from chatfmt.targets import ActionBarTarget, ConsoleTarget, PlayerTarget


def esc(digits: str) -> str:
    return S + "x" + "".join(S + d for d in digits)


class _Upper:
    def apply(self, text, simple=True):
        return text.upper()


class TestColorPipeline:
    def test_order(self):
        pipeline = ColorPipeline()
        pipeline.register("gradient", GradientColorCodec())
        pipeline.register("hex", HexColorCodec())
        assert pipeline.names == ["gradient", "hex"]

    def test_insert_before(self):
        pipeline = ColorPipeline()
        pipeline.register("gradient", GradientColorCodec())
        pipeline.register("hex", HexColorCodec())
        pipeline.register("legacy", LegacyColorCodec(), before="hex")
        assert pipeline.names == ["gradient", "legacy", "hex"]

    def test_duplicate_name(self):
        pipeline = ColorPipeline()
        pipeline.register("hex", HexColorCodec())
        with pytest.raises(ValueError):
            pipeline.register("hex", HexColorCodec())

    def test_unknown_anchor(self):
        pipeline = ColorPipeline()
        with pytest.raises(KeyError):
            pipeline.register("hex", HexColorCodec(), before="missing")

    def test_unregister(self):
        pipeline = ColorPipeline()
        codec = HexColorCodec()
        pipeline.register("hex", codec)
        assert pipeline.unregister("hex") is codec
        assert "hex" not in pipeline
        assert len(pipeline) == 0

    def test_get(self):
        pipeline = ColorPipeline()
        codec = HexColorCodec()
        pipeline.register("hex", codec)
        assert pipeline.get("hex") is codec
        assert pipeline.get("nope") is None

    def test_chained(self):
        pipeline = ColorPipeline()
        pipeline.register("hex", HexColorCodec())
        pipeline.register("upper", _Upper())
        assert pipeline.apply("#F00a") == esc("FF0000").upper() + "A"

    def test_order_matters(self):
        # hex before gradient eats the gradient stops
        pipeline = ColorPipeline()
        pipeline.register("hex", HexColorCodec())
        pipeline.register("gradient", GradientColorCodec())
        assert "<" in pipeline.apply("<#FF0000Hi#0000FF>")

    def test_none_rejected(self):
        with pytest.raises(ValueError):
            ColorPipeline().apply(None)

    def test_empty_string(self):
        text = ""
        assert Formatter.default().colors.apply(text) is text


class TestTargetPipeline:
    def test_register_by_name(self):
        pipeline = TargetPipeline()
        pipeline.register(PlayerTarget())
        pipeline.register(ConsoleTarget(), before="player")
        assert pipeline.names == ["console", "player"]

    def test_none_rejected(self):
        with pytest.raises(ValueError):
            TargetPipeline().apply(MagicMock(), None)

    def test_all_tags_removed(self):
        pipeline = TargetPipeline()
        pipeline.register(PlayerTarget())
        pipeline.register(ActionBarTarget())
        player = BufferedPlayer("Steve")
        assert pipeline.apply(player, "a<p:b/p>c<ab:d/ab>e") == "ace"
        assert player.outbox == [(CHAT, "b"), (ACTION_BAR, "d")]


class TestFormatter:
    def test_default_registry(self):
        fmt = Formatter.default()
        assert fmt.colors.names == ["gradient", "hex", "legacy"]
        assert fmt.targets.names == ["action_bar", "sound", "console", "player"]

    def test_register_color_codec_before(self):
        fmt = Formatter.default()
        fmt.register_color_codec("upper", _Upper(), before="gradient")
        assert fmt.colors.names[0] == "upper"

    def test_plain_text_untouched(self):
        fmt = Formatter.default()
        receiver = MagicMock()
        text = "Plain text"
        assert fmt.format(receiver, text) is text
        receiver.send_message.assert_not_called()
        receiver.send_action_bar.assert_not_called()
        receiver.play_sound.assert_not_called()

    def test_console_scenario(self):
        fmt = Formatter.default()
        console = BufferedConsole("console")
        remaining = fmt.send(console, "<#FFFFFFHi#000000> <p:secret/p> rest")
        expected = esc("FFFFFF") + "H" + esc("000000") + "i" + "  rest"
        assert remaining == expected
        assert console.outbox == [(CHAT, expected)]
        assert "secret" not in str(console.outbox)

    def test_player_scenario(self):
        fmt = Formatter.default()
        player = BufferedPlayer("Steve")
        remaining = fmt.send(player, "Hi <p:&aonly you/p><c:console/c><ab:bar/ab><sound:click/>")
        assert remaining == "Hi "
        assert player.outbox == [
            (ACTION_BAR, "bar"),
            (SOUND, "minecraft:click"),
            (CHAT, S + "aonly you"),
            (CHAT, "Hi "),
        ]

    def test_nested_tags_dispatched_before_player_tag(self):
        fmt = Formatter.default()
        player = BufferedPlayer("Steve")
        assert fmt.send(player, "Hi <p:x<sound:click/><ab:+1/ab>/p>") == "Hi "
        assert player.outbox == [
            (ACTION_BAR, "+1"),
            (SOUND, "minecraft:click"),
            (CHAT, "x"),
            (CHAT, "Hi "),
        ]

    def test_nested_tags_never_reach_console(self):
        fmt = Formatter.default()
        console = BufferedConsole()
        fmt.send(console, "<c:saved<sound:click/><ab:+1/ab>/c>")
        assert console.outbox == [(CHAT, "saved")]

    def test_blank_remainder_not_sent(self):
        fmt = Formatter.default()
        console = BufferedConsole()
        assert fmt.send(console, "<c:only this/c>  ") == "  "
        assert console.outbox == [(CHAT, "only this")]

    def test_send_with_replacer(self):
        fmt = Formatter.default()
        player = BufferedPlayer()
        fmt.send(player, "Welcome, {name}! You have {n} <{n}:coin:coins>.", Replacer("{name}", "Alex", "{n}", 1))
        assert player.messages() == ["Welcome, Alex! You have 1 coin."]

    def test_events_stripped_for_console(self):
        fmt = Formatter.default()
        console = BufferedConsole()
        fmt.send(console, "<text;Hover>Click\\> me")
        assert console.messages() == ["Click me"]

    def test_events_parsed_for_player(self):
        fmt = Formatter.default()
        player = BufferedPlayer()
        fmt.send(player, "<text;Hover>Click\\> me")
        assert player.outbox == [
            (EVENTS, [EventSegment("Click", (("show_text", "Hover"),)), EventSegment(" me")]),
        ]

    def test_events_in_player_tag(self):
        fmt = Formatter.default()
        player = BufferedPlayer()
        fmt.send(player, "<p:<run;/spawn>home\\>/p>")
        assert player.outbox == [(EVENTS, [EventSegment("home", (("run_command", "/spawn"),))])]

    def test_events_in_console_tag_stripped(self):
        fmt = Formatter.default()
        console = BufferedConsole()
        fmt.send(console, "<c:<run;/spawn>home\\>/c>")
        assert console.outbox == [(CHAT, "home")]

    def test_events_disabled(self):
        fmt = Formatter.default(apply_events=False)
        player = BufferedPlayer()
        console = BufferedConsole()
        fmt.send(player, "<text;Hover>Click\\> me")
        fmt.send(console, "<text;Hover>Click\\> me")
        assert player.outbox == [(CHAT, "<text;Hover>Click\\> me")]
        assert console.outbox == [(CHAT, "<text;Hover>Click\\> me")]

    def test_player_without_segments_hook_gets_raw_text(self):
        fmt = Formatter.default()
        player = MagicMock(spec=["is_player", "is_console", "send_message", "send_action_bar", "play_sound"])
        player.is_player.return_value = True
        player.is_console.return_value = False
        fmt.send(player, "<text;Hover>Click\\> me")
        player.send_message.assert_called_once_with("<text;Hover>Click\\> me")

    def test_simple_override(self):
        fmt = Formatter.default(simple=False)
        assert fmt.colorize("#F00") == "#F00"
        assert fmt.colorize("#F00", simple=True) == esc("FF0000")

    def test_send_none_rejected(self):
        with pytest.raises(ValueError):
            Formatter.default().send(BufferedConsole(), None)
