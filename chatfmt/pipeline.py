"""Pipelines — ordered codec / handler registries and the Formatter that runs them.

A Formatter is built once at host start-up (see ``chatfmt.config``), then
used for every message:

    text → ColorPipeline.apply → TargetPipeline.apply → remaining text

Target tags are dispatched to the receiver while the string is scanned;
``Formatter.send`` finally delivers whatever text is left.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Generic, TypeVar

from chatfmt.codes import ALT_COLOR_CHAR, DEFAULT_SCHEME, EscapeScheme, has_content
from chatfmt.colors import ColorCodec, GradientColorCodec, HexColorCodec, LegacyColorCodec
from chatfmt.receiver import MessageReceiver, send_chat
from chatfmt.targets import (
    DEFAULT_SOUND_NAMESPACE,
    ActionBarTarget,
    ConsoleTarget,
    PlayerTarget,
    SoundTarget,
    TargetHandler,
)

if TYPE_CHECKING:
    from chatfmt.replacer import Replacer

log = logging.getLogger(__name__)

T = TypeVar("T")


def _require_text(text: str | None) -> str:
    if text is None:
        raise ValueError("The string to process cannot be None")
    return text


class _Registry(Generic[T]):
    """Named, ordered entries supporting append and insert-before."""

    kind = "entry"

    def __init__(self) -> None:
        self._entries: list[tuple[str, T]] = []

    def _index(self, name: str) -> int:
        for i, (entry_name, _) in enumerate(self._entries):
            if entry_name == name:
                return i
        raise KeyError(f"No {self.kind} registered as {name!r}")

    def _register(self, name: str, entry: T, before: str | None = None) -> None:
        if name in self:
            raise ValueError(f"{self.kind.capitalize()} already registered: {name!r}")
        if before is None:
            self._entries.append((name, entry))
            log.debug("Registered %s %s", self.kind, name)
        else:
            self._entries.insert(self._index(before), (name, entry))
            log.debug("Registered %s %s before %s", self.kind, name, before)

    def unregister(self, name: str) -> T:
        _, entry = self._entries.pop(self._index(name))
        log.debug("Unregistered %s %s", self.kind, name)
        return entry

    def get(self, name: str) -> T | None:
        for entry_name, entry in self._entries:
            if entry_name == name:
                return entry
        return None

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._entries]

    def __contains__(self, name: object) -> bool:
        return any(entry_name == name for entry_name, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)


class ColorPipeline(_Registry[ColorCodec]):
    """Color codecs applied in registration order, each to the previous one's output."""

    kind = "color codec"

    def register(self, name: str, codec: ColorCodec, before: str | None = None) -> None:
        self._register(name, codec, before)

    def apply(self, text: str, simple: bool = True) -> str:
        result = _require_text(text)
        for _, codec in self._entries:
            result = codec.apply(result, simple)
        return result


class TargetPipeline(_Registry[TargetHandler]):
    """Target handlers applied in registration order; returns the text with all tags removed."""

    kind = "target handler"

    def register(self, handler: TargetHandler, before: str | None = None) -> None:
        self._register(handler.name, handler, before)

    def apply(self, receiver: MessageReceiver, text: str) -> str:
        result = _require_text(text)
        for _, handler in self._entries:
            result = handler.apply(receiver, result)
        return result


# ── Formatter ────────────────────────────────────────────────────

class Formatter:
    """Explicit configuration object owning the color and target pipelines."""

    def __init__(
        self,
        colors: ColorPipeline | None = None,
        targets: TargetPipeline | None = None,
        *,
        simple: bool = True,
        apply_events: bool = True,
    ) -> None:
        self.colors = colors if colors is not None else ColorPipeline()
        self.targets = targets if targets is not None else TargetPipeline()
        self.simple = simple
        self.apply_events = apply_events

    @classmethod
    def default(
        cls,
        *,
        simple: bool = True,
        apply_events: bool = True,
        scheme: EscapeScheme = DEFAULT_SCHEME,
        alt_char: str = ALT_COLOR_CHAR,
        sound_namespace: str = DEFAULT_SOUND_NAMESPACE,
    ) -> Formatter:
        """Gradient, hex and legacy codecs plus the action bar, sound, console and player handlers.

        Action bar and sound run first so their tags are already gone when a
        ``<p:.../p>`` or ``<c:.../c>`` tag wrapping them is dispatched.
        """
        fmt = cls(simple=simple, apply_events=apply_events)
        fmt.register_color_codec(GradientColorCodec.name, GradientColorCodec(scheme))
        fmt.register_color_codec(HexColorCodec.name, HexColorCodec(scheme))
        fmt.register_color_codec(LegacyColorCodec.name, LegacyColorCodec(alt_char, scheme))
        fmt.register_target_handler(ActionBarTarget())
        fmt.register_target_handler(SoundTarget(sound_namespace))
        fmt.register_target_handler(ConsoleTarget(apply_events))
        fmt.register_target_handler(PlayerTarget(apply_events))
        return fmt

    # ── Registry ─────────────────────────────────────────────────

    def register_color_codec(self, name: str, codec: ColorCodec, before: str | None = None) -> None:
        self.colors.register(name, codec, before)

    def register_target_handler(self, handler: TargetHandler, before: str | None = None) -> None:
        self.targets.register(handler, before)

    # ── Formatting ───────────────────────────────────────────────

    def colorize(self, text: str, simple: bool | None = None) -> str:
        return self.colors.apply(text, self.simple if simple is None else simple)

    def apply_targets(self, receiver: MessageReceiver, text: str) -> str:
        return self.targets.apply(receiver, text)

    def format(self, receiver: MessageReceiver, text: str, simple: bool | None = None) -> str:
        """Colorize, then dispatch and strip target tags. Returns the remaining text."""
        return self.apply_targets(receiver, self.colorize(text, simple))

    def send(
        self,
        receiver: MessageReceiver,
        text: str,
        replacer: Replacer | None = None,
        simple: bool | None = None,
    ) -> str:
        """Format ``text`` for ``receiver`` and deliver what is left outside tags, if anything.

        Returns the remaining text.
        """
        _require_text(text)
        if replacer is not None:
            text = replacer.replace_at(text)
        remaining = self.format(receiver, text, simple)
        if has_content(remaining):
            send_chat(receiver, remaining, self.apply_events)
        return remaining
