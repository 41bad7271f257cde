"""Message receivers — the narrow interface formatted text is delivered through.

The engine only ever asks a receiver what it is (``is_player`` /
``is_console``) and hands it text. Host adapters implement the protocol;
the buffered receivers here queue output so an asyncio transport can flush
it after formatting returns.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

from chatfmt.ansi import to_ansi
from chatfmt.codes import strip_color
from chatfmt.events import EventSegment, parse_event_patterns, strip_event_patterns

log = logging.getLogger(__name__)

PLAYER = "player"
CONSOLE = "console"
GENERIC = "generic"

# Output channels
CHAT = "chat"
ACTION_BAR = "action_bar"
SOUND = "sound"
EVENTS = "events"


@runtime_checkable
class MessageReceiver(Protocol):
    """Protocol for anything formatted messages can be delivered to.

    Receivers that can render hover/click events may also define
    ``send_segments(segments: list[EventSegment])``; see ``send_chat``.
    """

    def is_player(self) -> bool: ...

    def is_console(self) -> bool: ...

    def send_message(self, text: str) -> None:
        """Deliver ``text`` on the receiver's default channel."""
        ...

    def send_action_bar(self, text: str) -> None:
        """Deliver ``text`` to the action bar. Only meaningful for players."""
        ...

    def play_sound(self, sound_id: str) -> None:
        """Play a namespaced sound (``minecraft:click``). Only meaningful for players."""
        ...


def capability_of(receiver: MessageReceiver) -> str:
    if receiver.is_player():
        return PLAYER
    if receiver.is_console():
        return CONSOLE
    return GENERIC


def send_chat(receiver: MessageReceiver, text: str, events: bool = True) -> None:
    """Deliver chat text, resolving ``<event;...>text\\>`` patterns for the receiver.

    Players with a ``send_segments`` hook get the parsed segments, other
    players get the text untouched, everyone else gets the event syntax
    stripped. With ``events=False`` the text is always sent as-is.
    """
    if events:
        if receiver.is_player():
            send_segments = getattr(receiver, "send_segments", None)
            if send_segments is not None:
                segments = parse_event_patterns(text)
                if any(segment.events for segment in segments):
                    log.debug("%s event segments → %r", capability_of(receiver), receiver)
                    send_segments(segments)
                    return
        else:
            text = strip_event_patterns(text)
    receiver.send_message(text)


# ── Buffered receivers ───────────────────────────────────────────

class BufferedReceiver:
    """Receiver that queues ``(channel, payload)`` pairs until flushed."""

    capability = GENERIC

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.outbox: list[tuple[str, Any]] = []

    def is_player(self) -> bool:
        return self.capability == PLAYER

    def is_console(self) -> bool:
        return self.capability == CONSOLE

    def send_message(self, text: str) -> None:
        self.outbox.append((CHAT, text))

    def send_action_bar(self, text: str) -> None:
        log.debug("%s has no action bar, dropping: %r", self, text)

    def play_sound(self, sound_id: str) -> None:
        log.debug("%s cannot play sounds, dropping: %s", self, sound_id)

    def messages(self, channel: str = CHAT) -> list[Any]:
        return [payload for ch, payload in self.outbox if ch == channel]

    async def flush(self, send: Callable[[str, Any], Awaitable[object]]) -> int:
        """Send all buffered output through ``send(channel, payload)``. Returns the count."""
        pending = self.outbox
        self.outbox = []
        for channel, payload in pending:
            await send(channel, payload)
        return len(pending)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class BufferedPlayer(BufferedReceiver):
    capability = PLAYER

    def send_action_bar(self, text: str) -> None:
        self.outbox.append((ACTION_BAR, text))

    def play_sound(self, sound_id: str) -> None:
        self.outbox.append((SOUND, sound_id))

    def send_segments(self, segments: list[EventSegment]) -> None:
        self.outbox.append((EVENTS, segments))


class BufferedConsole(BufferedReceiver):
    capability = CONSOLE


class LogConsole:
    """Console receiver that writes through a logger, with ANSI colors or stripped."""

    def __init__(self, logger: logging.Logger | None = None, *, ansi: bool = False,
                 level: int = logging.INFO) -> None:
        self.logger = logger or log
        self.ansi = ansi
        self.level = level

    def is_player(self) -> bool:
        return False

    def is_console(self) -> bool:
        return True

    def send_message(self, text: str) -> None:
        rendered = to_ansi(text) if self.ansi else strip_color(text)
        self.logger.log(self.level, "%s", rendered)

    def send_action_bar(self, text: str) -> None:
        pass

    def play_sound(self, sound_id: str) -> None:
        pass
