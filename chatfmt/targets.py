"""Target handlers — tags that route part of a message to a specific receiver or channel.

    <p:only players see this/p>
    <c:only the console sees this/c>
    <ab:shown on the action bar/ab>
    <sound:entity.experience_orb.pickup/>

A handler always removes its tags, whether or not the receiver qualifies,
so raw tag syntax never reaches any channel.
"""

from __future__ import annotations

import logging

from chatfmt import scanner
from chatfmt.receiver import MessageReceiver, capability_of, send_chat

log = logging.getLogger(__name__)

DEFAULT_SOUND_NAMESPACE = "minecraft"


class TargetHandler:
    """Base handler: subclasses set the delimiters and implement ``qualifies``/``dispatch``."""

    name = ""
    open_tag = ""
    close_tag = ""

    def qualifies(self, receiver: MessageReceiver) -> bool:
        raise NotImplementedError

    def dispatch(self, receiver: MessageReceiver, content: str) -> None:
        raise NotImplementedError

    def match_once(self, receiver: MessageReceiver, text: str) -> str:
        """Process the first tag only. Returns ``text`` itself if there is none."""
        def _on_match(content: str) -> None:
            if self.qualifies(receiver):
                log.debug("%s tag → %s %r: %r", self.name, capability_of(receiver), receiver, content)
                self.dispatch(receiver, content)
            else:
                log.debug("%s tag dropped for %s %r", self.name, capability_of(receiver), receiver)

        return scanner.match(text, self.open_tag, self.close_tag, _on_match)

    def apply(self, receiver: MessageReceiver, text: str) -> str:
        """Process every tag, left to right. Returns ``text`` itself if there is none."""
        result = text
        while True:
            stripped = self.match_once(receiver, result)
            if stripped is result:
                return result
            result = stripped

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.open_tag}...{self.close_tag})"


class PlayerTarget(TargetHandler):
    name = "player"
    open_tag = "<p:"
    close_tag = "/p>"

    def __init__(self, apply_events: bool = True) -> None:
        self.apply_events = apply_events

    def qualifies(self, receiver: MessageReceiver) -> bool:
        return receiver.is_player()

    def dispatch(self, receiver: MessageReceiver, content: str) -> None:
        send_chat(receiver, content, self.apply_events)


class ConsoleTarget(TargetHandler):
    name = "console"
    open_tag = "<c:"
    close_tag = "/c>"

    def __init__(self, apply_events: bool = True) -> None:
        self.apply_events = apply_events

    def qualifies(self, receiver: MessageReceiver) -> bool:
        return receiver.is_console()

    def dispatch(self, receiver: MessageReceiver, content: str) -> None:
        send_chat(receiver, content, self.apply_events)


class ActionBarTarget(TargetHandler):
    name = "action_bar"
    open_tag = "<ab:"
    close_tag = "/ab>"

    def qualifies(self, receiver: MessageReceiver) -> bool:
        return receiver.is_player()

    def dispatch(self, receiver: MessageReceiver, content: str) -> None:
        receiver.send_action_bar(content)


def parse_sound(content: str, default_namespace: str = DEFAULT_SOUND_NAMESPACE) -> str:
    """Normalize ``[namespace:]id``: ``click`` → ``minecraft:click``, ``custom:boom`` unchanged."""
    content = content.strip()
    namespace, sep, key = content.partition(":")
    if sep and namespace:
        return content
    return f"{default_namespace}:{key if sep else content}"


class SoundTarget(TargetHandler):
    name = "sound"
    open_tag = "<sound:"
    close_tag = "/>"

    def __init__(self, default_namespace: str = DEFAULT_SOUND_NAMESPACE) -> None:
        self.default_namespace = default_namespace

    def qualifies(self, receiver: MessageReceiver) -> bool:
        return receiver.is_player()

    def dispatch(self, receiver: MessageReceiver, content: str) -> None:
        receiver.play_sound(parse_sound(content, self.default_namespace))


# name → factory, used by config loading
HANDLERS: dict[str, type[TargetHandler]] = {
    PlayerTarget.name: PlayerTarget,
    ConsoleTarget.name: ConsoleTarget,
    ActionBarTarget.name: ActionBarTarget,
    SoundTarget.name: SoundTarget,
}
