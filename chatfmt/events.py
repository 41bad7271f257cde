"""Event patterns — hover / click metadata attached to a run of text.

Syntax: ``<event;content[;event;content...]>text\\>``, e.g.
``<show_text;Click me;run;/spawn>Spawn\\>``. Double quotes protect
semicolons inside content: ``<text;"a;b">x\\>``.

Only player clients can render events; every other receiver gets the plain
text via ``strip_event_patterns``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

TEXT_END = "\\>"

# Accepted spellings → canonical event name
EVENT_ALIASES = {
    "text": "show_text", "show_text": "show_text",
    "url": "open_url", "open_url": "open_url",
    "file": "open_file", "open_file": "open_file",
    "run": "run_command", "run_cmd": "run_command", "run_command": "run_command",
    "suggest": "suggest_command", "suggest_cmd": "suggest_command",
    "suggest_command": "suggest_command",
    "copy": "copy_to_clipboard", "copy_to_clipboard": "copy_to_clipboard",
}


@dataclass(frozen=True, slots=True)
class EventSegment:
    text: str
    events: tuple[tuple[str, str], ...] = field(default=())


def split_events(data: str) -> list[str]:
    """Split on ``;`` outside double-quoted literals; quotes are dropped."""
    parts: list[str] = []
    current: list[str] = []
    literal = False
    for ch in data:
        if ch == '"':
            literal = not literal
        elif ch == ";" and not literal:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    if current:
        parts.append("".join(current))
    return parts


def parse_events(data: str) -> tuple[tuple[str, str], ...]:
    """Pair up split event data, keeping known events only."""
    parts = split_events(data)
    events = []
    for i in range(0, len(parts) - 1, 2):
        name = EVENT_ALIASES.get(parts[i].strip().lower())
        if name is not None:
            events.append((name, parts[i + 1]))
    return tuple(events)


def _search(text: str) -> Iterator[tuple[int, int, str, str]]:
    """Yield ``(start, end, event_data, inner_text)`` for each event pattern."""
    start = text.find("<")
    while start != -1:
        data_end = text.find(">", start)
        if data_end == -1:
            return
        data = text[start + 1:data_end]
        text_end = text.find(TEXT_END, data_end)
        if ";" not in data or "<" in data or text_end == -1:
            start = text.find("<", start + 1)
            continue
        end = text_end + len(TEXT_END)
        yield start, end, data, text[data_end + 1:text_end]
        start = text.find("<", end)


def parse_event_patterns(text: str) -> list[EventSegment]:
    """Split ``text`` into plain and event-carrying segments, in order."""
    segments: list[EventSegment] = []
    last = 0
    for start, end, data, inner in _search(text):
        if start > last:
            segments.append(EventSegment(text[last:start]))
        segments.append(EventSegment(inner, parse_events(data)))
        last = end
    if last < len(text):
        segments.append(EventSegment(text[last:]))
    return segments


def strip_event_patterns(text: str) -> str:
    """Drop event syntax, keeping the text it decorates. Returns ``text`` itself if there is none."""
    if "<" not in text:
        return text
    parts: list[str] = []
    last = 0
    for start, end, _data, inner in _search(text):
        parts.append(text[last:start])
        parts.append(inner)
        last = end
    if not parts:
        return text
    parts.append(text[last:])
    return "".join(parts)
