"""Escape codes — the internal per-character color/format escape convention.

Formatted strings carry two-character escapes: an escape character (``§``)
followed by a code character. Codes ``0-9a-f`` select a legacy color,
``k-o`` are sticky formats (obfuscated, bold, strikethrough, underline,
italic), ``r`` resets, and ``x`` starts an extended color made of six more
escapes, one per hex digit.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

COLOR_CHAR = "\u00a7"  # §
ALT_COLOR_CHAR = "&"
EXTENDED_CODE = "x"
RESET_CODE = "r"
FORMAT_CODES = frozenset("klmno")
COLOR_CODES = frozenset("0123456789abcdef")

_HEX_CHARS = frozenset("0123456789abcdefABCDEF")


def is_hex_char(ch: str) -> bool:
    return ch in _HEX_CHARS


def is_color_char(ch: str) -> bool:
    """Check if ``ch`` may follow an escape character (case-insensitive)."""
    code = ch.lower()
    return code in COLOR_CODES or code in FORMAT_CODES or code in (RESET_CODE, EXTENDED_CODE)


# ── EscapeScheme ─────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class EscapeScheme:
    """Decides which characters belong to a non-printing escape pair.

    Gradients count and recolor only visible characters, so everything that
    needs to skip escapes asks the scheme instead of hard-coding ``§``.
    """

    escape_char: str = COLOR_CHAR
    alt_char: str | None = ALT_COLOR_CHAR

    def is_escape(self, ch: str) -> bool:
        return ch == self.escape_char or (self.alt_char is not None and ch == self.alt_char)

    def code_at(self, text: str, index: int) -> str | None:
        """Return the lowercase code if ``text[index]`` starts an escape pair."""
        if index + 1 >= len(text) or not self.is_escape(text[index]):
            return None
        code = text[index + 1].lower()
        return code if is_color_char(code) else None

    @staticmethod
    def is_format(code: str) -> bool:
        return code in FORMAT_CODES

    @staticmethod
    def is_reset(code: str) -> bool:
        return code == RESET_CODE

    def escape(self, code: str) -> str:
        return self.escape_char + code

    def visible_length(self, text: str) -> int:
        """Number of characters in ``text`` that are not part of an escape pair."""
        count = 0
        i = 0
        length = len(text)
        while i < length:
            if self.code_at(text, i) is not None:
                i += 2
                continue
            count += 1
            i += 1
        return count

    def strip(self, text: str) -> str:
        """Remove every escape pair. Returns ``text`` itself if there is none."""
        parts: list[str] = []
        changed = False
        i = 0
        length = len(text)
        while i < length:
            if self.code_at(text, i) is not None:
                changed = True
                i += 2
                continue
            parts.append(text[i])
            i += 1
        return "".join(parts) if changed else text


DEFAULT_SCHEME = EscapeScheme()


# ── String helpers ───────────────────────────────────────────────

def apply_color_char(ch: str, text: str, escape_char: str = COLOR_CHAR) -> str:
    """Translate ``ch`` to the escape character wherever it precedes a color code.

    ``apply_color_char("&", "&aHi")`` → ``"§aHi"``. A trailing ``ch`` or one
    followed by a non-code character is kept literally.
    """
    if ch not in text:
        return text
    chars = list(text)
    changed = False
    i = 0
    last = len(chars) - 1
    while i < last:
        if chars[i] == ch and is_color_char(chars[i + 1]):
            chars[i] = escape_char
            changed = True
            i += 1
        i += 1
    return "".join(chars) if changed else text


def strip_color(text: str, alt_char: str | None = ALT_COLOR_CHAR) -> str:
    """Remove both internal and ``alt_char`` escapes from ``text``."""
    if alt_char == DEFAULT_SCHEME.alt_char:
        return DEFAULT_SCHEME.strip(text)
    return EscapeScheme(COLOR_CHAR, alt_char).strip(text)


def has_content(text: str | None) -> bool:
    """True if ``text`` holds at least one non-whitespace character."""
    if not text:
        return False
    return not text.isspace()


def join_content(
    items: Iterable[str],
    separator: str = "",
    keep: Callable[[str], bool] | None = has_content,
) -> str:
    """Join ``items`` with ``separator``, skipping those rejected by ``keep``."""
    return separator.join(item for item in items if keep is None or keep(item))
