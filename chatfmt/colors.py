"""Color codecs — hex (#RRGGBB / #RGB), gradients (<#RRGGBB...#RRGGBB>), legacy & codes.

Every codec returns the very same string object it was given when its
pattern does not occur, so chaining codecs over plain text costs nothing.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from chatfmt.codes import (
    ALT_COLOR_CHAR,
    DEFAULT_SCHEME,
    EXTENDED_CODE,
    EscapeScheme,
    apply_color_char,
    is_hex_char,
)


@runtime_checkable
class ColorCodec(Protocol):
    """Protocol for string → string color transformers."""

    def apply(self, text: str, simple: bool = True) -> str:
        """Return ``text`` with this codec applied, or ``text`` itself if it does not occur."""
        ...


# ── ColorSpec ────────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ColorSpec:
    red: int
    green: int
    blue: int

    def __post_init__(self) -> None:
        for channel in (self.red, self.green, self.blue):
            if not 0 <= channel <= 255:
                raise ValueError(f"Color channel out of range: {channel}")

    @classmethod
    def from_hex(cls, digits: str) -> ColorSpec:
        """Parse ``RRGGBB`` or the 3-digit ``RGB`` shorthand (``F`` → ``FF``)."""
        if len(digits) == 3:
            digits = "".join(d * 2 for d in digits)
        if len(digits) != 6 or not all(is_hex_char(d) for d in digits):
            raise ValueError(f"Invalid hex color: {digits!r}")
        value = int(digits, 16)
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def to_hex(self) -> str:
        return f"{self.red:02X}{self.green:02X}{self.blue:02X}"

    def to_escape(self, scheme: EscapeScheme = DEFAULT_SCHEME) -> str:
        return hex_escape(self.to_hex(), scheme)


def hex_escape(digits: str, scheme: EscapeScheme = DEFAULT_SCHEME) -> str:
    """Extended color escape for six hex digits: ``§x§R§R§G§G§B§B``."""
    return scheme.escape(EXTENDED_CODE) + "".join(scheme.escape(d) for d in digits)


# ── Hex ──────────────────────────────────────────────────────────

class HexColorCodec:
    """Converts ``#RRGGBB`` (and ``#RGB`` in simple mode) into extended color escapes.

    Scans for ``#`` without regular expressions. The digits are emitted as
    written, so ``#ff0000`` keeps its lowercase digits.
    """

    name = "hex"

    def __init__(self, scheme: EscapeScheme = DEFAULT_SCHEME) -> None:
        self.scheme = scheme

    def apply(self, text: str, simple: bool = True) -> str:
        if "#" not in text:
            return text
        parts: list[str] = []
        last = 0
        i = text.find("#")
        while i != -1:
            size = self._hex_size(text, i + 1, simple)
            if size:
                digits = text[i + 1:i + 1 + size]
                if size == 3:
                    digits = "".join(d * 2 for d in digits)
                parts.append(text[last:i])
                parts.append(hex_escape(digits, self.scheme))
                last = i + 1 + size
                i = text.find("#", last)
            else:
                i = text.find("#", i + 1)
        if not parts:
            return text
        parts.append(text[last:])
        return "".join(parts)

    @staticmethod
    def _hex_size(text: str, start: int, simple: bool) -> int:
        """Number of digits to consume after a '#' at ``start - 1`` (0, 3 or 6)."""
        end = min(len(text), start + 6)
        size = 0
        while start + size < end and is_hex_char(text[start + size]):
            size += 1
        if size == 6:
            return 6
        # 4 or 5 digits clamp to the 3-digit shorthand
        if simple and size >= 3:
            return 3
        return 0


# ── Gradient ─────────────────────────────────────────────────────

_GRADIENT_RE = re.compile(r"<#([0-9A-Fa-f]{6})(.*?)#([0-9A-Fa-f]{6})>")
_SIMPLE_GRADIENT_RE = re.compile(r"<#([0-9A-Fa-f]{3})(.*?)#([0-9A-Fa-f]{3})>")


def create_gradient(start: ColorSpec, end: ColorSpec, steps: int) -> list[ColorSpec]:
    """Linear per-channel ramp of ``steps`` colors using truncating division.

    The last color only equals ``end`` when each channel delta divides evenly
    by ``steps - 1``; a single step yields only ``start``.
    """
    if steps <= 0:
        return []
    if steps == 1:
        return [start]
    pairs = ((start.red, end.red), (start.green, end.green), (start.blue, end.blue))
    deltas = [abs(a - b) // (steps - 1) for a, b in pairs]
    signs = [1 if a < b else -1 for a, b in pairs]
    return [
        ColorSpec(
            start.red + deltas[0] * i * signs[0],
            start.green + deltas[1] * i * signs[1],
            start.blue + deltas[2] * i * signs[2],
        )
        for i in range(steps)
    ]


class GradientColorCodec:
    """Recolors ``<#RRGGBBtext#RRGGBB>`` spans with one color per visible character.

    Sticky formats (``&l``, ``§o``...) inside the span are replayed after every
    color, a reset clears them, and color escapes inside the span are dropped.
    The 3-digit grammar ``<#RGBtext#RGB>`` only applies in simple mode.
    """

    name = "gradient"

    def __init__(self, scheme: EscapeScheme = DEFAULT_SCHEME) -> None:
        self.scheme = scheme

    def apply(self, text: str, simple: bool = True) -> str:
        if "<#" not in text:
            return text
        result = self._apply_pattern(text, _GRADIENT_RE)
        if simple:
            result = self._apply_pattern(result, _SIMPLE_GRADIENT_RE)
        return result

    def _apply_pattern(self, text: str, pattern: re.Pattern) -> str:
        result = text
        m = pattern.search(result)
        while m is not None:
            start = ColorSpec.from_hex(m.group(1))
            end = ColorSpec.from_hex(m.group(3))
            inner = m.group(2)
            colors = create_gradient(start, end, self.scheme.visible_length(inner))
            replacement = self.recolor(inner, colors)
            result = result[:m.start()] + replacement + result[m.end():]
            # resume after the replacement so adjacent spans can't loop
            m = pattern.search(result, m.start() + len(replacement))
        return result

    def recolor(self, inner: str, colors: list[ColorSpec]) -> str:
        """Prefix every visible character of ``inner`` with its color and active formats."""
        scheme = self.scheme
        parts: list[str] = []
        formatting = ""
        index = 0
        i = 0
        length = len(inner)
        while i < length:
            code = scheme.code_at(inner, i)
            if code is not None:
                if scheme.is_format(code):
                    formatting += scheme.escape(code)
                elif scheme.is_reset(code):
                    formatting = ""
                i += 2
                continue
            parts.append(colors[index].to_escape(scheme))
            parts.append(formatting)
            parts.append(inner[i])
            index += 1
            i += 1
        return "".join(parts)


# ── Legacy ───────────────────────────────────────────────────────

class LegacyColorCodec:
    """Translates author-facing ``&a``/``&l`` codes into internal escapes."""

    name = "legacy"

    def __init__(self, alt_char: str = ALT_COLOR_CHAR, scheme: EscapeScheme = DEFAULT_SCHEME) -> None:
        self.alt_char = alt_char
        self.scheme = scheme

    def apply(self, text: str, simple: bool = True) -> str:
        return apply_color_char(self.alt_char, text, self.scheme.escape_char)
