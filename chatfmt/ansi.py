"""ANSI converter — internal §-escapes → ANSI SGR sequences for terminal consoles.

Supports: 16 legacy colors, formats, reset, and §x extended colors as 24-bit truecolor.
"""

from __future__ import annotations

import re

from chatfmt.codes import COLOR_CHAR

# Legacy color code → ANSI foreground
_FG = {
    "0": "30", "1": "34", "2": "32", "3": "36",
    "4": "31", "5": "35", "6": "33", "7": "37",
    "8": "90", "9": "94", "a": "92", "b": "96",
    "c": "91", "d": "95", "e": "93", "f": "97",
}

# Format codes
_FMT = {
    "k": "5",  # obfuscated has no ANSI counterpart, blink is the closest
    "l": "1", "m": "9", "n": "4", "o": "3",
    "r": "0",
}

_ESC = "\033["
_RESET = f"{_ESC}0m"

_CODE_MAP: dict[str, str] = {}
for code, sgr in _FG.items():
    _CODE_MAP[code] = f"{_ESC}{sgr}m"
for code, sgr in _FMT.items():
    _CODE_MAP[code] = f"{_ESC}{sgr}m"

_C = re.escape(COLOR_CHAR)
_EXTENDED_RE = f"{_C}[xX]((?:{_C}[0-9a-fA-F]){{6}})"
_CODE_RE = re.compile(f"{_EXTENDED_RE}|{_C}([0-9a-fk-orA-FK-OR])")


def _resolve(m: re.Match) -> str:
    digits = m.group(1)
    if digits is not None:
        value = int(digits.replace(COLOR_CHAR, ""), 16)
        r, g, b = (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF
        return f"{_ESC}38;2;{r};{g};{b}m"
    return _CODE_MAP[m.group(2).lower()]


def to_ansi(text: str) -> str:
    """Convert escape codes to ANSI; a final reset is appended if anything was converted."""
    result, count = _CODE_RE.subn(_resolve, text)
    if count == 0:
        return text
    return result + _RESET


def strip_ansi(text: str) -> str:
    """Remove all ANSI escape sequences from text."""
    return re.sub(r"\033\[[0-9;]*m", "", text)
