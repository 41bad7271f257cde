"""Placeholder replacement — ``Replacer("{player}", name, "{count}", 3)``.

After placeholders are substituted, plural markers pick a word form from the
number in front of them: ``"<{count}:apple:apples>"`` becomes ``"apple"`` for
1 or -1 and ``"apples"`` for anything else.
"""

from __future__ import annotations

import re
from typing import Iterable, Protocol, runtime_checkable

_PLURAL_RE = re.compile(r"<([+-]?\d+):([^:<>]*):([^:<>]*)>")


@runtime_checkable
class Replacement(Protocol):
    """Objects that know their own placeholder text."""

    def as_replacement(self) -> str: ...


def apply_plurals(text: str) -> str:
    """Resolve ``<number:singular:plural>`` markers."""
    def _replace(m: re.Match) -> str:
        return m.group(2) if abs(int(m.group(1))) == 1 else m.group(3)
    return _PLURAL_RE.sub(_replace, text)


class Replacer:
    """Ordered list of ``(placeholder, value)`` pairs applied to strings."""

    def __init__(self, *replacements: object) -> None:
        self._pairs: list[tuple[str, str]] = []
        self.add(*replacements)

    def add(self, *replacements: object) -> Replacer:
        """Append placeholder/value pairs given as a flat sequence."""
        if len(replacements) % 2 != 0:
            raise ValueError(f"{replacements[-1]!r} does not have a replacement, add one more element")
        values = []
        for item in replacements:
            if item is None:
                raise ValueError("None replacements are not allowed")
            values.append(item.as_replacement() if isinstance(item, Replacement) else str(item))
        self._pairs.extend(zip(values[::2], values[1::2]))
        return self

    def extend(self, *replacers: Replacer) -> Replacer:
        for replacer in replacers:
            self._pairs.extend(replacer._pairs)
        return self

    def copy(self) -> Replacer:
        return Replacer().extend(self)

    @property
    def replacements(self) -> list[tuple[str, str]]:
        return list(self._pairs)

    def replace_at(self, text: str) -> str:
        """Replace every placeholder occurrence in order, then resolve plural markers.

        Inserted values are never searched again by the same pair.
        """
        if text is None:
            raise ValueError("The string to process cannot be None")
        if not self._pairs or not text:
            return text
        result = text
        for placeholder, value in self._pairs:
            if placeholder:
                result = result.replace(placeholder, value)
        return apply_plurals(result)

    def replace_all(self, texts: Iterable[str]) -> list[str]:
        return [self.replace_at(text) for text in texts]

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        return f"Replacer({self._pairs!r})"
