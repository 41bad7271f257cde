"""Tag scanner — find one ``open...close`` tag, hand its content to a callback, cut it out or replace it.

``match`` deliberately handles a single tag per call. Callers that need
every occurrence call it again on the returned string until it comes back
unchanged (see ``chatfmt.targets.TargetHandler``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class Tag:
    open: str
    close: str
    content: str
    start: int  # index of the opening delimiter
    end: int  # index just past the closing delimiter


def find_tag(text: str, open_tag: str, close_tag: str, begin: int = 0) -> Tag | None:
    """Locate the first complete tag at or after ``begin``.

    An opening delimiter without a closing one after it is not a tag.
    """
    start = text.find(open_tag, begin)
    if start == -1:
        return None
    content_start = start + len(open_tag)
    close = text.find(close_tag, content_start)
    if close == -1:
        return None
    return Tag(open_tag, close_tag, text[content_start:close], start, close + len(close_tag))


def match(
    text: str,
    open_tag: str,
    close_tag: str,
    on_match: Callable[[str], object],
    remove: bool = True,
) -> str:
    """Cut out the first ``open_tag...close_tag`` span, passing its content to ``on_match``.

    With ``remove=False`` only the delimiters go and the content stays in
    place. Returns ``text`` itself when there is no complete tag.
    """
    tag = find_tag(text, open_tag, close_tag)
    if tag is None:
        return text
    on_match(tag.content)
    kept = "" if remove else tag.content
    return text[:tag.start] + kept + text[tag.end:]


def replace(text: str, open_tag: str, close_tag: str, fn: Callable[[str], str]) -> str:
    """Substitute ``fn(content)`` for the first whole tag.

    Returns ``text`` itself when there is no complete tag.
    """
    tag = find_tag(text, open_tag, close_tag)
    if tag is None:
        return text
    return text[:tag.start] + fn(tag.content) + text[tag.end:]


def substring(text: str, open_tag: str, close_tag: str, inclusive: bool = True) -> str | None:
    """Return the first tag with (``inclusive``) or without its delimiters, or None."""
    tag = find_tag(text, open_tag, close_tag)
    if tag is None:
        return None
    return text[tag.start:tag.end] if inclusive else tag.content
