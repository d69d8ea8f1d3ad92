"""Text helpers for headings and anchors."""

from __future__ import annotations

import re
from typing import Dict

_INLINE_LINK = re.compile(r"!?\[([^\]]*)\]\([^)]*\)")
_INLINE_CODE = re.compile(r"`([^`]*)`")
_EMPHASIS = re.compile(r"(\*{1,3}|~~)(.+?)\1")
_UNDERSCORE_EMPHASIS = re.compile(r"(?<!\w)(_{1,3})(.+?)\1(?!\w)")
_HTML_TAG = re.compile(r"<[^>]+>")
_NON_ANCHOR = re.compile(r"[^\w\- ]", re.UNICODE)


def strip_markup(text: str) -> str:
    """Reduce inline Markdown to its visible text."""
    text = _INLINE_LINK.sub(r"\1", text)
    text = _INLINE_CODE.sub(r"\1", text)
    text = _HTML_TAG.sub("", text)
    previous = None
    while previous != text:
        previous = text
        text = _EMPHASIS.sub(r"\2", text)
        text = _UNDERSCORE_EMPHASIS.sub(r"\2", text)
    return text.strip()


def slugify(text: str) -> str:
    """Anchor for a heading, following GitHub/kramdown rules.

    >>> slugify("What is a `Flow`?")
    'what-is-a-flow'
    """
    plain = strip_markup(text).lower()
    plain = _NON_ANCHOR.sub("", plain)
    return plain.strip().replace(" ", "-")


class AnchorRegistry:
    """Hands out unique anchors within one document."""

    def __init__(self) -> None:
        self._seen: Dict[str, int] = {}

    def claim(self, text: str) -> str:
        base = slugify(text)
        count = self._seen.get(base)
        if count is None:
            self._seen[base] = 0
            return base
        count += 1
        self._seen[base] = count
        return f"{base}-{count}"

