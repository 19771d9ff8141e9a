# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Reasoning ("thought") sentinels embedded in response content.

A thought travels inside a ``Response`` message as::

    <thought>
    ...reasoning...
    </thought>

    ...answer...

Some sites ship the sentinels themselves, entity encoded inside the page
markup (``&lt;thought&gt;...&lt;/thought&gt;``). ``encode`` and ``decode``
are exact inverses over those entities, so an encoded thought found in
markup is decoded first and only then split from the answer.
"""

from __future__ import annotations

import html
import re
from collections.abc import Iterator

OPEN_TAG = "<thought>"
CLOSE_TAG = "</thought>"
ENCODED_OPEN_TAG = "&lt;thought&gt;"

_THOUGHT_RE = re.compile(r"<thought>\s*(.*?)\s*</thought>", re.DOTALL)
_ENCODED_THOUGHT_RE = re.compile(r"&lt;thought&gt;(.*?)&lt;/thought&gt;", re.DOTALL)
_MARKUP_TAG_RE = re.compile(r"<[^>]+>")


def wrap_thought(text: str) -> str:
    """Wrap reasoning text in sentinels; empty text stays empty."""
    text = (text or "").strip()
    if not text:
        return ""
    return f"{OPEN_TAG}\n{text}\n{CLOSE_TAG}"


def compose(thought: str, answer: str) -> str:
    """Build response content with the thought placed before the answer."""
    parts = [wrap_thought(thought), (answer or "").strip()]
    return "\n\n".join(part for part in parts if part)


def encode(text: str) -> str:
    return html.escape(text, quote=False)


def decode(text: str) -> str:
    return html.unescape(text)


def find_encoded(markup: str) -> list[str]:
    """Return the decoded text of every entity-encoded thought in ``markup``.

    Markup tags the site wrapped around the reasoning are dropped before
    entities are decoded.
    """
    thoughts = []
    for match in _ENCODED_THOUGHT_RE.finditer(markup or ""):
        inner = _MARKUP_TAG_RE.sub(" ", match.group(1))
        text = decode(inner).strip()
        if text:
            thoughts.append(text)
    return thoughts


def strip_thoughts(text: str) -> str:
    """Remove sentinel-delimited reasoning, leaving only the answer."""
    return re.sub(r"\n{3,}", "\n\n", _THOUGHT_RE.sub("", text or "")).strip()


def has_thought(text: str) -> bool:
    return bool(_THOUGHT_RE.search(text or ""))


def has_encoded_thought(markup: str) -> bool:
    """True when ``markup`` carries an entity-encoded opening sentinel."""
    return ENCODED_OPEN_TAG in (markup or "")


def split(text: str) -> Iterator[tuple[bool, str]]:
    """Yield ``(is_thought, segment)`` pairs in order, skipping blank segments."""
    position = 0
    for match in _THOUGHT_RE.finditer(text or ""):
        before = text[position : match.start()].strip()
        if before:
            yield False, before
        thought = match.group(1).strip()
        if thought:
            yield True, thought
        position = match.end()
    rest = (text or "")[position:].strip()
    if rest:
        yield False, rest


def unwrap(text: str) -> str:
    """Drop sentinel tags already present so text can be wrapped once."""
    return re.sub(r"</?thought>", "", text or "").strip()
