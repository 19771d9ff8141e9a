# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Helpers for working on an explicit, parsed document."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Iterator

from bs4 import BeautifulSoup, Tag

LOGGER = logging.getLogger(__name__)

Visited = set[int]


def parse_document(html: str) -> BeautifulSoup:
    """Parse raw HTML into a document using the lxml tree builder."""
    return BeautifulSoup(html, "lxml")


def as_document(source: str | Tag) -> Tag:
    """Accept raw HTML or an already parsed tree and return a private copy.

    Extractors may remove nodes from what this returns; the caller's tree is
    never modified.
    """
    if isinstance(source, str):
        return parse_document(source)
    if isinstance(source, Tag):
        return copy.copy(source)
    raise TypeError(f"Expected HTML text or a parsed tree, got {type(source).__name__}")


def text_of(node: Tag | None) -> str:
    """Visible text of ``node`` with whitespace runs folded to single spaces."""
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())


def class_tokens(node: Tag) -> list[str]:
    value = node.get("class") or []
    if isinstance(value, str):
        return value.split()
    return list(value)


def has_class(node: Tag, *names: str) -> bool:
    tokens = class_tokens(node)
    return all(name in tokens for name in names)


def closest(node: Tag, selector: str) -> Tag | None:
    """Nearest element matching ``selector``, starting at ``node`` itself."""
    current: Tag | None = node
    while isinstance(current, Tag) and not isinstance(current, BeautifulSoup):
        if current.css.match(selector):
            return current
        current = current.parent
    return None


def has_ancestor(node: Tag, selector: str) -> bool:
    parent = node.parent
    return parent is not None and closest(parent, selector) is not None


def iter_elements(root: Tag) -> Iterator[Tag]:
    """All descendant elements of ``root`` in document order."""
    for node in root.descendants:
        if isinstance(node, Tag):
            yield node


def top_level(nodes: Iterable[Tag]) -> list[Tag]:
    """Drop every node that is nested inside another node of the same set."""
    candidates = list(nodes)
    ids = {id(node) for node in candidates}
    return [
        node
        for node in candidates
        if not any(id(parent) in ids for parent in node.parents)
    ]


def mark_visited(node: Tag, visited: Visited) -> None:
    """Record ``node`` and all of its descendants as consumed."""
    visited.add(id(node))
    for child in iter_elements(node):
        visited.add(id(child))


def remove_all(root: Tag, selector: str) -> int:
    removed = 0
    for node in root.select(selector):
        if node.decomposed or node.parent is None:
            continue
        node.decompose()
        removed += 1
    if removed:
        LOGGER.debug("Removed %d node(s) matching %s", removed, selector)
    return removed
