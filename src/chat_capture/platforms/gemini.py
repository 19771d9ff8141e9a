# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Gemini: user queries, model responses and their thought panels.

A thought panel is emitted as its own ``Response`` message, wrapped in
sentinels, directly before the answer it belongs to.
"""

from __future__ import annotations

import logging
import re

from bs4 import Tag

from .. import thoughts
from ..dom import Visited, as_document, has_ancestor, has_class, mark_visited, remove_all, top_level
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown

LOGGER = logging.getLogger(__name__)

HIDDEN_SELECTOR = ", ".join(
    [
        ".screen-reader-only",
        ".visually-hidden",
        '[aria-hidden="true"]',
        ".show-on-focus",
        "ms-conversation-actions",
        "ms-feedback-buttons",
        ".voice-input-container",
    ]
)
TURN_SELECTOR = "user-query, model-response, .query-text, .message-content, .model-response-text"
THOUGHTS_SELECTOR = "model-thoughts, .thoughts-container"
ANSWER_SELECTORS = (".markdown", ".message-content", ".model-response-text")

_GEM_PREFIX = re.compile(r"^N\s+.*?\s+Custom Gem\s*", re.IGNORECASE)
_DOUBLED_ANALYSIS = re.compile(r"Analysis\s*Analysis", re.IGNORECASE)
_BOLD_RUN = re.compile(r"(\*\*.*?\*\*)")


def _drop_thoughts(root: Tag) -> None:
    remove_all(root, THOUGHTS_SELECTOR)


def _dedupe_blocks(text: str) -> str:
    """Drop paragraphs that repeat the paragraph right before them."""
    blocks = text.split("\n\n")
    kept = [block for index, block in enumerate(blocks) if index == 0 or block != blocks[index - 1]]
    return "\n\n".join(kept).strip()


def _clean(text: str) -> str:
    text = _GEM_PREFIX.sub("", text.strip())
    return _DOUBLED_ANALYSIS.sub("Analysis", text).strip()


def _is_user(turn: Tag) -> bool:
    return (
        turn.name == "user-query"
        or has_class(turn, "query-text")
        or (turn.get("role") == "heading" and turn.get("aria-level") == "2")
    )


def _is_response(turn: Tag) -> bool:
    return (
        turn.name == "model-response"
        or has_class(turn, "message-content")
        or has_class(turn, "model-response-text")
    )


def _thought_text(panel: Tag) -> str:
    body = (
        panel.select_one(".markdown")
        or panel.select_one('[data-test-id="thoughts-content"]')
        or panel
    )
    text = _GEM_PREFIX.sub("", html_to_markdown(body))
    text = _BOLD_RUN.sub(r"\n\n\1\n\n", text)
    return re.sub(r"\n{3,}", "\n\n", text).strip()


def _answer_node(turn: Tag) -> Tag:
    for selector in ANSWER_SELECTORS:
        for node in turn.select(selector):
            if not has_ancestor(node, THOUGHTS_SELECTOR):
                return node
    return turn


def _emit_response(turn: Tag, sequencer: TurnSequencer, visited: Visited) -> None:
    panel = turn.select_one(THOUGHTS_SELECTOR)
    if panel is not None:
        sequencer.response(thoughts.wrap_thought(_thought_text(panel)))
        mark_visited(panel, visited)
    answer = html_to_markdown(_answer_node(turn), (_drop_thoughts,))
    sequencer.response(_dedupe_blocks(_clean(answer)))


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    remove_all(document, HIDDEN_SELECTOR)

    sequencer = TurnSequencer(merge_responses=False)
    visited: Visited = set()
    turns = top_level(document.select(TURN_SELECTOR))
    LOGGER.debug("Found %d top-level Gemini turn(s)", len(turns))
    for turn in turns:
        if id(turn) in visited:
            continue
        if _is_user(turn):
            body = turn.select_one(".query-text") or turn
            sequencer.prompt(_dedupe_blocks(_clean(html_to_markdown(body))))
        elif _is_response(turn):
            _emit_response(turn, sequencer, visited)
        mark_visited(turn, visited)
    return sequencer.messages
