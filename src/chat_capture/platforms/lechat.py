# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Mistral LeChat: role attributes plus reasoning/answer message parts."""

from __future__ import annotations

import logging

from bs4 import Tag

from .. import thoughts
from ..dom import Visited, as_document, has_class, iter_elements, mark_visited, top_level
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown
from ..widgets import LECHAT_RULES
from .base import Platform, require_messages

LOGGER = logging.getLogger(__name__)

ROLE_ATTR = "data-message-author-role"
PART_ATTR = "data-message-part-type"


def _is_prompt(node: Tag) -> bool:
    # User bubbles are right aligned with a grey background when unlabelled
    return node.get(ROLE_ATTR) == "user" or has_class(node, "ms-auto", "bg-basic-gray-alpha-4")


def _response_content(node: Tag) -> str:
    parts = top_level(node.select(f"[{PART_ATTR}]"))
    if not parts:
        return html_to_markdown(node, LECHAT_RULES)
    chunks = []
    for part in parts:
        text = html_to_markdown(part, LECHAT_RULES)
        if part.get(PART_ATTR) == "reasoning":
            text = thoughts.wrap_thought(thoughts.unwrap(text))
        if text:
            chunks.append(text)
    return "\n\n".join(chunks)


def _scan(root: Tag, sequencer: TurnSequencer, visited: Visited) -> None:
    for node in iter_elements(root):
        if id(node) in visited:
            continue
        if _is_prompt(node):
            body = node.select_one(".whitespace-pre-wrap") or node
            if sequencer.prompt(html_to_markdown(body, LECHAT_RULES)):
                mark_visited(node, visited)
        elif node.get(ROLE_ATTR) == "assistant":
            if sequencer.response(_response_content(node)):
                mark_visited(node, visited)


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    sequencer = TurnSequencer(merge_responses=False)
    _scan(document, sequencer, visited=set())
    return require_messages(Platform.LECHAT, sequencer.messages)
