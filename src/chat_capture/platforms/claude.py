# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Claude: prompts and responses are found by scanning every element in order.

Response wrappers nest, so each matched subtree is recorded in a visited
set owned by the current extraction and nested matches are skipped.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from ..dom import Visited, as_document, closest, has_ancestor, has_class, iter_elements, mark_visited
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown
from ..widgets import CLAUDE_RULES

LOGGER = logging.getLogger(__name__)

SKIP_SELECTOR = 'nav, .sidebar, [role="navigation"], .starred-list, h3[aria-hidden="true"]'
RESPONSE_CLASS = "font-claude-response"


def _is_prompt(node: Tag) -> bool:
    return node.get("data-testid") == "user-message" or has_class(node, "font-user-message")


def _is_response(node: Tag) -> bool:
    return has_class(node, RESPONSE_CLASS) and not has_ancestor(node, f".{RESPONSE_CLASS}")


def _scan(root: Tag, sequencer: TurnSequencer, visited: Visited) -> None:
    for node in iter_elements(root):
        if id(node) in visited:
            continue
        if closest(node, SKIP_SELECTOR) is not None:
            visited.add(id(node))
            continue
        if _is_prompt(node):
            if sequencer.prompt(html_to_markdown(node, CLAUDE_RULES)):
                mark_visited(node, visited)
        elif _is_response(node):
            if sequencer.response(html_to_markdown(node, CLAUDE_RULES)):
                mark_visited(node, visited)


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    sequencer = TurnSequencer(merge_responses=False)
    _scan(document, sequencer, visited=set())
    return sequencer.messages
