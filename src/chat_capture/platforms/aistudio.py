# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Google AI Studio: the one site whose turns need real sequencing.

Children of ``.turn-container`` are classified as divider, turn header or
input/output turn and fed, in document order, through
:class:`~chat_capture.sequencing.TurnSequencer`. Output turns that follow
each other without a divider or header are parts of the same answer and
merge into one message.

Collapsed thought panels only hold their text once expanded on the live
page. An ``expander`` callback can do that; the extractor then waits
:data:`~chat_capture.config.THOUGHT_SETTLE_DELAY` seconds before reading.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable

from bs4 import Tag

from .. import config, thoughts
from ..dom import as_document, class_tokens, has_class, remove_all
from ..exceptions import MissingContainer
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown
from ..widgets import AISTUDIO_RULES
from .base import Platform, require_messages

LOGGER = logging.getLogger(__name__)

TURN_CONTAINER_SELECTOR = ".turn-container"
THOUGHT_PANEL_SELECTOR = "ms-expandable-turn"
COLLAPSED_HEADER_SELECTOR = "ms-expandable-turn .container:not(.expanded) .header"
TURN_CHROME_SELECTOR = ", ".join(
    [
        THOUGHT_PANEL_SELECTOR,
        ".turn-header",
        ".author-label",
        ".token-count",
        "ms-chat-turn-options",
        "ms-thought-chunk",
    ]
)

# Receives the collapsed panel headers, expands them on the live page and may
# return a fresh snapshot to read instead of the original one.
ThoughtExpander = Callable[[list[Tag]], str | Tag | None]


class NodeKind(enum.Enum):
    DIVIDER = "divider"
    HEADER = "header"
    INPUT = "input"
    OUTPUT = "output"
    OTHER = "other"


def classify(node: Tag) -> NodeKind:
    if node.name in ("mat-divider", "hr") or any("divider" in token for token in class_tokens(node)):
        return NodeKind.DIVIDER
    if has_class(node, "turn-header"):
        return NodeKind.HEADER
    if has_class(node, "turn", "input"):
        return NodeKind.INPUT
    if has_class(node, "turn", "output"):
        return NodeKind.OUTPUT
    return NodeKind.OTHER


def _drop_turn_chrome(root: Tag) -> None:
    remove_all(root, TURN_CHROME_SELECTOR)


_CONTENT_RULES = (_drop_turn_chrome, *AISTUDIO_RULES)


def _thought_text(turn: Tag) -> str:
    texts = []
    for panel in turn.select(THOUGHT_PANEL_SELECTOR):
        body = panel.select_one(".collapsed-content") or panel.select_one(".content")
        text = html_to_markdown(body)
        if text:
            texts.append(text)
    return "\n\n".join(texts)


def prompt_content(turn: Tag) -> str:
    body = turn.select_one("ms-console-turn ms-cmark-node") or turn
    return html_to_markdown(body, _CONTENT_RULES)


def response_content(turn: Tag) -> str:
    return thoughts.compose(_thought_text(turn), html_to_markdown(turn, _CONTENT_RULES))


def _walk(node: Tag, sequencer: TurnSequencer) -> None:
    for child in node.find_all(True, recursive=False):
        kind = classify(child)
        if kind in (NodeKind.DIVIDER, NodeKind.HEADER):
            sequencer.boundary()
        elif kind is NodeKind.INPUT:
            sequencer.prompt(prompt_content(child))
        elif kind is NodeKind.OUTPUT:
            sequencer.response(response_content(child))
        else:
            _walk(child, sequencer)


def _from_turn_containers(document: Tag, sequencer: TurnSequencer) -> None:
    containers = document.select(TURN_CONTAINER_SELECTOR)
    if not containers:
        raise MissingContainer(TURN_CONTAINER_SELECTOR)
    for container in containers:
        if container.find_parent(class_="turn-container") is not None:
            continue
        _walk(container, sequencer)


def _from_chat_turns(document: Tag, sequencer: TurnSequencer) -> None:
    """Older layout: one ``ms-chat-turn`` per message, thoughts in a chunk."""
    for turn in document.select("ms-chat-turn"):
        sequencer.boundary()
        user = turn.select_one(".user-prompt-container")
        if user is not None:
            sequencer.prompt(html_to_markdown(user, _CONTENT_RULES))
        chunk = turn.select_one("ms-thought-chunk")
        model = turn.select_one(".model-prompt-container")
        reasoning = html_to_markdown(chunk)
        answer = html_to_markdown(model, _CONTENT_RULES)
        sequencer.response(thoughts.compose(reasoning, answer))


def expand_thoughts(
    document: Tag, expander: ThoughtExpander, settle_delay: float | None = None
) -> Tag:
    """Let ``expander`` open collapsed thought panels, then wait for rendering.

    Returns the snapshot to read: the one ``expander`` handed back, or
    ``document`` itself.
    """
    headers = document.select(COLLAPSED_HEADER_SELECTOR)
    if not headers:
        LOGGER.debug("No collapsed thought panels to expand")
        return document
    LOGGER.info("Expanding %d collapsed thought panel(s)", len(headers))
    refreshed = expander(headers)
    delay = config.THOUGHT_SETTLE_DELAY if settle_delay is None else settle_delay
    if delay > 0:
        time.sleep(delay)
    return document if refreshed is None else as_document(refreshed)


def extract(
    source: str | Tag,
    *,
    expander: ThoughtExpander | None = None,
    settle_delay: float | None = None,
) -> list[ChatMessage]:
    document = as_document(source)
    if expander is not None:
        document = expand_thoughts(document, expander, settle_delay)

    sequencer = TurnSequencer(merge_responses=True)
    try:
        _from_turn_containers(document, sequencer)
    except MissingContainer as exc:
        LOGGER.warning("%s; trying the ms-chat-turn layout", exc)
    if not len(sequencer):
        _from_chat_turns(document, sequencer)
    return require_messages(Platform.AISTUDIO, sequencer.messages)
