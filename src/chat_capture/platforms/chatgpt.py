# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""ChatGPT: one ``article[data-turn-id]`` per message, role in ``data-turn``."""

from __future__ import annotations

import logging

from bs4 import Tag

from ..dom import as_document
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown

LOGGER = logging.getLogger(__name__)

TURN_SELECTOR = "article[data-turn-id]"
USER_SELECTOR = ".user-message-bubble-color"
ASSISTANT_SELECTOR = '[data-message-author-role="assistant"]'


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    sequencer = TurnSequencer(merge_responses=False)

    turns = document.select(TURN_SELECTOR)
    LOGGER.debug("Found %d ChatGPT turn(s)", len(turns))
    for turn in turns:
        role = turn.get("data-turn")
        if role == "user":
            sequencer.prompt(html_to_markdown(turn.select_one(USER_SELECTOR)))
        elif role == "assistant":
            sequencer.response(html_to_markdown(turn.select_one(ASSISTANT_SELECTOR)))
        else:
            LOGGER.debug("Skipping turn with unknown role %r", role)
    return sequencer.messages
