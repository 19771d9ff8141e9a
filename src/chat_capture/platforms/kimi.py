# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Kimi: ``.chat-content-item`` segments tagged ``-user`` or ``-assistant``."""

from __future__ import annotations

import logging

from bs4 import Tag

from .. import thoughts
from ..dom import as_document, has_class
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown
from .base import Platform, require_messages

LOGGER = logging.getLogger(__name__)

SEGMENT_SELECTOR = ".chat-content-item"
THINKING_SELECTOR = ".thinking-container .markdown"
ANSWER_SELECTOR = ".markdown-container .markdown"


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    sequencer = TurnSequencer(merge_responses=False)

    for segment in document.select(SEGMENT_SELECTOR):
        if has_class(segment, "chat-content-item-user"):
            sequencer.prompt(html_to_markdown(segment.select_one(".user-content")))
        elif has_class(segment, "chat-content-item-assistant"):
            reasoning = html_to_markdown(segment.select_one(THINKING_SELECTOR))
            answer = html_to_markdown(segment.select_one(ANSWER_SELECTOR))
            sequencer.response(thoughts.compose(reasoning, answer))

    return require_messages(Platform.KIMI, sequencer.messages, "expected .chat-content-item segments")
