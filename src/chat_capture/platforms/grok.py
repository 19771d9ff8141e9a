# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Grok: both roles share one container class, so order decides the role.

Even positions are prompts unless the container carries an entity-encoded
thought, which only model turns do.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from .. import thoughts
from ..dom import as_document
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown
from .base import Platform, require_messages

LOGGER = logging.getLogger(__name__)

MESSAGE_SELECTOR = "div.response-content-markdown"


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    sequencer = TurnSequencer(merge_responses=False)

    for index, container in enumerate(document.select(MESSAGE_SELECTOR)):
        markup = container.decode_contents()
        has_thought = thoughts.has_encoded_thought(markup)
        is_user = index % 2 == 0 and not has_thought
        answer = thoughts.strip_thoughts(html_to_markdown(container))
        if is_user:
            sequencer.prompt(answer)
            continue
        reasoning = "\n\n".join(thoughts.find_encoded(markup))
        LOGGER.debug("Grok container %d: response, %d thought char(s)", index, len(reasoning))
        sequencer.response(thoughts.compose(reasoning, answer))

    return require_messages(
        Platform.GROK, sequencer.messages, "expected div.response-content-markdown blocks"
    )
