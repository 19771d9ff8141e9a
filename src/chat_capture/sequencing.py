# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Turn-boundary state machine deciding when fragments start a new message.

States::

    EMPTY             nothing emitted yet
    PROMPT_OPEN       last message is a prompt
    RESPONSE_OPEN     last message is a response and no boundary followed it
    BOUNDARY_PENDING  a divider or turn header was seen since the last output

Transitions (empty content never changes state)::

    boundary()   any state        -> BOUNDARY_PENDING
    prompt(c)    any state        -> push Prompt,            PROMPT_OPEN
    response(c)  RESPONSE_OPEN    -> append "\\n\\n" + c,     RESPONSE_OPEN
    response(c)  any other state  -> push Response,          RESPONSE_OPEN

A sequencer built with ``merge_responses=False`` never appends, which is
the degenerate policy of sites that render exactly one node per message.
"""

from __future__ import annotations

import enum
import logging

from .models import ChatMessage, ChatMessageType

LOGGER = logging.getLogger(__name__)


class TurnState(enum.Enum):
    EMPTY = "empty"
    PROMPT_OPEN = "prompt-open"
    RESPONSE_OPEN = "response-open"
    BOUNDARY_PENDING = "boundary-pending"


class TurnSequencer:
    """Accumulates extracted fragments into an ordered message list."""

    def __init__(self, merge_responses: bool = True) -> None:
        self.merge_responses = merge_responses
        self.state = TurnState.EMPTY
        self._messages: list[ChatMessage] = []

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def boundary(self) -> None:
        LOGGER.debug("Turn boundary observed in state %s", self.state.name)
        self.state = TurnState.BOUNDARY_PENDING

    def prompt(self, content: str) -> bool:
        content = (content or "").strip()
        if not content:
            LOGGER.debug("Ignoring empty prompt fragment")
            return False
        self._messages.append(ChatMessage(type=ChatMessageType.PROMPT, content=content))
        self.state = TurnState.PROMPT_OPEN
        return True

    def response(self, content: str) -> bool:
        content = (content or "").strip()
        if not content:
            LOGGER.debug("Ignoring empty response fragment")
            return False
        if self.merge_responses and self.state is TurnState.RESPONSE_OPEN:
            last = self._messages[-1]
            last.content = f"{last.content}\n\n{content}"
            LOGGER.debug("Merged response fragment into message %d", len(self._messages) - 1)
        else:
            self._messages.append(ChatMessage(type=ChatMessageType.RESPONSE, content=content))
        self.state = TurnState.RESPONSE_OPEN
        return True

    def add(self, message_type: ChatMessageType, content: str) -> bool:
        if message_type is ChatMessageType.PROMPT:
            return self.prompt(content)
        return self.response(content)
