# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""JSON and Markdown renderings of the canonical model.

JSON is the lossless form: ``chat_data_from_json(chat_data_to_json(d)) == d``.
Markdown is a presentation projection; thought sentinels become
``thought`` fenced blocks and headings follow a fixed layout.
"""

from __future__ import annotations

import logging
import re

from . import config, thoughts
from .exceptions import OversizeSession
from .models import ChatData, ChatMessageType, SavedChatSession

LOGGER = logging.getLogger(__name__)

FOOTER = (
    "###### Noosphere Reflect\n"
    "###### ***Meaning Through Memory***\n"
    "\n"
    "###### ***[Preserve Your Meaning](https://acidgreenservers.github.io/Noosphere-Reflect/)***"
)

_BACKTICK_RUN = re.compile(r"`+")


# --------------------------------------------------------------------------- #
# JSON                                                                        #
# --------------------------------------------------------------------------- #


def chat_data_to_json(chat_data: ChatData) -> str:
    return chat_data.model_dump_json(by_alias=True, indent=2)


def chat_data_from_json(payload: str | bytes) -> ChatData:
    return ChatData.model_validate_json(payload)


def session_to_json(session: SavedChatSession) -> str:
    return session.model_dump_json(by_alias=True, indent=2)


def session_from_json(payload: str | bytes) -> SavedChatSession:
    return SavedChatSession.model_validate_json(payload)


# --------------------------------------------------------------------------- #
# Markdown                                                                    #
# --------------------------------------------------------------------------- #


def _thought_fence(segment: str) -> str:
    """Fence reasoning with more backticks than any run inside it."""
    longest = max((len(run) for run in _BACKTICK_RUN.findall(segment)), default=0)
    ticks = "`" * max(3, longest + 1)
    return f"{ticks}thought\n{segment}\n{ticks}"


def _render_content(content: str) -> str:
    if not thoughts.has_thought(content):
        return content
    blocks = []
    for is_thought, segment in thoughts.split(content):
        blocks.append(_thought_fence(segment) if is_thought else segment)
    return "\n\n".join(blocks)


def chat_data_to_markdown(
    chat_data: ChatData,
    *,
    title: str | None = None,
    user_name: str = config.DEFAULT_USER_NAME,
    ai_name: str | None = None,
) -> str:
    """Render a conversation as a standalone Markdown document."""
    metadata = chat_data.metadata
    heading = title or (metadata.title if metadata else "") or config.DEFAULT_CHAT_TITLE
    speaker = ai_name or (metadata.model if metadata else "") or config.DEFAULT_AI_NAME

    lines = [f"# {heading}", ""]
    if metadata is not None:
        lines.append(f"**Model:** {metadata.model}")
        lines.append(f"**Date:** {metadata.date}")
        if metadata.source_url:
            lines.append(f"**Source:** {metadata.source_url}")
        if metadata.tags:
            lines.append(f"**Tags:** {', '.join(metadata.tags)}")
        lines.append("")
    lines.extend(["---", ""])

    for message in chat_data.messages:
        name = user_name if message.type is ChatMessageType.PROMPT else speaker
        lines.extend([f"## {name}:", "", _render_content(message.content), "", "---", ""])

    lines.append(FOOTER)
    return "\n".join(lines) + "\n"


def session_to_markdown(session: SavedChatSession) -> str:
    chat_data = session.chat_data
    if chat_data.metadata is None and session.metadata is not None:
        chat_data = chat_data.model_copy(update={"metadata": session.metadata})
    return chat_data_to_markdown(
        chat_data,
        title=session.chat_title,
        user_name=session.user_name,
        ai_name=session.ai_name,
    )


# --------------------------------------------------------------------------- #
# Size guard                                                                  #
# --------------------------------------------------------------------------- #


def payload_size(payload: str) -> int:
    return len(payload.encode("utf-8"))


def ensure_within_limit(payload: str, limit: int | None = None) -> str:
    """Return ``payload`` unchanged, or raise :class:`OversizeSession`."""
    limit = config.MAX_SESSION_BYTES if limit is None else limit
    size = payload_size(payload)
    if size > limit:
        raise OversizeSession(size, limit)
    if size > config.WARN_SESSION_BYTES:
        LOGGER.warning("Serialized session is large: %d bytes (limit %d)", size, limit)
    return payload
