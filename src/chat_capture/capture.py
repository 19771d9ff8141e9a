# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Turn one page snapshot into a :class:`SavedChatSession`."""

from __future__ import annotations

import logging

from bs4 import Tag

from . import config
from .dom import as_document, text_of
from .exceptions import NoMessagesFound
from .models import (
    ChatData,
    ChatMessage,
    ChatMessageType,
    ChatMetadata,
    SavedChatSession,
    utc_now_iso,
)
from .platforms import Platform, PlatformSpec, extract_messages, get_spec
from .platforms.aistudio import ThoughtExpander

LOGGER = logging.getLogger(__name__)


def _truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit].rstrip() + "..."


def _usable(title: str, spec: PlatformSpec) -> bool:
    return bool(title) and title.lower() not in {t.lower() for t in spec.ignored_titles}


def extract_title(document: Tag, spec: PlatformSpec, messages: list[ChatMessage]) -> str:
    """Pick a conversation title from the page, falling back to the first prompt."""
    for selector in spec.title_selectors:
        title = text_of(document.select_one(selector))
        if _usable(title, spec):
            LOGGER.debug("Title from %s: %s", selector, title)
            return _truncate(title, config.TITLE_MAX_LENGTH)

    title = text_of(document.find("title"))
    for suffix in spec.title_suffixes:
        if title.endswith(suffix):
            title = title[: -len(suffix)].strip()
    if _usable(title, spec):
        LOGGER.debug("Title from <title>: %s", title)
        return _truncate(title, config.TITLE_MAX_LENGTH)

    for message in messages:
        if message.type is ChatMessageType.PROMPT:
            first_line = " ".join(message.content.split())
            LOGGER.debug("Title from first prompt")
            return _truncate(first_line, config.FALLBACK_TITLE_PROMPT_LENGTH)

    return spec.default_title or f"{spec.model} Chat"


def build_metadata(
    spec: PlatformSpec, title: str, *, source_url: str = "", date: str | None = None
) -> ChatMetadata:
    return ChatMetadata(
        title=title,
        model=spec.model,
        date=date or utc_now_iso(),
        tags=list(spec.tags),
        author=config.DEFAULT_AUTHOR,
        source_url=source_url,
        import_type=config.IMPORT_TYPE,
    )


def capture(
    source: str | Tag,
    platform: Platform | str,
    *,
    source_url: str = "",
    date: str | None = None,
    expander: ThoughtExpander | None = None,
    settle_delay: float | None = None,
) -> SavedChatSession:
    """Extract, title and wrap a conversation from ``source``.

    Raises :class:`NoMessagesFound` for every platform when nothing was
    extracted, so an empty conversation never reaches a serializer.
    """
    spec = get_spec(platform)
    document = as_document(source)
    raw_html = source if isinstance(source, str) else str(source)

    messages = extract_messages(
        document, spec.platform, expander=expander, settle_delay=settle_delay
    )
    if not messages:
        raise NoMessagesFound(spec.platform.value)

    title = extract_title(document, spec, messages)
    metadata = build_metadata(spec, title, source_url=source_url, date=date)
    LOGGER.info(
        "Captured %d message(s) from %s: %s", len(messages), spec.platform.value, title
    )
    return SavedChatSession(
        name=title,
        date=metadata.date,
        input_content=raw_html,
        chat_title=title,
        user_name=config.DEFAULT_USER_NAME,
        ai_name=spec.model,
        parser_mode=spec.parser_mode,
        chat_data=ChatData(messages=messages, metadata=metadata),
        metadata=metadata,
    )
