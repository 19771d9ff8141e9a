# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Canonical conversation model shared by every extractor and serializer.

Attribute names are snake_case in Python; the JSON boundary uses the
camelCase names consumed by the web application (``isEdited``,
``sourceUrl``, ``chatData``, ...). Both spellings are accepted on input.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from . import config


def utc_now_iso() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class ChatMessageType(str, Enum):
    PROMPT = "prompt"
    RESPONSE = "response"


class ChatTheme(str, Enum):
    DARK_DEFAULT = "dark-default"
    LIGHT_DEFAULT = "light-default"
    DARK_GREEN = "dark-green"
    DARK_PURPLE = "dark-purple"


class ParserMode(str, Enum):
    """Which extractor produced a session; the web app renders per mode."""

    BASIC = "basic"
    LLAMACODER_HTML = "llamacoder-html"
    CLAUDE_HTML = "claude-html"
    LECHAT_HTML = "lechat-html"
    CHATGPT_HTML = "chatgpt-html"
    GEMINI_HTML = "gemini-html"
    AISTUDIO_HTML = "aistudio-html"
    KIMI_HTML = "kimi-html"
    KIMI_SHARE_COPY = "kimi-share-copy"
    GROK_HTML = "grok-html"
    THIRD_PARTY_MARKDOWN = "third-party-markdown"
    THIRD_PARTY_JSON = "third-party-json"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChatMessage(_CamelModel):
    type: ChatMessageType
    content: str
    is_edited: bool = False

    @field_validator("content")
    @classmethod
    def _trim(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("content must not be empty")
        return value


class ChatMetadata(_CamelModel):
    """Provenance of a capture, not its content."""

    title: str
    model: str
    date: str = Field(default_factory=utc_now_iso)
    tags: list[str] = Field(default_factory=list)
    author: str = config.DEFAULT_AUTHOR
    source_url: str = ""
    import_type: str | None = None


class ChatData(_CamelModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    metadata: ChatMetadata | None = None


class SavedChatSession(_CamelModel):
    """A capture ready for the persistence bridge, with presentation settings."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = config.DEFAULT_SESSION_NAME
    date: str = Field(default_factory=utc_now_iso)
    input_content: str = ""
    chat_title: str = config.DEFAULT_CHAT_TITLE
    user_name: str = config.DEFAULT_USER_NAME
    ai_name: str = config.DEFAULT_AI_NAME
    selected_theme: ChatTheme = ChatTheme.DARK_DEFAULT
    parser_mode: ParserMode = ParserMode.BASIC
    chat_data: ChatData = Field(default_factory=ChatData)
    metadata: ChatMetadata | None = None
