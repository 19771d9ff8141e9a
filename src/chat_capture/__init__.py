# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Extract AI chat conversations from saved web pages into a canonical model."""

__version__ = "0.1.0"

from .capture import capture
from .exceptions import (
    ExtractionError,
    MissingContainer,
    NoMessagesFound,
    OversizeSession,
    SnapshotError,
    UnsupportedPlatform,
)
from .models import (
    ChatData,
    ChatMessage,
    ChatMessageType,
    ChatMetadata,
    ChatTheme,
    ParserMode,
    SavedChatSession,
)
from .platforms import Platform, extract_messages
from .serializers import (
    chat_data_from_json,
    chat_data_to_json,
    chat_data_to_markdown,
    ensure_within_limit,
    session_from_json,
    session_to_json,
    session_to_markdown,
)
from .transducer import html_to_markdown, sanitize_url

__all__ = [
    "ChatData",
    "ChatMessage",
    "ChatMessageType",
    "ChatMetadata",
    "ChatTheme",
    "ExtractionError",
    "MissingContainer",
    "NoMessagesFound",
    "OversizeSession",
    "ParserMode",
    "Platform",
    "SavedChatSession",
    "SnapshotError",
    "UnsupportedPlatform",
    "__version__",
    "capture",
    "chat_data_from_json",
    "chat_data_to_json",
    "chat_data_to_markdown",
    "ensure_within_limit",
    "extract_messages",
    "html_to_markdown",
    "sanitize_url",
    "session_from_json",
    "session_to_json",
    "session_to_markdown",
]
