# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Types shared by the platform extractors and their registry."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from ..exceptions import NoMessagesFound, UnsupportedPlatform
from ..models import ChatMessage, ParserMode

LOGGER = logging.getLogger(__name__)

Extractor = Callable[..., list[ChatMessage]]


class Platform(str, enum.Enum):
    """Closed set of chat sites with a dedicated extractor."""

    CHATGPT = "chatgpt"
    CLAUDE = "claude"
    GEMINI = "gemini"
    GROK = "grok"
    KIMI = "kimi"
    LECHAT = "lechat"
    LLAMACODER = "llamacoder"
    AISTUDIO = "aistudio"

    @classmethod
    def parse(cls, name: str | Platform) -> Platform:
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError as exc:
            choices = ", ".join(member.value for member in cls)
            raise UnsupportedPlatform(
                f"Unknown platform '{name}'. Choose one of: {choices}"
            ) from exc


@dataclass(frozen=True)
class PlatformSpec:
    """Everything the capture pipeline needs to know about one site."""

    platform: Platform
    extract: Extractor
    parser_mode: ParserMode
    model: str
    title_selectors: tuple[str, ...] = ()
    title_suffixes: tuple[str, ...] = ()
    ignored_titles: tuple[str, ...] = ()
    default_title: str = ""
    tags: tuple[str, ...] = field(default_factory=tuple)


def require_messages(
    platform: Platform, messages: list[ChatMessage], detail: str | None = None
) -> list[ChatMessage]:
    """Return ``messages`` or raise when an extraction pass found nothing."""
    if not messages:
        LOGGER.warning("%s extraction produced no messages", platform.value)
        raise NoMessagesFound(platform.value, detail)
    LOGGER.info("%s extraction produced %d message(s)", platform.value, len(messages))
    return messages
