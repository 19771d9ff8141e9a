# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Registry of platform extractors.

Platform detection happens elsewhere; callers name the platform once and
the registry dispatches to its extractor::

    from chat_capture.platforms import Platform, extract_messages

    messages = extract_messages(html, Platform.CLAUDE)
"""

from __future__ import annotations

import inspect
import logging

from bs4 import Tag

from ..models import ChatMessage, ParserMode
from . import aistudio, chatgpt, claude, gemini, grok, kimi, lechat, llamacoder
from .base import Extractor, Platform, PlatformSpec, require_messages

__all__ = [
    "REGISTRY",
    "Extractor",
    "Platform",
    "PlatformSpec",
    "extract_messages",
    "get_spec",
    "require_messages",
]

LOGGER = logging.getLogger(__name__)

REGISTRY: dict[Platform, PlatformSpec] = {
    spec.platform: spec
    for spec in (
        PlatformSpec(
            platform=Platform.CHATGPT,
            extract=chatgpt.extract,
            parser_mode=ParserMode.CHATGPT_HTML,
            model="ChatGPT",
            title_selectors=("h1", 'div[aria-label*="Conversation"]'),
            title_suffixes=(" - ChatGPT", " | ChatGPT"),
            ignored_titles=("New chat", "ChatGPT"),
            default_title="ChatGPT Conversation",
        ),
        PlatformSpec(
            platform=Platform.CLAUDE,
            extract=claude.extract,
            parser_mode=ParserMode.CLAUDE_HTML,
            model="Claude",
            title_selectors=('button[data-testid="chat-title-button"]', "div.font-base-bold", "h1"),
            title_suffixes=(" - Claude",),
            ignored_titles=("Claude",),
            default_title="Claude Conversation",
        ),
        PlatformSpec(
            platform=Platform.GEMINI,
            extract=gemini.extract,
            parser_mode=ParserMode.GEMINI_HTML,
            model="Gemini",
            title_selectors=("span.conversation-title",),
            title_suffixes=(" - Gemini",),
            ignored_titles=("Gemini", "Google Gemini"),
            default_title="Gemini Conversation",
        ),
        PlatformSpec(
            platform=Platform.GROK,
            extract=grok.extract,
            parser_mode=ParserMode.GROK_HTML,
            model="Grok",
            title_suffixes=(" - Grok",),
            ignored_titles=("Grok",),
            default_title="Grok Conversation",
        ),
        PlatformSpec(
            platform=Platform.KIMI,
            extract=kimi.extract,
            parser_mode=ParserMode.KIMI_HTML,
            model="Kimi",
            title_selectors=(".chat-header h2",),
            title_suffixes=(" - Kimi",),
            ignored_titles=("Kimi",),
            default_title="Kimi Conversation",
        ),
        PlatformSpec(
            platform=Platform.LECHAT,
            extract=lechat.extract,
            parser_mode=ParserMode.LECHAT_HTML,
            model="Mistral LeChat",
            title_selectors=(r"div.block.min-h-5\.5", r"div.font-\[450\]", "h1"),
            title_suffixes=(" - Le Chat", " | Le Chat"),
            ignored_titles=("Le Chat",),
            default_title="LeChat Conversation",
        ),
        PlatformSpec(
            platform=Platform.LLAMACODER,
            extract=llamacoder.extract,
            parser_mode=ParserMode.LLAMACODER_HTML,
            model="Llamacoder",
            default_title="Llamacoder Conversation",
        ),
        PlatformSpec(
            platform=Platform.AISTUDIO,
            extract=aistudio.extract,
            parser_mode=ParserMode.AISTUDIO_HTML,
            model="Google AI Studio",
            title_suffixes=(" - AI Studio", " | Google AI Studio"),
            ignored_titles=("Google AI Studio", "AI Studio"),
            default_title="AI Studio Chat",
            tags=("AI Studio",),
        ),
    )
}


def get_spec(platform: Platform | str) -> PlatformSpec:
    return REGISTRY[Platform.parse(platform)]


def extract_messages(source: str | Tag, platform: Platform | str, **options) -> list[ChatMessage]:
    """Run the registered extractor for ``platform`` on ``source``.

    ``options`` reach only extractors whose signature names them, such as
    AI Studio's ``expander`` and ``settle_delay``; the rest are dropped.
    """
    spec = get_spec(platform)
    accepted = inspect.signature(spec.extract).parameters
    ignored = sorted(name for name in options if name not in accepted)
    if ignored:
        LOGGER.debug("%s extractor ignores option(s): %s", spec.platform.value, ", ".join(ignored))
    LOGGER.debug("Dispatching to %s extractor", spec.platform.value)
    return spec.extract(source, **{k: v for k, v in options.items() if k in accepted})
