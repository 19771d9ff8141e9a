# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Llamacoder: white bubbles are prompts, ``.prose`` blocks are responses."""

from __future__ import annotations

import logging

from bs4 import Tag

from ..dom import as_document, has_class, top_level
from ..exceptions import MissingContainer
from ..models import ChatMessage
from ..sequencing import TurnSequencer
from ..transducer import html_to_markdown
from ..widgets import LLAMACODER_RULES
from .base import Platform, require_messages

LOGGER = logging.getLogger(__name__)

CONTAINER_SELECTOR = ".mx-auto.flex.w-full.max-w-prose.flex-col"
USER_BUBBLE_SELECTOR = ".whitespace-pre-wrap.rounded.bg-white"


def _plain_text(node: Tag) -> str:
    return node.get_text().strip()


def _from_container(document: Tag, sequencer: TurnSequencer) -> None:
    container = document.select_one(CONTAINER_SELECTOR)
    if container is None:
        raise MissingContainer(CONTAINER_SELECTOR)
    for child in container.find_all(True, recursive=False):
        bubble = child.select_one(USER_BUBBLE_SELECTOR)
        if bubble is not None:
            sequencer.prompt(_plain_text(bubble))
        elif has_class(child, "prose") or child.select_one('[class*="prose"]') is not None:
            # A model turn may hold several prose blocks and file badges
            sequencer.response(html_to_markdown(child, LLAMACODER_RULES))


def _from_global_search(document: Tag, sequencer: TurnSequencer) -> None:
    for node in top_level(document.select(f"{USER_BUBBLE_SELECTOR}, .prose")):
        if has_class(node, "whitespace-pre-wrap"):
            sequencer.prompt(_plain_text(node))
        else:
            sequencer.response(html_to_markdown(node, LLAMACODER_RULES))


def extract(source: str | Tag) -> list[ChatMessage]:
    document = as_document(source)
    sequencer = TurnSequencer(merge_responses=False)
    try:
        _from_container(document, sequencer)
    except MissingContainer as exc:
        LOGGER.warning("%s; falling back to a page-wide search", exc)
        _from_global_search(document, sequencer)
    return require_messages(
        Platform.LLAMACODER,
        sequencer.messages,
        "paste the full page source or at least the chat container",
    )
