# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for the capture pipeline."""

import pytest

from chat_capture import capture
from chat_capture.exceptions import NoMessagesFound, UnsupportedPlatform
from chat_capture.models import ParserMode


def _chatgpt_page(prompt="hello gpt", title=""):
    head = f"<head><title>{title}</title></head>" if title else ""
    return (
        f"<html>{head}<body>"
        '<article data-turn-id="1" data-turn="user"><div class="user-message-bubble-color">'
        f"{prompt}</div></article>"
        '<article data-turn-id="2" data-turn="assistant"><div data-message-author-role="assistant">'
        "<p>Hi!</p></div></article></body></html>"
    )


def test_capture_builds_session() -> None:
    """Test that a capture carries messages, metadata and presentation fields."""
    html = _chatgpt_page(title="Trip planning - ChatGPT")
    session = capture(
        html, "chatgpt", source_url="https://chatgpt.com/c/1", date="2025-01-02T03:04:05.000Z"
    )

    assert session.chat_title == "Trip planning"
    assert session.name == "Trip planning"
    assert session.ai_name == "ChatGPT"
    assert session.parser_mode is ParserMode.CHATGPT_HTML
    assert session.input_content == html
    assert session.date == "2025-01-02T03:04:05.000Z"
    assert [m.content for m in session.chat_data.messages] == ["hello gpt", "Hi!"]

    metadata = session.chat_data.metadata
    assert metadata == session.metadata
    assert metadata.model == "ChatGPT"
    assert metadata.source_url == "https://chatgpt.com/c/1"
    assert metadata.import_type == "extension"


def test_title_falls_back_to_first_prompt() -> None:
    """Test that ignored page titles give way to the first prompt."""
    session = capture(_chatgpt_page(prompt="x" * 60, title="ChatGPT"), "chatgpt")
    assert session.chat_title == "x" * 50 + "..."


def test_title_selector_wins() -> None:
    """Test that a platform title element beats the page title."""
    html = (
        "<html><head><title>Ignored - Claude</title></head><body>"
        '<button data-testid="chat-title-button">Renaming files</button>'
        '<div data-testid="user-message"><p>Hi</p></div>'
        '<div class="font-claude-response"><p>Hello</p></div></body></html>'
    )
    assert capture(html, "claude").chat_title == "Renaming files"


def test_default_title_and_tags() -> None:
    """Test the platform default title when no prompt exists."""
    html = (
        '<div class="turn-container"><div class="turn output"><p>Only an answer</p></div></div>'
    )
    session = capture(html, "aistudio", settle_delay=0)
    assert session.chat_title == "AI Studio Chat"
    assert session.metadata.tags == ["AI Studio"]


def test_long_titles_are_truncated() -> None:
    """Test the title length cap."""
    session = capture(_chatgpt_page(title="T" * 150), "chatgpt")
    assert session.chat_title == "T" * 100 + "..."


def test_empty_conversation_raises_for_every_platform() -> None:
    """Test that a capture never yields an empty conversation."""
    with pytest.raises(NoMessagesFound):
        capture("<div>nothing</div>", "chatgpt")


def test_unknown_platform() -> None:
    """Test that unknown platforms are a value error."""
    with pytest.raises(UnsupportedPlatform):
        capture("<p>x</p>", "friendster")
    with pytest.raises(ValueError):
        capture("<p>x</p>", "friendster")
