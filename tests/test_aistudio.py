# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for the Google AI Studio extractor."""

from chat_capture import config
from chat_capture.dom import parse_document
from chat_capture.models import ChatMessageType
from chat_capture.platforms import aistudio
from chat_capture.platforms.aistudio import NodeKind, classify

PROMPT = ChatMessageType.PROMPT
RESPONSE = ChatMessageType.RESPONSE


def _turn(kind, body):
    return (
        f'<div class="turn {kind}"><ms-console-turn><ms-cmark-node>{body}'
        "</ms-cmark-node></ms-console-turn></div>"
    )


def _page(*parts):
    return '<div class="turn-container">' + "".join(parts) + "</div>"


def _pairs(messages):
    return [(m.type, m.content) for m in messages]


COLLAPSED_THOUGHT = (
    '<div class="turn output"><ms-expandable-turn><div class="container">'
    '<div class="header">Thoughts</div><div class="content"></div></div></ms-expandable-turn>'
    "<ms-console-turn><ms-cmark-node><p>Part A</p></ms-cmark-node></ms-console-turn></div>"
)
EXPANDED_THOUGHT = COLLAPSED_THOUGHT.replace(
    '<div class="container">', '<div class="container expanded">'
).replace('<div class="content"></div>', '<div class="content"><p>Deep thought</p></div>')


def test_classify() -> None:
    """Test node classification of turn container children."""
    document = parse_document(
        '<mat-divider></mat-divider><div class="section-divider"></div>'
        '<div class="turn-header"></div><div class="turn input"></div>'
        '<div class="turn output"></div><div class="spacer"></div>'
    )
    kinds = [classify(node) for node in document.body.find_all(True, recursive=False)]
    assert kinds == [
        NodeKind.DIVIDER,
        NodeKind.DIVIDER,
        NodeKind.HEADER,
        NodeKind.INPUT,
        NodeKind.OUTPUT,
        NodeKind.OTHER,
    ]


def test_consecutive_outputs_merge() -> None:
    """Test that output turns without a divider form one response."""
    html = _page(
        _turn("input", "<p>Question</p>"),
        _turn("output", "<p>Part A</p>"),
        _turn("output", "<p>Part B</p>"),
    )
    assert _pairs(aistudio.extract(html)) == [
        (PROMPT, "Question"),
        (RESPONSE, "Part A\n\nPart B"),
    ]


def test_divider_separates_outputs() -> None:
    """Test that a divider starts a new response."""
    html = _page(
        _turn("input", "<p>Question</p>"),
        _turn("output", "<p>Part A</p>"),
        "<mat-divider></mat-divider>",
        _turn("output", "<p>Part B</p>"),
    )
    assert _pairs(aistudio.extract(html)) == [
        (PROMPT, "Question"),
        (RESPONSE, "Part A"),
        (RESPONSE, "Part B"),
    ]


def test_turn_header_separates_outputs() -> None:
    """Test that a turn header starts a new response."""
    html = _page(
        _turn("output", "<p>Part A</p>"),
        '<div class="turn-header">Model</div>',
        _turn("output", "<p>Part B</p>"),
    )
    assert len(aistudio.extract(html)) == 2


def test_wrapped_turns_are_found() -> None:
    """Test that turns nested in wrapper elements are still sequenced."""
    html = _page(
        '<div class="virtual-scroll">',
        _turn("input", "<p>Question</p>"),
        "</div>",
        _turn("output", "<p>Answer</p>"),
    )
    assert _pairs(aistudio.extract(html)) == [(PROMPT, "Question"), (RESPONSE, "Answer")]


def test_collapsed_thought_without_expander() -> None:
    """Test that an unexpanded panel contributes no thought and no chrome."""
    html = _page(_turn("input", "<p>Q</p>"), COLLAPSED_THOUGHT)
    assert _pairs(aistudio.extract(html)) == [(PROMPT, "Q"), (RESPONSE, "Part A")]


def test_expander_snapshot_is_read(monkeypatch) -> None:
    """Test that the expander sees collapsed headers and its snapshot is used."""
    sleeps = []
    monkeypatch.setattr(aistudio.time, "sleep", sleeps.append)
    seen = []

    def expander(headers):
        seen.extend(header.get_text() for header in headers)
        return _page(_turn("input", "<p>Q</p>"), EXPANDED_THOUGHT)

    html = _page(_turn("input", "<p>Q</p>"), COLLAPSED_THOUGHT)
    messages = aistudio.extract(html, expander=expander, settle_delay=0.25)

    assert seen == ["Thoughts"]
    assert sleeps == [0.25]
    assert _pairs(messages) == [
        (PROMPT, "Q"),
        (RESPONSE, "<thought>\nDeep thought\n</thought>\n\nPart A"),
    ]


def test_expander_uses_configured_delay(monkeypatch) -> None:
    """Test that the settle delay defaults to the configured value."""
    sleeps = []
    monkeypatch.setattr(aistudio.time, "sleep", sleeps.append)
    monkeypatch.setattr(config, "THOUGHT_SETTLE_DELAY", 0.5)

    html = _page(_turn("input", "<p>Q</p>"), COLLAPSED_THOUGHT)
    aistudio.extract(html, expander=lambda headers: None)
    assert sleeps == [0.5]


def test_expander_not_called_without_collapsed_panels() -> None:
    """Test that nothing is expanded when every panel is already open."""
    calls = []
    html = _page(_turn("input", "<p>Q</p>"), EXPANDED_THOUGHT)
    messages = aistudio.extract(html, expander=calls.append, settle_delay=0)
    assert calls == []
    assert messages[1].content.startswith("<thought>\nDeep thought\n</thought>")


def test_chat_turn_layout_fallback() -> None:
    """Test the ms-chat-turn layout used when no turn container exists."""
    html = (
        '<ms-chat-turn><div class="user-prompt-container"><p>Old question</p></div></ms-chat-turn>'
        "<ms-chat-turn><ms-thought-chunk><p>musing</p></ms-thought-chunk>"
        '<div class="model-prompt-container"><p>Old answer</p></div></ms-chat-turn>'
    )
    assert _pairs(aistudio.extract(html)) == [
        (PROMPT, "Old question"),
        (RESPONSE, "<thought>\nmusing\n</thought>\n\nOld answer"),
    ]


def test_output_widgets_are_rendered() -> None:
    """Test that rich output widgets survive inside a response."""
    html = _page(
        _turn("input", "<p>Make a site</p>"),
        '<div class="turn output"><p>Done</p><ms-console-generation-table>'
        '<span class="gt-path">index.html</span></ms-console-generation-table></div>',
    )
    messages = aistudio.extract(html)
    assert messages[1].content == "Done\n\n### Generated Files\n\n* index.html"
