# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for the turn sequencing state machine."""

from chat_capture.models import ChatMessageType
from chat_capture.sequencing import TurnSequencer, TurnState


def _pairs(sequencer):
    return [(m.type, m.content) for m in sequencer.messages]


def test_consecutive_responses_merge() -> None:
    """Test that responses without a boundary become one message."""
    sequencer = TurnSequencer()
    sequencer.prompt("Q")
    sequencer.response("A")
    sequencer.response("B")
    assert _pairs(sequencer) == [
        (ChatMessageType.PROMPT, "Q"),
        (ChatMessageType.RESPONSE, "A\n\nB"),
    ]
    assert sequencer.state is TurnState.RESPONSE_OPEN


def test_boundary_splits_responses() -> None:
    """Test that a boundary starts a new response."""
    sequencer = TurnSequencer()
    sequencer.response("A")
    sequencer.boundary()
    assert sequencer.state is TurnState.BOUNDARY_PENDING
    sequencer.response("B")
    assert _pairs(sequencer) == [
        (ChatMessageType.RESPONSE, "A"),
        (ChatMessageType.RESPONSE, "B"),
    ]


def test_prompt_closes_response() -> None:
    """Test that a prompt between responses keeps them apart."""
    sequencer = TurnSequencer()
    sequencer.response("A")
    sequencer.prompt("Q")
    sequencer.response("B")
    assert len(sequencer) == 3


def test_prompts_never_merge() -> None:
    """Test that consecutive prompts stay separate messages."""
    sequencer = TurnSequencer()
    sequencer.prompt("one")
    sequencer.prompt("two")
    assert len(sequencer) == 2
    assert sequencer.state is TurnState.PROMPT_OPEN


def test_empty_content_is_ignored() -> None:
    """Test that empty fragments change neither messages nor state."""
    sequencer = TurnSequencer()
    assert sequencer.prompt("   ") is False
    assert sequencer.response("") is False
    assert sequencer.state is TurnState.EMPTY
    assert sequencer.messages == []


def test_merge_disabled() -> None:
    """Test the one-node-per-message policy."""
    sequencer = TurnSequencer(merge_responses=False)
    sequencer.add(ChatMessageType.RESPONSE, "A")
    sequencer.add(ChatMessageType.RESPONSE, "B")
    assert [m.content for m in sequencer.messages] == ["A", "B"]


def test_messages_is_a_copy() -> None:
    """Test that callers cannot alter the sequencer's list."""
    sequencer = TurnSequencer()
    sequencer.prompt("Q")
    sequencer.messages.clear()
    assert len(sequencer) == 1
