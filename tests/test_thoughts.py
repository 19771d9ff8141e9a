# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for reasoning sentinels."""

from chat_capture import thoughts


def test_wrap_and_compose() -> None:
    """Test that the thought is placed before the answer."""
    assert thoughts.wrap_thought("  ") == ""
    assert thoughts.wrap_thought("hmm") == "<thought>\nhmm\n</thought>"
    assert thoughts.compose("hmm", "answer") == "<thought>\nhmm\n</thought>\n\nanswer"
    assert thoughts.compose("", "answer") == "answer"
    assert thoughts.compose("hmm", "") == "<thought>\nhmm\n</thought>"


def test_encode_decode_are_inverse() -> None:
    """Test that entity encoding round trips sentinel text."""
    text = "<thought>a & b</thought>"
    assert thoughts.encode(text) == "&lt;thought&gt;a &amp; b&lt;/thought&gt;"
    assert thoughts.decode(thoughts.encode(text)) == text


def test_find_encoded_drops_inner_markup() -> None:
    """Test that encoded thoughts are found and decoded."""
    markup = "<p>&lt;thought&gt;step <em>one</em> &amp; two&lt;/thought&gt;</p><p>Answer</p>"
    assert thoughts.find_encoded(markup) == ["step  one  & two"]


def test_strip_and_split() -> None:
    """Test separating thoughts from answers."""
    content = "<thought>\nhmm\n</thought>\n\nanswer"
    assert thoughts.has_thought(content)
    assert thoughts.strip_thoughts(content) == "answer"
    assert list(thoughts.split(content)) == [(True, "hmm"), (False, "answer")]
    assert list(thoughts.split("plain")) == [(False, "plain")]


def test_encoded_opening_sentinel() -> None:
    """Test detection of entity-encoded sentinels in page markup."""
    assert thoughts.ENCODED_OPEN_TAG == thoughts.encode(thoughts.OPEN_TAG)
    assert thoughts.has_encoded_thought("<p>&lt;thought&gt;x&lt;/thought&gt;</p>")
    assert not thoughts.has_encoded_thought("<p><thought>x</thought></p>")
    assert not thoughts.has_encoded_thought("")


def test_unwrap() -> None:
    """Test that existing sentinels are removed before rewrapping."""
    assert thoughts.unwrap("<thought>\nx\n</thought>") == "x"
