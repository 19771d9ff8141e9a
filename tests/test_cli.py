# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for the CLI module."""

import json
from pathlib import Path

from typer.testing import CliRunner

from chat_capture.cli import _parse_log_level, app

runner = CliRunner()

PAGE = (
    "<html><head><title>Greeting - ChatGPT</title></head><body>"
    '<article data-turn-id="1" data-turn="user"><div class="user-message-bubble-color">'
    "hello gpt</div></article>"
    '<article data-turn-id="2" data-turn="assistant"><div data-message-author-role="assistant">'
    "<p>Hi!</p></div></article></body></html>"
)


def _write_page(tmp_path: Path) -> Path:
    path = tmp_path / "greeting.html"
    path.write_text(PAGE, encoding="utf-8")
    return path


def test_version_command() -> None:
    """Test the version command."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "chat-capture" in result.stdout


def test_help() -> None:
    """Test that help describes the tool."""
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "Extract AI chat conversations" in result.stdout


def test_platforms_command() -> None:
    """Test that every platform is listed."""
    result = runner.invoke(app, ["platforms"])
    assert result.exit_code == 0
    for name in ("chatgpt", "claude", "gemini", "grok", "kimi", "lechat", "llamacoder", "aistudio"):
        assert name in result.stdout


def test_extract_markdown_to_stdout(tmp_path: Path) -> None:
    """Test Markdown extraction printed to stdout."""
    result = runner.invoke(app, ["extract", str(_write_page(tmp_path)), "-p", "chatgpt"])
    assert result.exit_code == 0
    assert "# Greeting" in result.stdout
    assert "## User:" in result.stdout
    assert "hello gpt" in result.stdout


def test_extract_json_to_outdir(tmp_path: Path) -> None:
    """Test JSON extraction written to an output directory."""
    outdir = tmp_path / "out"
    result = runner.invoke(
        app,
        ["extract", str(_write_page(tmp_path)), "-p", "chatgpt", "-f", "json", "-o", str(outdir)],
    )
    assert result.exit_code == 0
    data = json.loads((outdir / "greeting.json").read_text(encoding="utf-8"))
    assert [m["type"] for m in data["messages"]] == ["prompt", "response"]
    assert data["metadata"]["model"] == "ChatGPT"


def test_extract_session_format(tmp_path: Path) -> None:
    """Test that the session format carries presentation fields."""
    result = runner.invoke(
        app, ["extract", str(_write_page(tmp_path)), "-p", "chatgpt", "-f", "session"]
    )
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["parserMode"] == "chatgpt-html"
    assert data["chatTitle"] == "Greeting"


def test_extract_failure_exits_nonzero(tmp_path: Path) -> None:
    """Test that a page without messages fails the run."""
    path = tmp_path / "empty.html"
    path.write_text("<p>nothing</p>", encoding="utf-8")
    result = runner.invoke(app, ["extract", str(path), "-p", "grok"])
    assert result.exit_code == 1


def test_unknown_platform_is_rejected(tmp_path: Path) -> None:
    """Test that only registered platforms are accepted."""
    result = runner.invoke(app, ["extract", str(_write_page(tmp_path)), "-p", "myspace"])
    assert result.exit_code != 0


def test_invalid_log_level(tmp_path: Path) -> None:
    """Test that an invalid log level is reported."""
    result = runner.invoke(
        app, ["extract", str(_write_page(tmp_path)), "-p", "chatgpt", "-l", "LOUD"]
    )
    assert result.exit_code == 1
    assert "Invalid log level" in result.stdout


def test_parse_log_level() -> None:
    """Test log level parsing."""
    assert _parse_log_level("debug") == 10
    assert _parse_log_level("25") == 25
