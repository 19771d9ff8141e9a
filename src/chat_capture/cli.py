# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Command-line interface for chat-capture."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .capture import capture
from .exceptions import ExtractionError, OversizeSession, SnapshotError
from .platforms import REGISTRY, Platform
from .serializers import (
    chat_data_to_json,
    ensure_within_limit,
    session_to_json,
    session_to_markdown,
)
from .snapshot import load_snapshot

LOGGER = logging.getLogger(__name__)

app = typer.Typer(
    name="chat-capture",
    help="Extract AI chat conversations from saved pages into Markdown or JSON.",
    no_args_is_help=True,
)

console = Console()


class OutputFormat(str, enum.Enum):
    MARKDOWN = "markdown"
    JSON = "json"
    SESSION = "session"


_SUFFIXES = {OutputFormat.MARKDOWN: ".md", OutputFormat.JSON: ".json", OutputFormat.SESSION: ".json"}


class _WarningTracker(logging.Handler):
    """Handler to track if any warnings were logged."""

    def __init__(self) -> None:
        super().__init__()
        self.warnings_shown = False

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno >= logging.WARNING:
            self.warnings_shown = True


_warning_tracker = _WarningTracker()


def _parse_log_level(log_level_str: str) -> int:
    """Parse a log level given as a name (``DEBUG``) or non-negative integer.

    Raises:
        ValueError: If the log level is invalid
    """
    try:
        level_int = int(log_level_str)
    except ValueError:
        level_int = None
    if level_int is not None:
        if level_int < 0:
            raise ValueError("Log level must be non-negative")
        return level_int

    level_map = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
    }
    level_name = log_level_str.upper()
    if level_name in level_map:
        return level_map[level_name]
    raise ValueError(
        f"Invalid log level '{log_level_str}'. "
        f"Use log level names (CRITICAL, ERROR, WARNING, INFO, DEBUG) "
        f"or non-negative integers."
    )


def _setup_logging(verbose: int, quiet: int, log_level: str | None) -> int:
    """Configure the root logger; each -v/-q moves the level by 10 points.

    Returns:
        The final log level that was set
    """
    base_level = _parse_log_level(log_level) if log_level is not None else logging.WARNING
    level = max(0, base_level - (verbose - quiet) * 10)

    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)
    logging.getLogger().addHandler(_warning_tracker)
    LOGGER.info("Log level set to %d (%s)", level, logging.getLevelName(level))
    return level


def _render(path: Path, platform: Platform, output: OutputFormat, source_url: str) -> str:
    session = capture(load_snapshot(path), platform, source_url=source_url)
    if output is OutputFormat.MARKDOWN:
        return session_to_markdown(session)
    if output is OutputFormat.JSON:
        return chat_data_to_json(session.chat_data)
    payload = session_to_json(session)
    try:
        return ensure_within_limit(payload)
    except OversizeSession as exc:
        LOGGER.warning("%s: %s Writing conversation data only.", path.name, exc)
        return chat_data_to_json(session.chat_data)


@app.command()
def extract(
    files: List[Path] = typer.Argument(..., help="Saved pages (.html, .htm, .mhtml, .mht)"),
    platform: Platform = typer.Option(..., "-p", "--platform", help="Site the pages come from"),
    output: OutputFormat = typer.Option(
        OutputFormat.MARKDOWN, "-f", "--format", help="Output format"
    ),
    outdir: Optional[Path] = typer.Option(
        None, "-o", "--outdir", help="Write one file per input here instead of stdout"
    ),
    source_url: str = typer.Option("", "--source-url", help="Recorded as the capture source"),
    verbose: int = typer.Option(
        0, "-v", "--verbose", count=True, help="Increase verbosity (-v: INFO, -vv: DEBUG)."
    ),
    quiet: int = typer.Option(
        0, "-q", "--quiet", count=True, help="Decrease verbosity (-q: ERROR, -qq: CRITICAL)."
    ),
    log_level: Optional[str] = typer.Option(
        None, "-l", "--log-level", help="Explicit log level name or non-negative integer."
    ),
) -> None:
    """Extract conversations from saved chat pages."""
    try:
        level = _setup_logging(verbose, quiet, log_level)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(1)

    if outdir is not None:
        outdir.mkdir(exist_ok=True, parents=True)

    success_count = 0
    for file_path in files:
        try:
            rendered = _render(file_path, platform, output, source_url)
        except (ExtractionError, SnapshotError, FileNotFoundError) as exc:
            LOGGER.error("%s: %s", file_path, exc)
            continue

        success_count += 1
        if outdir is None:
            typer.echo(rendered)
            continue
        target = outdir / f"{file_path.stem}{_SUFFIXES[output]}"
        target.write_text(rendered, encoding="utf-8")
        LOGGER.info("Output: %s", target)

    LOGGER.info("Successfully extracted %d/%d file(s)", success_count, len(files))
    if _warning_tracker.warnings_shown and level > logging.DEBUG:
        LOGGER.info("Issues detected. For detailed diagnostics rerun with -vv or -l DEBUG.")
    if success_count < len(files):
        raise typer.Exit(1)


@app.command()
def platforms() -> None:
    """List supported platforms."""
    table = Table(title="Supported platforms")
    table.add_column("Platform")
    table.add_column("Parser mode")
    table.add_column("Model")
    for spec in REGISTRY.values():
        table.add_row(spec.platform.value, spec.parser_mode.value, spec.model)
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"chat-capture {__version__}")


if __name__ == "__main__":
    app()
