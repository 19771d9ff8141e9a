# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later
"""Tests for loading saved page snapshots."""

from pathlib import Path

import pytest

from chat_capture.exceptions import SnapshotError
from chat_capture.snapshot import load_snapshot, read_mhtml

MHTML = """MIME-Version: 1.0
Content-Type: multipart/related; boundary="BOUNDARY"

--BOUNDARY
Content-Type: text/html; charset="utf-8"
Content-Location: https://example.com/chat

<html><body><img src="cid:img1"><p>Hi</p></body></html>
--BOUNDARY
Content-Type: image/png
Content-Transfer-Encoding: base64
Content-ID: <img1>

iVBORw0KGgo=
--BOUNDARY--
"""


def test_html_file(tmp_path: Path) -> None:
    """Test that HTML files are read as UTF-8."""
    path = tmp_path / "chat.html"
    path.write_text("<p>héllo</p>", encoding="utf-8")
    assert load_snapshot(path) == "<p>héllo</p>"


def test_mhtml_file_inlines_images(tmp_path: Path) -> None:
    """Test that MHTML archives yield their HTML with embedded images."""
    path = tmp_path / "chat.mhtml"
    path.write_text(MHTML, encoding="ascii")

    html, resources = read_mhtml(path)
    assert "<p>Hi</p>" in html
    assert "cid:img1" in resources

    loaded = load_snapshot(path)
    assert 'src="data:image/png;base64,iVBORw0KGgo="' in loaded


def test_mhtml_without_html_part(tmp_path: Path) -> None:
    """Test that archives without an HTML part are rejected."""
    path = tmp_path / "chat.mht"
    path.write_text(
        'MIME-Version: 1.0\nContent-Type: multipart/related; boundary="B"\n\n'
        "--B\nContent-Type: text/plain\n\nhello\n--B--\n",
        encoding="ascii",
    )
    with pytest.raises(SnapshotError, match="No text/html part"):
        load_snapshot(path)


def test_unsupported_file_format(tmp_path: Path) -> None:
    """Test that unsupported file formats raise SnapshotError."""
    path = tmp_path / "chat.pdf"
    path.write_bytes(b"%PDF-1.4")
    with pytest.raises(SnapshotError, match="Unsupported file format"):
        load_snapshot(path)


def test_file_not_found() -> None:
    """Test that missing files raise FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_snapshot(Path("non_existent_file.html"))
