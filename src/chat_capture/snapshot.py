# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Load saved page snapshots (HTML or MHTML) from disk."""

from __future__ import annotations

import base64
import codecs
import logging
from email import policy
from email.message import Message
from email.parser import BytesParser
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from .exceptions import SnapshotError

LOGGER = logging.getLogger(__name__)

HTML_SUFFIXES = (".html", ".htm")
MHTML_SUFFIXES = (".mhtml", ".mht")

Resources = dict[str, tuple[str, bytes]]


# --------------------------------------------------------------------------- #
# MHTML parsing & in-memory resource embedding                                 #
# --------------------------------------------------------------------------- #


def _part_charset(part: Message, context: str) -> str:
    """Declared charset of a text part, US-ASCII when none is declared.

    See: https://tools.ietf.org/html/rfc2045#section-5.2
    """
    charset = part.get_content_charset()
    if not charset:
        LOGGER.debug("%s declares no charset, assuming us-ascii", context)
        return "us-ascii"
    try:
        codecs.lookup(charset)
    except LookupError as exc:
        raise SnapshotError(f"Invalid charset '{charset}' in {context}") from exc
    return charset


def _payload(part: Message, context: str) -> bytes:
    try:
        payload = part.get_payload(decode=True)
    except Exception as exc:
        raise SnapshotError(f"Failed to decode payload in {context}: {exc}") from exc
    if payload is None:
        return b""
    if not isinstance(payload, bytes):
        raise SnapshotError(f"Unexpected non-binary payload in {context}")
    return payload


def read_mhtml(path: Path) -> tuple[str, Resources]:
    """Return the first HTML document of an MHTML archive and its resources."""
    try:
        with path.open("rb") as handle:
            archive = BytesParser(policy=policy.default).parse(handle)
    except OSError:
        raise
    except Exception as exc:
        raise SnapshotError(f"MHTML parsing failed for {path}: {exc}") from exc

    html: str | None = None
    resources: Resources = {}
    for index, part in enumerate(archive.walk()):
        if part.is_multipart():
            continue
        context = f"{path.name} part {index}"
        content_type = (part.get_content_type() or "").lower()
        payload = _payload(part, context)

        if content_type == "text/html" and html is None:
            charset = _part_charset(part, context)
            try:
                html = payload.decode(charset)
            except UnicodeDecodeError as exc:
                raise SnapshotError(f"HTML part encoding error in {context}: {exc}") from exc
            LOGGER.info("Using %s as page HTML (%s, %d chars)", context, charset, len(html))
            continue

        content_id = (part.get("Content-ID") or "").strip().strip("<>").strip()
        location = (part.get("Content-Location") or "").strip()
        if content_id:
            resources[f"cid:{content_id}"] = (content_type, payload)
        if location:
            resources[location] = (content_type, payload)

    if html is None:
        raise SnapshotError(f"No text/html part found in {path}")
    LOGGER.debug("MHTML %s: %d embedded resource key(s)", path.name, len(resources))
    return html, resources


def _to_data_uri(mime: str, data: bytes) -> str:
    return "data:" + mime + ";base64," + base64.b64encode(data).decode("ascii")


def inline_images(html: str, resources: Resources) -> str:
    """Replace ``cid:`` and archived image URLs with ``data:`` URIs."""
    if not resources:
        return html
    soup = BeautifulSoup(html, "lxml")
    resolved = 0
    for image in soup.find_all("img"):
        if not isinstance(image, Tag):
            continue
        source = (image.get("src") or "").strip()
        if source not in resources:
            if source.startswith("cid:"):
                LOGGER.warning("Unresolved CID resource: %s", source)
            continue
        mime, data = resources[source]
        if not mime.startswith("image/"):
            continue
        image["src"] = _to_data_uri(mime, data)
        resolved += 1
    LOGGER.debug("Inlined %d image(s)", resolved)
    return str(soup)


def load_snapshot(path: Path) -> str:
    """Read a saved page and return its HTML.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        SnapshotError: unsupported suffix or undecodable content.
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    suffix = path.suffix.lower()
    if suffix in HTML_SUFFIXES:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise SnapshotError(f"{path} is not valid UTF-8: {exc}") from exc
    if suffix in MHTML_SUFFIXES:
        html, resources = read_mhtml(path)
        return inline_images(html, resources)
    raise SnapshotError(
        f"Unsupported file format: {suffix or '(none)'}. "
        f"Use one of {', '.join(HTML_SUFFIXES + MHTML_SUFFIXES)}"
    )
