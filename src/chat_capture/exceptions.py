# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Error types raised while capturing a conversation."""

from __future__ import annotations


class ExtractionError(RuntimeError):
    """Base class for all capture failures."""


class NoMessagesFound(ExtractionError):
    """A full extraction pass produced zero messages."""

    def __init__(self, platform: str, detail: str | None = None) -> None:
        self.platform = platform
        message = f"No messages found for platform '{platform}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MissingContainer(ExtractionError):
    """The root container an extractor expects is absent from the document."""

    def __init__(self, selector: str) -> None:
        self.selector = selector
        super().__init__(f"Expected container not found: {selector}")


class OversizeSession(ExtractionError):
    """A serialized payload is larger than the persistence bridge accepts."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"Serialized session is {size} bytes, above the {limit} byte limit; "
            f"export it as a file instead."
        )


class UnsupportedPlatform(ExtractionError, ValueError):
    """No extractor is registered under the requested name."""


class SnapshotError(ValueError):
    """A saved page snapshot could not be read or decoded."""
