# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""DOM subtree to Markdown conversion shared by every platform extractor."""

from __future__ import annotations

import copy
import logging
import re
from collections.abc import Callable, Sequence

from bs4 import BeautifulSoup, Tag
from markdownify import (
    MarkdownConverter,
    should_remove_whitespace_inside,
    should_remove_whitespace_outside,
)

from .dom import class_tokens, has_class

LOGGER = logging.getLogger(__name__)

WidgetRule = Callable[[Tag], None]

# Pre-rendered Markdown is carried through the tree in this element
MARKDOWN_TAG = "md-block"
MARKDOWN_ATTR = "data-markdown"

CHROME_SELECTOR = ", ".join(
    [
        "button",
        "svg",
        "mat-icon",
        "script",
        "style",
        "noscript",
        "iframe",
        "object",
        "embed",
        "template",
        '[aria-label*="Copy"]',
        '[aria-label*="Retry"]',
        '[aria-label*="Edit"]',
        '[aria-label*="Delete"]',
        '[data-testid*="action-bar"]',
    ]
)

_UNSAFE_SCHEME = re.compile(r"^(?:javascript|data|vbscript|file|about):", re.IGNORECASE)
_SAFE_SCHEME = re.compile(r"^(?:https?|mailto):", re.IGNORECASE)
_ANY_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*:", re.IGNORECASE)
_INLINE_IMAGE = re.compile(r"^data:image/[a-z0-9.+-]+;base64,", re.IGNORECASE)
_IGNORED_CHARS = re.compile(r"[\x00-\x20\x7f]")
_BLANK_LINES = re.compile(r"\n{3,}")
_PARAGRAPH_BREAK = re.compile(r"[\t \r]*\n[\t \r]*\n[\t \r\n]*")
_NEWLINE_RUN = re.compile(r"[\t \r\n]*[\r\n][\t \r\n]*")
_SPACE_RUN = re.compile(r"[\t ]+")

_FACTORY = BeautifulSoup("", "lxml")


# --------------------------------------------------------------------------- #
# URL sanitization                                                            #
# --------------------------------------------------------------------------- #


def sanitize_url(url: object) -> str:
    """Return ``url`` trimmed if it is safe to render as a link, else ``""``.

    ``http:``, ``https:``, ``mailto:`` and schemeless (relative) values are
    kept. Every other scheme is refused, ``javascript:``, ``data:``,
    ``vbscript:``, ``file:`` and ``about:`` among them. Control characters
    and whitespace a browser would ignore inside the scheme do not help an
    attacker here.
    """
    if not isinstance(url, str):
        return ""
    candidate = url.strip()
    if not candidate:
        return ""
    bare = _IGNORED_CHARS.sub("", candidate)
    if _UNSAFE_SCHEME.match(bare):
        LOGGER.debug("Refusing unsafe URL scheme: %.40s", candidate)
        return ""
    if _ANY_SCHEME.match(bare) and not _SAFE_SCHEME.match(bare):
        LOGGER.debug("Refusing unknown URL scheme: %.40s", candidate)
        return ""
    return candidate


def sanitize_image_src(src: object) -> str:
    """Like :func:`sanitize_url` but also keeps inline base64 images."""
    if isinstance(src, str) and _INLINE_IMAGE.match(src.strip()):
        return src.strip()
    return sanitize_url(src)


# --------------------------------------------------------------------------- #
# Building blocks for widget rules                                            #
# --------------------------------------------------------------------------- #


def markdown_node(markdown: str) -> Tag:
    """Element that renders as exactly ``markdown`` on its own block."""
    node = _FACTORY.new_tag(MARKDOWN_TAG)
    node[MARKDOWN_ATTR] = markdown
    return node


def replace_with_markdown(node: Tag, markdown: str) -> bool:
    """Swap ``node`` for a pre-rendered Markdown block.

    Returns ``False`` when the node already left the tree because an
    enclosing widget was replaced first.
    """
    if node.decomposed or node.parent is None:
        return False
    node.replace_with(markdown_node(markdown))
    return True


def _is_markdown_node(node: object) -> bool:
    return isinstance(node, Tag) and node.name == MARKDOWN_TAG


def fence(code: str, language: str = "") -> str:
    return f"```{language}\n{code}\n```"


def code_language(code: Tag | None) -> str:
    if code is None:
        return ""
    for token in class_tokens(code):
        if token.startswith("language-") and len(token) > len("language-"):
            return token[len("language-") :]
    return ""


def _trim_code(text: str) -> str:
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines).rstrip()


# --------------------------------------------------------------------------- #
# Markdown rendering (markdownify)                                            #
# --------------------------------------------------------------------------- #


class ChatMarkdownConverter(MarkdownConverter):
    """markdownify converter tuned for chat transcripts.

    Code fences take their body from the ``code`` element only, links and
    images are sanitized, and nested lists fold into their parent item.
    """

    def process_text(self, el, parent_tags=None):
        """Normalize whitespace like markdownify, keeping blank lines as paragraph breaks.

        Markdown fed back in as text therefore converts to itself.
        """
        if parent_tags is None:
            parent_tags = set()
        text = str(el) or ""
        if "pre" not in parent_tags:
            text = "\n\n".join(
                _SPACE_RUN.sub(" ", _NEWLINE_RUN.sub("\n", part))
                for part in _PARAGRAPH_BREAK.split(text)
            )
        if "_noformat" not in parent_tags:
            text = self.escape(text, parent_tags)

        previous, following = el.previous_sibling, el.next_sibling
        if (
            should_remove_whitespace_outside(previous)
            or (should_remove_whitespace_inside(el.parent) and not previous)
            or _is_markdown_node(previous)
        ):
            text = text.lstrip(" \t\r\n")
        if (
            should_remove_whitespace_outside(following)
            or (should_remove_whitespace_inside(el.parent) and not following)
            or _is_markdown_node(following)
        ):
            text = text.rstrip()
        return text

    def convert_md_block(self, el, text, parent_tags):
        markdown = el.get(MARKDOWN_ATTR) or ""
        if not markdown:
            return ""
        if "_inline" in parent_tags:
            return " %s " % " ".join(markdown.split())
        return "\n\n%s\n\n" % markdown

    def convert_pre(self, el, text, parent_tags):
        code = el.find("code")
        source = _trim_code((code or el).get_text())
        if not source:
            return ""
        return "\n\n%s\n\n" % fence(source, code_language(code))

    def convert_a(self, el, text, parent_tags):
        if "_noformat" in parent_tags:
            return text
        href = sanitize_url(el.get("href"))
        label = " ".join((text or "").split())
        if not href:
            return label
        return "[%s](%s)" % (label or href, href)

    def convert_img(self, el, text, parent_tags):
        alt = el.get("alt") or ""
        src = sanitize_image_src(el.get("src"))
        if not src or "_inline" in parent_tags:
            return alt
        return "![%s](%s)" % (alt, src)

    def convert_list(self, el, text, parent_tags):
        if "li" in parent_tags:
            return " %s " % text.strip()
        text = text.strip("\n")
        return "\n\n%s\n\n" % text if text else ""

    convert_ul = convert_list
    convert_ol = convert_list

    def convert_li(self, el, text, parent_tags):
        text = " ".join((text or "").split())
        if not text:
            return ""
        if "li" in parent_tags:
            return "%s " % text
        parent = el.parent
        if parent is not None and parent.name == "ol":
            bullet = "%d." % (1 + len(el.find_previous_siblings("li")))
        else:
            bullet = "*"
        return "%s %s\n" % (bullet, text)


_CONVERTER = ChatMarkdownConverter(
    autolinks=False,
    bullets="*",
    escape_asterisks=False,
    escape_underscores=False,
    heading_style="ATX",
    table_infer_header=True,
)


# --------------------------------------------------------------------------- #
# Structural passes                                                           #
# --------------------------------------------------------------------------- #


def _code_header(block: Tag) -> Tag | None:
    """The ``.font-mono`` language header directly above a Claude code block."""
    for node in (block, block.parent):
        if node is None:
            continue
        sibling = node.find_previous_sibling(True)
        if sibling is None:
            continue
        if has_class(sibling, "font-mono"):
            return sibling
        label = sibling.select_one(".font-mono")
        if label is not None:
            return label
    return None


def _normalize_code_blocks(root: Tag) -> None:
    """Turn site-specific code widgets into fenced blocks."""
    # Claude: label in a .font-mono header next to .code-block__code
    for block in root.select(".code-block__code"):
        if block.decomposed:
            continue
        code = block.find("code")
        source = _trim_code((code or block).get_text())
        if not source:
            continue
        header = _code_header(block)
        label = header.get_text(strip=True) if header is not None else ""
        if header is not None:
            header.decompose()
        replace_with_markdown(block, fence(source, code_language(code) or label))

    # LeChat: div[data-testid=code-block] wrapping a bare code element
    for block in root.select('div[data-testid="code-block"]'):
        if block.decomposed:
            continue
        code = block.find("code")
        if code is None:
            continue
        source = _trim_code(code.get_text())
        if source:
            replace_with_markdown(block, fence(source, code_language(code)))


def _strip_chrome(root: Tag) -> None:
    for node in root.select(CHROME_SELECTOR):
        if node.decomposed or node.parent is None:
            continue
        node.decompose()


def collapse_blank_lines(markdown: str) -> str:
    return _BLANK_LINES.sub("\n\n", markdown).strip()


def html_to_markdown(node: Tag | None, rules: Sequence[WidgetRule] = ()) -> str:
    """Render a DOM subtree as trimmed Markdown without touching the original.

    ``rules`` are platform widget passes; they run on the private copy
    before code normalization, chrome removal and the generic conversion.
    """
    if node is None:
        return ""
    clone = copy.copy(node)
    for rule in rules:
        rule(clone)
    _normalize_code_blocks(clone)
    _strip_chrome(clone)
    return collapse_blank_lines(_CONVERTER.process_tag(clone, parent_tags=set()))
