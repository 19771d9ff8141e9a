# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Rich widget rules applied before generic Markdown conversion.

Each rule receives the private copy of the subtree being converted and
replaces every widget it recognizes with one pre-rendered Markdown block.
"""

from __future__ import annotations

import logging

from bs4 import Tag

from .dom import closest, text_of, top_level
from .thoughts import wrap_thought
from .transducer import WidgetRule, html_to_markdown, markdown_node, replace_with_markdown

LOGGER = logging.getLogger(__name__)


def _quote(title: str, lines: list[str] | None = None) -> str:
    return "\n".join([f"> {title}"] + [f"> {line}" for line in lines or []])


def _bullets(items: list[str]) -> str:
    return "\n".join(f"* {item}" for item in items)


def _texts(root: Tag, selector: str) -> list[str]:
    return [text for text in (text_of(node) for node in root.select(selector)) if text]


# --------------------------------------------------------------------------- #
# Claude                                                                      #
# --------------------------------------------------------------------------- #

_CLAUDE_TOOL_TRIGGERS = ("viewed memory edits", "used ", "results", "presented")
_CLAUDE_ACTION_TRIGGERS = ("creating", "running", "reading", "analyzing", "executing", "presented")


def claude_thought_blocks(root: Tag) -> None:
    """Collapsible "Thought process" panels become sentinel-wrapped thoughts."""
    for button in root.select("button"):
        label = text_of(button).lower()
        if "thought process" not in label and "extra thought" not in label:
            continue
        container = closest(button, ".border-border-300.rounded-lg")
        if container is None:
            continue
        body = container.select_one(".font-claude-response, .standard-markdown")
        thought = html_to_markdown(body)
        lowered = thought.lower()
        if not thought or "thought process" in lowered or "viewed memory" in lowered:
            continue
        replace_with_markdown(container, wrap_thought(thought))


def claude_tool_calls(root: Tag) -> None:
    for button in root.select("button"):
        if button.decomposed or button.parent is None:
            continue
        label = text_of(button)
        if not any(trigger in label.lower() for trigger in _CLAUDE_TOOL_TRIGGERS):
            continue
        panel = closest(button.parent, ".border-border-300, .rounded-lg, .flex-col")
        if panel is None:
            continue
        results = [
            text_of(node)
            for node in panel.select(".text-text-000, .text-text-200, .line-clamp-1")
            if node is not button and not any(parent is button for parent in node.parents)
        ]
        results = [
            text
            for text in results
            if text and "viewed" not in text.lower() and "presented" not in text.lower()
        ]
        replace_with_markdown(panel, _quote(f"🛠️ **{label or 'Tool Action'}**", results))


def claude_action_steps(root: Tag) -> None:
    for node in root.select(".text-text-200, .text-text-100"):
        if node.decomposed:
            continue
        row = closest(node, r".flex-row.min-h-\[2\.125rem\], .hover\:bg-bg-200")
        if row is None:
            continue
        text = text_of(node)
        if not text.lower().startswith(_CLAUDE_ACTION_TRIGGERS):
            continue
        detail = row.select_one(".text-xs")
        suffix = f" [{text_of(detail)}]" if detail is not None and text_of(detail) else ""
        replace_with_markdown(row, f"> ⚙️ **Action**: {text}{suffix}")


def claude_artifacts(root: Tag) -> None:
    for card in root.select('.artifact-block-cell, [aria-label*="Preview"]'):
        if card.decomposed:
            continue
        title = text_of(card.select_one(".line-clamp-1")) or "Artifact"
        subtitle = text_of(card.select_one(".text-xs.line-clamp-1"))
        lines = [subtitle] if subtitle and subtitle != title else []
        replace_with_markdown(card, _quote(f"📦 **Artifact: {title}**", lines))


# --------------------------------------------------------------------------- #
# LeChat                                                                      #
# --------------------------------------------------------------------------- #

_LECHAT_EVENT_CONTAINER = ".w-full.overflow-hidden, .flex.w-full.flex-col, .pb-6"
_ATTACHMENT_ICONS = {"JSON": "📋", "PDF": "📄", "IMAGE": "🖼️"}


def lechat_context_badges(root: Tag) -> None:
    for badge in root.select(".bg-state-soft.rounded-full"):
        text = text_of(badge)
        if text:
            replace_with_markdown(badge, f"> 📎 **Context: {text}**")


def lechat_rich_tables(root: Tag) -> None:
    for grid in root.select('.rich-table, [role="table"]'):
        if grid.decomposed:
            continue
        headers = [text_of(cell) for cell in grid.select('[role="columnheader"]')]
        cells = [text_of(cell) for cell in grid.select('[role="cell"]')]
        if not headers or not cells:
            continue
        container = closest(grid, ".rounded-card-md, .border.border-default.bg-card")
        title_el = (
            container.select_one(".rich-table-title-bar .text-base, .border-b .text-base")
            if container is not None
            else None
        )
        width = len(headers)
        rows = [
            "| " + " | ".join(headers) + " |",
            "| " + " | ".join("---" for _ in headers) + " |",
        ]
        for start in range(0, len(cells) - width + 1, width):
            rows.append("| " + " | ".join(cells[start : start + width]) + " |")
        title = text_of(title_el) or "Data Table"
        replace_with_markdown(container or grid, f"### 📊 {title}\n\n" + "\n".join(rows))


def lechat_attachments(root: Tag) -> None:
    for wrapper in root.select(".max-w-2xs"):
        card = wrapper.select_one(".rounded-md.bg-muted, .relative.rounded-md")
        if card is None:
            continue
        filename = text_of(card.select_one(".line-clamp-2, p.font-medium"))
        if not filename:
            continue
        file_type = (text_of(card.select_one('[class*="bg-badge-"]')) or "FILE").upper()
        icon = _ATTACHMENT_ICONS.get(file_type, "📎")
        replace_with_markdown(wrapper, f"> {icon} **Attachment**: {filename} ({file_type})")


def lechat_tool_events(root: Tag) -> None:
    for icon in root.select('[class*="lucide-wrench"]'):
        container = closest(icon, _LECHAT_EVENT_CONTAINER)
        if container is None or container.decomposed:
            continue
        names = [
            text
            for text in _texts(container, ".text-md.font-medium.text-subtle")
            if text not in ("Tool", "executed")
        ]
        replace_with_markdown(container, f"> 🔧 **{' '.join(names) or 'Tool Executed'}**")

    for icon in root.select('[class*="lucide-library"]'):
        container = closest(icon, _LECHAT_EVENT_CONTAINER)
        if container is None or container.decomposed:
            continue
        query = text_of(container.select_one(".text-medium, .wrap-break-word"))
        label = f'Searched Libraries: "{query}"' if query else "Searched Libraries"
        replace_with_markdown(container, f"> 📚 **{label}**")

    # Text-only fallbacks for events rendered without an icon
    for heading in root.select(".text-md.font-medium.text-subtle"):
        if heading.decomposed:
            continue
        text = text_of(heading)
        container = closest(heading, ".w-full.overflow-hidden")
        if container is None:
            continue
        if text == "Tool":
            replace_with_markdown(container, "> 🛠️ **Tool Executed**")
        elif text == "Searched":
            query = text_of(container.select_one(".text-medium"))
            replace_with_markdown(container, f"> 📚 **Searched Libraries**: {query}".rstrip())


def lechat_followups(root: Tag) -> None:
    """Inline follow-up questions become footnotes listed after the answer."""
    notes = []
    for block in top_level(root.select(".followup-block, [data-question]")):
        question = block.get("data-question")
        text = text_of(block)
        if not question or not text or block.parent is None:
            continue
        notes.append(f"[^{len(notes) + 1}]: {question}")
        block.replace_with(f"{text}[^{len(notes)}]")
    if notes:
        root.append(markdown_node("---\n**Follow-up Questions:**\n" + "\n".join(notes)))


# --------------------------------------------------------------------------- #
# Llamacoder                                                                  #
# --------------------------------------------------------------------------- #


def llamacoder_file_badges(root: Tag) -> None:
    for name_el in root.select("span.text-gray-700"):
        badge = name_el.parent
        if badge is None or name_el.decomposed:
            continue
        filename = text_of(name_el)
        if filename and ("." in filename or "/" in filename):
            replace_with_markdown(badge, f"**📄 File: {filename}**")


# --------------------------------------------------------------------------- #
# AI Studio                                                                   #
# --------------------------------------------------------------------------- #

_GENERATED_FILES = "### Generated Files"


def aistudio_generated_files(root: Tag) -> None:
    for table in root.select("ms-console-generation-table"):
        paths = _texts(table, ".gt-path")
        if paths:
            replace_with_markdown(table, f"{_GENERATED_FILES}\n\n{_bullets(paths)}")
        else:
            table.decompose()


def aistudio_file_trees(root: Tag) -> None:
    """File explorers flatten to the same listing as generation tables."""
    for tree in root.select("ms-file-tree, .file-tree"):
        if tree.decomposed:
            continue
        entries = _texts(tree, ".file-path, .file-name, .node-name")
        if entries:
            replace_with_markdown(tree, f"{_GENERATED_FILES}\n\n{_bullets(entries)}")


def aistudio_errors(root: Tag) -> None:
    for error in root.select("ms-inline-error, ms-error-message, .inline-error, .error-message"):
        if error.decomposed:
            continue
        text = text_of(error)
        if text:
            replace_with_markdown(error, _quote("[!WARNING] Error", [text]))


def aistudio_checkpoints(root: Tag) -> None:
    for marker in root.select("ms-checkpoint, .checkpoint-marker, .checkpoint"):
        if marker.decomposed:
            continue
        label = text_of(marker)
        detail = [label] if label and "checkpoint" not in label.lower() else []
        replace_with_markdown(marker, _quote("[!NOTE] Checkpoint Created", detail))


def aistudio_suggested_replies(root: Tag) -> None:
    for group in root.select("ms-suggested-replies, .suggested-replies, ms-prompt-chips"):
        if group.decomposed:
            continue
        chips = _texts(group, '.chip, .suggestion, button, [role="button"]')
        if chips:
            unique = list(dict.fromkeys(chips))
            replace_with_markdown(group, f"**Suggested Replies:**\n\n{_bullets(unique)}")
        else:
            group.decompose()


CLAUDE_RULES: tuple[WidgetRule, ...] = (
    claude_thought_blocks,
    claude_tool_calls,
    claude_action_steps,
    claude_artifacts,
)
LECHAT_RULES: tuple[WidgetRule, ...] = (
    lechat_context_badges,
    lechat_rich_tables,
    lechat_attachments,
    lechat_tool_events,
    lechat_followups,
)
LLAMACODER_RULES: tuple[WidgetRule, ...] = (llamacoder_file_badges,)
AISTUDIO_RULES: tuple[WidgetRule, ...] = (
    aistudio_generated_files,
    aistudio_file_trees,
    aistudio_errors,
    aistudio_checkpoints,
    aistudio_suggested_replies,
)
