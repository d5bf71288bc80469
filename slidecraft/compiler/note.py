# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/note.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from markdown_it import MarkdownIt
from markdown_it.token import Token

CLICK_MARK_CLASS = "slide-note-click-mark"
_CLICK_RE = re.compile(r"\[click(?::(\d+))?\]", re.I)

shared_md = MarkdownIt("commonmark", {"html": True})


@dataclass(frozen=True)
class RenderedNote:
    html: str
    clicks: int = 0


def stringify_markdown_tokens(tokens: Sequence[Token]) -> str:
    """Plain-text excerpt from text / inline-code children of inline tokens."""
    chunks = []
    for token in tokens:
        if not token.children:
            continue
        words = [
            t.content.strip() for t in token.children
            if t.type in ("text", "code_inline") and t.content.strip()
        ]
        line = " ".join(words)
        if line:
            chunks.append(line)
    return " ".join(chunks)


def render_note(text: str = "") -> RenderedNote:
    """Speaker note ➜ HTML; ``[click]`` / ``[click:N]`` become cumulative click marks."""
    clicks = 0

    def _mark(m: re.Match) -> str:
        nonlocal clicks
        clicks += int(m.group(1) or 1)
        return f'<span class="{CLICK_MARK_CLASS}" data-clicks="{clicks}"></span>'

    html = shared_md.render(_CLICK_RE.sub(_mark, text or ""))
    return RenderedNote(html=html, clicks=clicks)
