# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/deck.py
"""
Deck text ➜ ordered SlideSource records.

    ---            <- optional headmatter of the first slide
    layout: cover
    ---
    # Title

    ---            <- separator; a YAML mapping right after it is the
    layout: center    next slide's frontmatter
    ---
    # Next
    <!-- trailing HTML comment = speaker note -->

Separators inside fenced code blocks never split a slide.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import yaml

from slidecraft.types import SlideSource

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"^---([^-].*)?$")
_FENCE_RE = re.compile(r"^\s*(`{3,}|~{3,})")
_COMMENT_RE = re.compile(r"<!--([\s\S]*?)-->")


def _load_frontmatter(lines: List[str]) -> Optional[Dict[str, Any]]:
    text = "\n".join(lines)
    if not text.strip():
        return {}
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        return None
    return data if isinstance(data, dict) else None


def _closing_separator(lines: List[str], start: int) -> int:
    for j in range(start, len(lines)):
        if lines[j].rstrip() == "---":
            return j
    return -1


def split_note(content: str) -> Tuple[str, str]:
    """(content, note): the last HTML comment is the note when nothing follows it."""
    comments = list(_COMMENT_RE.finditer(content))
    if comments:
        last = comments[-1]
        if not content[last.end():].strip():
            return content[:last.start()].strip(), last.group(1).strip()
    return content.strip(), ""


def split_slides(text: str) -> List[Tuple[Dict[str, Any], List[str]]]:
    """(frontmatter, body lines) per slide."""
    lines = text.replace("\r\n", "\n").split("\n")
    slides: List[Tuple[Dict[str, Any], List[str]]] = []
    frontmatter: Dict[str, Any] = {}
    start = 0
    fence: Optional[str] = None
    i = 0

    while i < len(lines):
        line = lines[i].rstrip()
        m = _FENCE_RE.match(line)
        if m:
            marker = m.group(1)
            if fence is None:
                fence = marker
            elif line.strip() == marker and marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
        elif fence is None and _SEPARATOR_RE.match(line):
            if i > 0 or frontmatter:
                slides.append((frontmatter, lines[start:i]))
            frontmatter = {}
            start = i + 1
            nxt = lines[i + 1] if i + 1 < len(lines) else ""
            if nxt.strip():
                close = _closing_separator(lines, i + 1)
                data = _load_frontmatter(lines[i + 1:close]) if close > 0 else None
                if data is not None:
                    frontmatter = data
                    start = close + 1
                    i = close
        i += 1

    tail = lines[start:]
    if frontmatter or "\n".join(tail).strip() or not slides:
        slides.append((frontmatter, tail))
    return slides


def parse_deck(text: str) -> List[SlideSource]:
    slides = []
    for frontmatter, body in split_slides(text or ""):
        content, note = split_note("\n".join(body))
        slides.append(SlideSource(frontmatter=frontmatter, content=content, note=note))
    logger.debug("Parsed deck: %d slides", len(slides))
    return slides
