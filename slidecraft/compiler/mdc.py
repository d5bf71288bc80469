# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/mdc.py
"""
Component/attribute directive syntax for markdown-it-py.

    ::card{style="color: green;" .custom-class .green}
    The content of the card{.highlight}!
    ::

    Inline :badge[new]{type=info} component and a [span]{.red} with props.

Block components nest by adding colons (``:::inner`` ... ``:::``). A block
whose only child is one paragraph renders without the ``<p>`` wrapper.
Attribute lists use the djot grammar from ``mdit_py_plugins.attrs``.
"""
from __future__ import annotations

import re
from typing import Dict, Optional, Sequence, Tuple

from markdown_it import MarkdownIt
from markdown_it.rules_block import StateBlock
from markdown_it.rules_core import StateCore
from markdown_it.rules_inline import StateInline
from markdown_it.token import Token
from mdit_py_plugins.attrs.parse import ParseError, parse
from mdit_py_plugins.utils import is_code_block

_BLOCK_OPEN_RE = re.compile(r"^(:{2,})([A-Za-z][\w-]*)\s*(\{.*\})?\s*$")
_BLOCK_CLOSE_RE = re.compile(r"^(:{2,})\s*$")
_COMPONENT_NAME_RE = re.compile(r"[A-Za-z][\w-]*")

# inline tokens whose opening tag receives a following {attrs}
_PROPS_AFTER = ("mdc_inline_close",)


def _scan_attrs(src: str) -> Optional[Tuple[int, Dict[str, str]]]:
    """Parse a ``{...}`` list at the start of ``src``; returns (index of ``}``, attrs)."""
    try:
        end, attrs = parse(src)
    except ParseError:
        return None
    if end >= len(src) or src[end] != "}":
        return None
    return end, attrs


def _parse_attrs(src: str) -> Optional[Dict[str, str]]:
    scanned = _scan_attrs(src)
    return scanned[1] if scanned is not None else None


def _merge_attrs(token: Token, attrs: Dict[str, str]) -> None:
    if "class" in attrs and token.attrGet("class"):
        attrs = {**attrs, "class": f"{token.attrGet('class')} {attrs['class']}"}
    for key, value in attrs.items():
        token.attrSet(key, value)


# --------------------------------------------------------------------------------------
# Block components
# --------------------------------------------------------------------------------------

def _block_component(state: StateBlock, startLine: int, endLine: int, silent: bool) -> bool:
    if is_code_block(state, startLine):
        return False

    start = state.bMarks[startLine] + state.tShift[startLine]
    maximum = state.eMarks[startLine]
    if state.src[start:start + 2] != "::":
        return False

    m = _BLOCK_OPEN_RE.match(state.src[start:maximum])
    if not m:
        return False
    markers, name, attr_src = m.group(1), m.group(2), m.group(3)
    attrs: Dict[str, str] = {}
    if attr_src:
        parsed = _parse_attrs(attr_src)
        if parsed is None:
            return False
        attrs = parsed

    if silent:
        return True

    # find the matching close marker; same-width openers nest
    nextLine = startLine
    depth = 1
    auto_closed = False
    while True:
        nextLine += 1
        if nextLine >= endLine:
            break
        line_start = state.bMarks[nextLine] + state.tShift[nextLine]
        line_max = state.eMarks[nextLine]
        if line_start < line_max and state.sCount[nextLine] < state.blkIndent:
            break
        line = state.src[line_start:line_max]
        if not line.startswith("::"):
            continue
        close = _BLOCK_CLOSE_RE.match(line)
        if close and len(close.group(1)) == len(markers):
            depth -= 1
            if depth == 0:
                auto_closed = True
                break
            continue
        opener = _BLOCK_OPEN_RE.match(line)
        if opener and len(opener.group(1)) == len(markers):
            depth += 1

    old_parent = state.parentType
    old_line_max = state.lineMax
    state.parentType = "container"
    state.lineMax = nextLine

    token = state.push("mdc_block_open", name, 1)
    token.markup = markers
    token.block = True
    token.info = name
    token.map = [startLine, nextLine]
    for key, value in attrs.items():
        token.attrSet(key, value)

    state.md.block.tokenize(state, startLine + 1, nextLine)

    token = state.push("mdc_block_close", name, -1)
    token.markup = markers
    token.block = True

    state.parentType = old_parent
    state.lineMax = old_line_max
    state.line = nextLine + (1 if auto_closed else 0)
    return True


def _unwrap_single_paragraph(state: StateCore) -> None:
    tokens = state.tokens
    for i, token in enumerate(tokens):
        if token.type != "mdc_block_open":
            continue
        if i + 4 >= len(tokens):
            continue
        if (
            tokens[i + 1].type == "paragraph_open"
            and tokens[i + 2].type == "inline"
            and tokens[i + 3].type == "paragraph_close"
            and tokens[i + 4].type == "mdc_block_close"
            and tokens[i + 4].level == token.level
        ):
            tokens[i + 1].hidden = True
            tokens[i + 3].hidden = True


# --------------------------------------------------------------------------------------
# Inline components and props
# --------------------------------------------------------------------------------------

def _inline_component(state: StateInline, silent: bool) -> bool:
    pos = state.pos
    if state.src[pos] != ":":
        return False
    if pos > 0 and (state.src[pos - 1].isalnum() or state.src[pos - 1] in ":/"):
        return False
    m = _COMPONENT_NAME_RE.match(state.src, pos + 1, state.posMax)
    if not m:
        return False

    name = m.group(0)
    cursor = m.end()
    label_start = label_end = -1
    if cursor < state.posMax and state.src[cursor] == "[":
        label_end = state.md.helpers.parseLinkLabel(state, cursor, False)
        if label_end < 0:
            return False
        label_start = cursor + 1
        cursor = label_end + 1

    attrs: Dict[str, str] = {}
    has_attrs = False
    if cursor < state.posMax and state.src[cursor] == "{":
        scanned = _scan_attrs(state.src[cursor:state.posMax])
        if scanned is None:
            return False
        consumed, attrs = scanned
        cursor += consumed + 1
        has_attrs = True

    if label_start < 0 and not has_attrs:
        return False

    if not silent:
        token = state.push("mdc_inline_open", name, 1)
        for key, value in attrs.items():
            token.attrSet(key, value)
        if label_start >= 0:
            old_max = state.posMax
            state.pos = label_start
            state.posMax = label_end
            state.md.inline.tokenize(state)
            state.posMax = old_max
        state.push("mdc_inline_close", name, -1)

    state.pos = cursor
    return True


def _find_opening(tokens: Sequence[Token], index: int) -> Optional[int]:
    level = 0
    while index >= 0:
        level += tokens[index].nesting
        if level == 0:
            return index
        index -= 1
    return None


def _inline_props(state: StateInline, silent: bool) -> bool:
    if state.src[state.pos] != "{":
        return False
    scanned = _scan_attrs(state.src[state.pos:state.posMax])
    if scanned is None:
        return False
    consumed, attrs = scanned
    end = state.pos + consumed + 1

    if state.pending:
        if not silent:
            text = state.pending
            state.pending = ""
            token = state.push("mdc_span_open", "span", 1)
            for key, value in attrs.items():
                token.attrSet(key, value)
            inner = state.push("text", "", 0)
            inner.content = text
            state.push("mdc_span_close", "span", -1)
        state.pos = end
        return True

    if state.tokens and state.tokens[-1].type in _PROPS_AFTER:
        opening = _find_opening(state.tokens, len(state.tokens) - 1)
        if opening is None:
            return False
        if not silent:
            _merge_attrs(state.tokens[opening], dict(attrs))
        state.pos = end
        return True

    return False


def mdc_plugin(md: MarkdownIt) -> None:
    md.block.ruler.before(
        "fence",
        "mdc_block_component",
        _block_component,
        {"alt": ["paragraph", "reference", "blockquote", "list"]},
    )
    md.core.ruler.after("block", "mdc_unwrap", _unwrap_single_paragraph)
    md.inline.ruler.push("mdc_inline_component", _inline_component)
    md.inline.ruler.push("mdc_props", _inline_props)
