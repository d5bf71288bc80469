# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/transformers.py
"""
Text transformers for markup and CSS.

- transformer_directives: ``@apply`` / ``--at-apply`` / ``@screen`` / ``theme()``
  inside CSS, resolved against the generator's rules and theme.
- transformer_variant_group: ``hover:(bg-red text-white)`` expansion in markup.
"""
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from slidecraft.css.config import Enforce, HighlightAnnotation, TransformContext, Transformer
from slidecraft.css.magic import EditableString
from slidecraft.css.utils import VARIANT_GROUP_RE, entries_to_css, expand_variant_group, to_escaped_selector

logger = logging.getLogger(__name__)

DIRECTIVES_TRANSFORMER = "@unocss/transformer-directives"
VARIANT_GROUP_TRANSFORMER = "@unocss/transformer-variant-group"

_APPLY_RE = re.compile(r"(?:@apply\s+|--at-apply\s*:\s*|--uno\s*:\s*)([^;}]+);?")
_SCREEN_RE = re.compile(r"@screen\s+(lt-)?([\w-]+)\s*\{")
_THEME_FN_RE = re.compile(r"theme\(\s*(['\"])([^'\"]+)\1\s*\)")
_CSS_ID_RE = re.compile(r"\.(css|postcss|sass|scss|less|stylus|styl)($|\?)")


def _rule_bounds(code: str, pos: int) -> Optional[tuple]:
    """(selector, block_end) of the rule enclosing ``pos``."""
    open_at = code.rfind("{", 0, pos)
    if open_at < 0:
        return None
    start = max(code.rfind("}", 0, open_at), code.rfind(";", 0, open_at), code.rfind("{", 0, open_at)) + 1
    selector = code[start:open_at].strip()
    close_at = code.find("}", pos)
    if close_at < 0 or not selector:
        return None
    return selector, close_at


def _theme_lookup(theme: Mapping[str, Any], path: str) -> Any:
    value: Any = theme
    for part in re.split(r"[.\[\]]+", path.strip(".")):
        if not part:
            continue
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    if isinstance(value, Mapping):
        value = value.get("DEFAULT")
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value


async def _apply_directives(buffer: EditableString, id: str, ctx: TransformContext) -> List[HighlightAnnotation]:
    code = buffer.original
    generator = ctx.generator
    theme = ctx.theme or (generator.config.theme if generator is not None else {})

    trailing: Dict[int, List[str]] = {}
    for m in _APPLY_RE.finditer(code):
        bounds = _rule_bounds(code, m.start())
        if bounds is None or generator is None:
            continue
        selector, block_end = bounds
        inline: List[str] = []
        nested = trailing.setdefault(block_end, [])
        for token in expand_variant_group(m.group(1)).split():
            utils = await generator.parse_token(token)
            if not utils:
                logger.warning("@apply: unknown utility %r", token)
                continue
            base = to_escaped_selector(token)
            for util in utils:
                if util.selector is None:
                    continue
                if util.selector == base and not util.parents:
                    inline.append(entries_to_css(util.entries))
                    continue
                rule = f"{util.selector.replace(base, selector)}{{{entries_to_css(util.entries)}}}"
                for parent in reversed(util.parents):
                    rule = f"{parent}{{{rule}}}"
                nested.append(rule)
        buffer.overwrite(m.start(), m.end(), "".join(inline))
    for block_end, rules in sorted(trailing.items()):
        if rules:
            buffer.insert(block_end + 1, "\n" + "\n".join(rules))

    breakpoints = theme.get("breakpoints") or {}
    for m in _SCREEN_RE.finditer(code):
        size = breakpoints.get(m.group(2))
        if size is None:
            raise ValueError(f"@screen: unknown breakpoint {m.group(2)!r}")
        query = f"(max-width: calc({size} - 0.1px))" if m.group(1) else f"(min-width: {size})"
        buffer.overwrite(m.start(), m.end(), f"@media {query} {{")

    for m in _THEME_FN_RE.finditer(code):
        value = _theme_lookup(theme, m.group(2))
        if value is None:
            raise ValueError(f'theme of "{m.group(2)}" did not found')
        buffer.overwrite(m.start(), m.end(), str(value))
    return []


def transformer_directives(**options: Any) -> Transformer:
    return Transformer(
        name=DIRECTIVES_TRANSFORMER,
        transform=_apply_directives,
        enforce=options.get("enforce", Enforce.PRE),
        id_filter=lambda id: bool(_CSS_ID_RE.search(id)),
    )


def _expand_groups(buffer: EditableString, id: str, ctx: TransformContext) -> List[HighlightAnnotation]:
    code = buffer.original
    expanded = expand_variant_group(code)
    if expanded == code:
        return []
    matches = list(VARIANT_GROUP_RE.finditer(code))
    annotations = [HighlightAnnotation(m.start(), m.end() - m.start(), "atomic-variant-group") for m in matches]

    pieces, cursor = [], 0
    for m in matches:
        pieces.append(code[cursor:m.start()])
        pieces.append(expand_variant_group(m.group(0)))
        cursor = m.end()
    pieces.append(code[cursor:])
    if "".join(pieces) == expanded:
        for m in matches:
            buffer.overwrite(m.start(), m.end(), expand_variant_group(m.group(0)))
    else:
        # nested groups expand across match boundaries
        buffer.overwrite(0, len(code), expanded)
    return annotations


def transformer_variant_group(**options: Any) -> Transformer:
    return Transformer(
        name=VARIANT_GROUP_TRANSFORMER,
        transform=_expand_groups,
        enforce=options.get("enforce", Enforce.DEFAULT),
    )
