# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/generator.py
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from markdown_it import MarkdownIt

from slidecraft.compiler.document import ComponentDocument, SetupBlock, StyleBlock, TemplateModel
from slidecraft.compiler.markdown import create_markdown
from slidecraft.types import MarkdownOptions

# top-level <style> blocks (html_block tokens start at column 0)
_STYLE_BLOCK_RE = re.compile(r"^<style(?P<attrs>(?:\s[^>]*)?)>\n?(?P<content>[\s\S]*?)\n?</style>[ \t]*\n?", re.M)


def hoist_styles(markup: str) -> Tuple[str, List[StyleBlock]]:
    styles: List[StyleBlock] = []

    def _take(m: re.Match) -> str:
        styles.append(StyleBlock(m.group("content"), m.group("attrs")))
        return ""

    return _STYLE_BLOCK_RE.sub(_take, markup), styles


def render_markup(raw_markup: str, *, pure: bool = False, md: Optional[MarkdownIt] = None,
                  md_options: Optional[MarkdownOptions] = None) -> str:
    """Rendered HTML for one slide body; ``pure`` treats the input as already rendered."""
    if pure:
        return raw_markup
    md = md or create_markdown(md_options)
    return md.render(raw_markup)


def generate(raw_markup: str, pure: bool = False, md: Optional[MarkdownIt] = None,
             md_options: Optional[MarkdownOptions] = None) -> ComponentDocument:
    """Wrap rendered markup into a root container plus an empty setup block."""
    markup = render_markup(raw_markup, pure=pure, md=md, md_options=md_options)
    body, styles = hoist_styles(markup)
    return ComponentDocument(
        template=TemplateModel(body=body),
        setup=SetupBlock(),
        styles=styles,
    )


def generate_source(raw_markup: str, pure: bool = False, md: Optional[MarkdownIt] = None,
                    md_options: Optional[MarkdownOptions] = None) -> str:
    return generate(raw_markup, pure=pure, md=md, md_options=md_options).to_source()
