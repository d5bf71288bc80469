# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/markdown.py
"""
Markdown ➜ HTML for slide bodies (markdown-it-py + mdit-py-plugins).

- typographer quotes, raw HTML passthrough, xhtml output, linkify
- footnotes, {attrs} after links / images / inline code
- ::component{attrs} containers and text{attrs} spans (see mdc.py)
- Pygments highlighting for fenced code; braces escaped so template
  interpolation never fires inside fenced, indented or inline code
- in prose only ``{{ expr }}`` stays live: ``{%`` and ``{#`` are escaped.
  Raw HTML passes through untouched and is template source as written.
"""
from __future__ import annotations

import html
import re
from typing import Optional

from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from mdit_py_plugins.attrs import attrs_plugin
from mdit_py_plugins.footnote import footnote_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from slidecraft.compiler.mdc import mdc_plugin
from slidecraft.types import MarkdownOptions

_BASE_OPTIONS = {
    "html": True,
    "xhtmlOut": True,
    "linkify": True,
    "typographer": True,
    "quotes": "\"\"''",
}

_TAG_OPEN_RE = re.compile(r"\{([%#])")


def escape_braces(text: str) -> str:
    return text.replace("{", "&#123;").replace("}", "&#125;")


def escape_template_tags(text: str) -> str:
    """Neutralize ``{%`` and ``{#`` so prose keeps ``{{ }}`` as its only template syntax."""
    return _TAG_OPEN_RE.sub(r"&#123;\1", text)


class _PygmentsRenderer:
    def __init__(self, formatter: Optional[HtmlFormatter] = None):
        self.formatter = formatter or HtmlFormatter(nowrap=True)

    def fence(self, code: str, info: str | None) -> str:
        lang = (info or "").strip().split()[0] if info and info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=False)
                highlighted = highlight(code, lexer, self.formatter)
            except ClassNotFound:
                highlighted = html.escape(code)
        else:
            highlighted = html.escape(code)
        class_attr = f' class="language-{html.escape(lang)}"' if lang else ""
        return f"<pre><code{class_attr}>{escape_braces(highlighted)}</code></pre>\n"


def create_markdown(options: Optional[MarkdownOptions] = None) -> MarkdownIt:
    options = options or MarkdownOptions()
    md = MarkdownIt("commonmark", {**_BASE_OPTIONS, **options.markdown_it_options})
    md.enable(["linkify", "replacements", "smartquotes", "table", "strikethrough"])

    md.use(footnote_plugin)
    md.use(attrs_plugin)
    md.use(mdc_plugin)

    renderer = _PygmentsRenderer()

    def fence_rule(self, tokens, idx, opts, env):
        token = tokens[idx]
        return renderer.fence(token.content, token.info)

    def code_inline_rule(self, tokens, idx, opts, env):
        token = tokens[idx]
        return f"<code{self.renderAttrs(token)}>{escape_braces(html.escape(token.content))}</code>"

    def code_block_rule(self, tokens, idx, opts, env):
        token = tokens[idx]
        return f"<pre{self.renderAttrs(token)}><code>{escape_braces(escapeHtml(token.content))}</code></pre>\n"

    def text_rule(self, tokens, idx, opts, env):
        return escape_template_tags(escapeHtml(tokens[idx].content))

    md.add_render_rule("fence", fence_rule)
    md.add_render_rule("code_inline", code_inline_rule)
    md.add_render_rule("code_block", code_block_rule)
    md.add_render_rule("text", text_rule)

    if options.markdown_it_setup is not None:
        options.markdown_it_setup(md)
    return md
