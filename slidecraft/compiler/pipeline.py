# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/pipeline.py
"""
Public compile entry points.

    markup --generate--> ComponentDocument --transforms--> component source --sfc--> CompileResult
    markup --generate--> template body (+ frontmatter class) --css engine--> GenerateOutput

The document is serialized once, at the end of the transform pipeline.
Parser and generator errors propagate unmodified.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from markdown_it import MarkdownIt

from slidecraft.compiler.document import ComponentDocument
from slidecraft.compiler.generator import generate
from slidecraft.compiler.sfc import compile_component_source
from slidecraft.compiler.transforms import default_pipeline, layout_specifier
from slidecraft.config import get_settings
from slidecraft.css.engine import CssEngine, GenerateOptions, GenerateOutput, generate_css
from slidecraft.runtime.components import load_layouts
from slidecraft.types import CompileOptions, CompileResult

logger = logging.getLogger(__name__)


def available_layouts() -> Dict[str, str]:
    """Built-in layouts plus ``settings.LAYOUTS_DIR``, as name -> virtual specifier."""
    return {name: layout_specifier(name) for name in load_layouts(get_settings().LAYOUTS_DIR)}


def compile_to_document(options: CompileOptions, md: Optional[MarkdownIt] = None) -> ComponentDocument:
    document = generate(options.code, pure=options.pure, md=md, md_options=options.md_options)
    layouts = options.layouts if options.layouts is not None else available_layouts()
    pipeline = default_pipeline(
        options.slides_info,
        layouts,
        components=options.components.keys(),
        sfc_components=options.sfc_components.keys(),
    )
    return pipeline.run(document, options.filename)


def compile_to_component_source(options: CompileOptions, md: Optional[MarkdownIt] = None) -> str:
    return compile_to_document(options, md=md).to_source()


def compile_to_runnable_unit(options: CompileOptions, md: Optional[MarkdownIt] = None) -> CompileResult:
    """Component source ➜ runnable unit. Compiler problems come back in ``errors``."""
    document = compile_to_document(options, md=md)
    return compile_component_source(options.filename, document, options.sfc_options)


def css_markup(options: CompileOptions, md: Optional[MarkdownIt] = None) -> str:
    """Rendered body of the slide, without layout, plus the frontmatter ``class`` tokens."""
    body = generate(options.code, pure=options.pure, md=md, md_options=options.md_options).template.body
    classes = (options.frontmatter or {}).get("class")
    if isinstance(classes, (list, tuple)):
        classes = " ".join(str(c) for c in classes)
    if classes:
        body = f'{body}\n<div class="{classes}"></div>'
    return body


async def compile_css(options: CompileOptions,
                      engine: Optional[CssEngine] = None,
                      custom_css: str = "",
                      md: Optional[MarkdownIt] = None) -> GenerateOutput:
    markup = css_markup(options, md=md)
    request = GenerateOptions(markup=markup, custom_css=custom_css)
    if engine is None:
        return await generate_css(request)
    return await engine.generate(request)
