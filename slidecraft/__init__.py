# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/__init__.py
from slidecraft.compiler.pipeline import (
    compile_css,
    compile_to_component_source,
    compile_to_document,
    compile_to_runnable_unit,
)
from slidecraft.css.engine import GenerateOptions, GenerateOutput, generate_css, get_hint
from slidecraft.deck import parse_deck
from slidecraft.runtime.components import SlideError, SlideLoading
from slidecraft.runtime.context import ModuleContext
from slidecraft.slides import Islide, LazySlideComponent, SlideRenderer, render_slides
from slidecraft.types import (
    CompileOptions,
    CompileResult,
    CssConfigOptions,
    MarkdownOptions,
    RendererOptions,
    SlideInfo,
    SlideSource,
    SourceSlideInfo,
)

__all__ = [
    "CompileOptions",
    "CompileResult",
    "CssConfigOptions",
    "GenerateOptions",
    "GenerateOutput",
    "Islide",
    "LazySlideComponent",
    "MarkdownOptions",
    "ModuleContext",
    "RendererOptions",
    "SlideError",
    "SlideInfo",
    "SlideLoading",
    "SlideRenderer",
    "SlideSource",
    "SourceSlideInfo",
    "compile_css",
    "compile_to_component_source",
    "compile_to_document",
    "compile_to_runnable_unit",
    "generate_css",
    "get_hint",
    "parse_deck",
    "render_slides",
]
