# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/__init__.py
# pipeline.py is not re-exported here: it depends on slidecraft.css, which
# reaches back into slidecraft.runtime -> slidecraft.compiler.transforms.
from slidecraft.compiler.document import ComponentDocument, extract_template_body
from slidecraft.compiler.generator import generate, generate_source
from slidecraft.compiler.markdown import create_markdown
from slidecraft.compiler.note import RenderedNote, render_note
from slidecraft.compiler.sfc import compile_component_source
from slidecraft.compiler.transforms import TransformPipeline, default_pipeline

__all__ = [
    "ComponentDocument",
    "RenderedNote",
    "TransformPipeline",
    "compile_component_source",
    "create_markdown",
    "default_pipeline",
    "extract_template_body",
    "generate",
    "generate_source",
    "render_note",
]
