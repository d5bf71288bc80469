# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/transforms.py
"""
Ordered rewrites over a ComponentDocument:

  1. layout wrapper     - <InjectedLayout v-bind="$frontmatter"> + layout import
  2. custom components  - import X from "custom:X" for programmatic components
  3. inline components  - same namespace, for components given as source text
  4. built-ins          - import remote from "built-in:remote", always last

Steps that do not apply to a document return it unchanged. The only fatal
case is a layout step over a document without a setup block.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence

from slidecraft.compiler.document import ComponentDocument
from slidecraft.config import get_settings
from slidecraft.errors import ComponentSourceError
from slidecraft.types import SlideInfo

logger = logging.getLogger(__name__)

SLIDE_ID_RE = re.compile(r"__slide_(\d+)\.md$")

LAYOUT_BINDING = "InjectedLayout"
FRONTMATTER_BINDING = "$frontmatter"
REMOTE_BINDING = "remote"
REMOTE_SPECIFIER = "built-in:remote"
CUSTOM_PREFIX = "custom:"
LAYOUT_PREFIX = "layouts:"


def slide_filepath(index: int) -> str:
    return f"/slides.md__slide_{index}.md"


def layout_specifier(name: str) -> str:
    return f"{LAYOUT_PREFIX}{name}"


def custom_specifier(name: str) -> str:
    return f"{CUSTOM_PREFIX}{name}"


def match_slide_index(slide_id: str) -> Optional[int]:
    m = SLIDE_ID_RE.search(slide_id or "")
    return int(m.group(1)) if m else None


class Transform(Protocol):
    name: str

    def apply(self, document: ComponentDocument, slide_id: str) -> ComponentDocument: ...


def format_available_layouts(names: Iterable[str]) -> str:
    return "  ".join(
        ("\n    " if idx % 3 == 0 else "") + name.ljust(15)
        for idx, name in enumerate(names)
    )


# --------------------------------------------------------------------------------------
# 1. Layout wrapper
# --------------------------------------------------------------------------------------

class LayoutWrapperTransform:
    name = "layout-wrapper"

    def __init__(self, slides_info: Sequence[SlideInfo], layouts: Mapping[str, str],
                 fallback: Optional[str] = None):
        """
        :param slides_info: the deck, read only
        :param layouts: layout name -> virtual specifier
        :param fallback: layout used when none is set or the name is unknown
                         (default: settings.DEFAULT_LAYOUT)
        """
        self.slides_info = slides_info
        self.layouts = layouts
        self.fallback = fallback or get_settings().DEFAULT_LAYOUT

    def _slide_frontmatter(self, index: int) -> Optional[Dict[str, Any]]:
        if 0 <= index < len(self.slides_info):
            return self.slides_info[index].frontmatter
        return None

    def _deck_default(self) -> Dict[str, Any]:
        if not self.slides_info:
            return {}
        default = (self.slides_info[0].frontmatter or {}).get("default")
        return default if isinstance(default, dict) else {}

    def resolve_layout(self, index: int) -> str:
        frontmatter = self._slide_frontmatter(index) or {}
        raw = frontmatter.get("layout")
        if raw is None:
            raw = self._deck_default().get("layout")
        name = raw or self.fallback
        if name not in self.layouts:
            logger.error(
                'Unknown layout "%s". Available layouts are:%s',
                name, format_available_layouts(self.layouts.keys()),
            )
            name = self.fallback
        return name

    def apply(self, document: ComponentDocument, slide_id: str) -> ComponentDocument:
        index = match_slide_index(slide_id)
        if index is None:
            return document
        if document.setup is None:
            raise ComponentSourceError(
                f"<script setup> block not found in slide {index + 1}", slide_index=index,
            )

        layout = self.resolve_layout(index)
        frontmatter = self._slide_frontmatter(index)
        if frontmatter is None:
            frontmatter = self._deck_default()

        document.template.wrap(LAYOUT_BINDING, {"v-bind": FRONTMATTER_BINDING})
        setup = document.setup
        setup.add_import(LAYOUT_BINDING, self.layouts.get(layout, layout_specifier(layout)), override=True)
        setup.add_import(REMOTE_BINDING, REMOTE_SPECIFIER, override=True)
        setup.add_const(FRONTMATTER_BINDING, json.dumps(frontmatter or {}, default=str, ensure_ascii=False))
        return document


# --------------------------------------------------------------------------------------
# 2./3. Component imports
# --------------------------------------------------------------------------------------

class CustomComponentTransform:
    name = "custom-components"

    def __init__(self, names: Iterable[str]):
        self.names: List[str] = list(names)

    def apply(self, document: ComponentDocument, slide_id: str) -> ComponentDocument:
        if document.setup is None:
            return document
        for name in self.names:
            document.setup.add_import(name, custom_specifier(name))
        return document


class InlineSourceComponentTransform(CustomComponentTransform):
    name = "inline-source-components"


# --------------------------------------------------------------------------------------
# 4. Built-ins
# --------------------------------------------------------------------------------------

class BuiltinCapabilityTransform:
    name = "builtin-capabilities"

    def apply(self, document: ComponentDocument, slide_id: str) -> ComponentDocument:
        if document.setup is None:
            return document
        document.setup.add_import(REMOTE_BINDING, REMOTE_SPECIFIER, override=True)
        return document


class TransformPipeline:
    def __init__(self, steps: Sequence[Transform]):
        self.steps = list(steps)

    def run(self, document: ComponentDocument, slide_id: str) -> ComponentDocument:
        for step in self.steps:
            document = step.apply(document, slide_id)
        return document

    def run_source(self, source: str, slide_id: str) -> str:
        return self.run(ComponentDocument.from_source(source), slide_id).to_source()


def default_pipeline(slides_info: Sequence[SlideInfo], layouts: Mapping[str, str],
                     components: Iterable[str] = (), sfc_components: Iterable[str] = ()) -> TransformPipeline:
    return TransformPipeline([
        LayoutWrapperTransform(slides_info, layouts),
        CustomComponentTransform(components),
        InlineSourceComponentTransform(sfc_components),
        BuiltinCapabilityTransform(),
    ])
