# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SlideSource(BaseModel):
    """One slide as supplied by the caller. Never mutated downstream."""
    model_config = ConfigDict(frozen=True)

    frontmatter: Dict[str, Any] = Field(default_factory=dict)
    content: str = ""
    note: str = ""


@dataclass
class SourceSlideInfo:
    """Provenance record; offsets are zero-filled when positions are irrelevant."""
    frontmatter: Dict[str, Any]
    content: str
    filepath: str
    index: int
    start: int = 0
    content_start: int = 0
    end: int = 0
    raw: str = ""
    revision: str = ""


@dataclass
class SlideInfo:
    frontmatter: Dict[str, Any]
    content: str
    note: str
    index: int
    source: SourceSlideInfo
    revision: str = ""


@dataclass
class CompileResult:
    component_code: Optional[str] = None
    style_code: Optional[str] = None
    errors: List[Union[str, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.component_code) and not self.errors


@dataclass
class MarkdownOptions:
    """Caller hooks for the markup parser."""
    markdown_it_options: Dict[str, Any] = field(default_factory=dict)
    markdown_it_setup: Optional[Callable[[Any], None]] = None


@dataclass
class CssConfigOptions:
    custom_config_raw: Optional[str] = None
    custom_css_layer_name: Optional[str] = None
    custom_css: str = ""
    enabled: bool = True


@dataclass
class CompileOptions:
    slides_info: List[SlideInfo]
    filename: str
    code: str
    frontmatter: Optional[Dict[str, Any]] = None
    md_options: Optional[MarkdownOptions] = None
    sfc_options: Dict[str, Any] = field(default_factory=dict)
    # names of programmatic / inline-source components to import
    components: Mapping[str, Any] = field(default_factory=dict)
    sfc_components: Mapping[str, str] = field(default_factory=dict)
    # layout name -> virtual specifier; None means "whatever the context has"
    layouts: Optional[Mapping[str, str]] = None
    pure: bool = False


@dataclass
class RendererOptions:
    md_options: Optional[MarkdownOptions] = None
    sfc_options: Dict[str, Any] = field(default_factory=dict)
    components: Dict[str, Any] = field(default_factory=dict)
    sfc_components: Dict[str, str] = field(default_factory=dict)
    css: CssConfigOptions = field(default_factory=CssConfigOptions)
    slide_loading: Any = None
    slide_error: Any = None
    loading_delay_ms: Optional[int] = None
