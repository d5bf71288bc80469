# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/runtime/components.py
"""
Server-side components.

A component is anything with ``render(props, slot) -> str`` returning HTML.
Compiled slides are SfcComponents: the template is interpolated with a
sandboxed Jinja2 environment, then tags naming components in scope are
expanded innermost-first (BeautifulSoup, html.parser) and ``<slot/>`` is
replaced with the caller's content.

Slide templates are Jinja source. The markdown renderer escapes ``{%`` and
``{#`` in prose and every brace in code, so ``{{ expr }}`` is the only live
syntax there; raw HTML and registered component sources keep full Jinja
meaning.
"""
from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Protocol, runtime_checkable

from bs4 import BeautifulSoup
from jinja2 import ChainableUndefined
from jinja2.sandbox import SandboxedEnvironment
from markupsafe import Markup

logger = logging.getLogger(__name__)

LAYOUTS_DIR = Path(__file__).parent / "layouts"

_env = SandboxedEnvironment(autoescape=True, undefined=ChainableUndefined)
_SLOT_RE = re.compile(r"<slot(?:\s[^>]*)?/?>(?:\s*</slot>)?", re.I)


@runtime_checkable
class Component(Protocol):
    name: str

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str: ...


def _normalize_tag(name: str) -> str:
    return name.replace("-", "").replace("_", "").lower()


def _lookup(scope: Mapping[str, Any], expr: str) -> Any:
    """Resolve ``name`` or ``name.attr.key`` against a binding scope."""
    head, *rest = expr.strip().split(".")
    if head not in scope:
        head = head.lstrip("$")
        scope = {k.lstrip("$"): v for k, v in scope.items()}
        if head not in scope:
            return None
    value = scope[head]
    for part in rest:
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = None
        if value is None:
            return None
    return value


class FunctionComponent:
    def __init__(self, fn: Callable[..., str], name: Optional[str] = None):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "component")

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        return self.fn(dict(props or {}), slot)

    def __repr__(self):
        return f"FunctionComponent({self.name!r})"


class TemplateComponent:
    """Jinja template with ``{{ slot }}`` and props as variables."""

    def __init__(self, name: str, source: str):
        self.name = name
        self.source = source
        self._template = _env.from_string(source)

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        props = dict(props or {})
        return self._template.render({**props, "props": props, "slot": Markup(slot)})

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r})"


class LayoutComponent(TemplateComponent):
    """Slide layout; frontmatter arrives as props."""

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        props = dict(props or {})
        return self._template.render({**props, "frontmatter": props, "layout": self.name, "slot": Markup(slot)})


class SfcComponent:
    def __init__(self, name: str, template: str, scope: Optional[Mapping[str, Any]] = None,
                 styles: Iterable[str] = ()):
        self.name = name
        self.template = template
        self.scope: Dict[str, Any] = dict(scope or {})
        self.styles: List[str] = list(styles)
        self._compiled = _env.from_string(template)
        self.components: Dict[str, Component] = {
            _normalize_tag(key): value for key, value in self.scope.items()
            if not key.startswith("$") and isinstance(value, Component)
        }

    def _context(self, props: Mapping[str, Any]) -> Dict[str, Any]:
        ctx = {key.lstrip("$"): value for key, value in self.scope.items()}
        ctx.update(props)
        ctx["props"] = dict(props)
        return ctx

    def _props_for(self, attrs: Mapping[str, Any]) -> Dict[str, Any]:
        props: Dict[str, Any] = {}
        for key, value in attrs.items():
            if key == "v-bind":
                bound = _lookup(self.scope, value)
                if isinstance(bound, Mapping):
                    props.update(bound)
            elif key.startswith(":") or key.startswith("v-bind:"):
                props[key.split(":", 1)[1]] = _lookup(self.scope, value)
            else:
                props[key] = value
        return props

    def _expand(self, markup: str) -> str:
        if not self.components:
            return markup
        soup = BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)
        targets = [tag for tag in soup.find_all(True) if _normalize_tag(tag.name) in self.components]
        if not targets:
            return markup
        for tag in reversed(targets):
            component = self.components[_normalize_tag(tag.name)]
            rendered = component.render(self._props_for(tag.attrs), tag.decode_contents())
            fragment = BeautifulSoup(rendered, "html.parser", multi_valued_attributes=None)
            nodes = list(fragment.contents)
            if nodes:
                tag.replace_with(*nodes)
            else:
                tag.decompose()
        return soup.decode(formatter="minimal")

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        markup = self._compiled.render(self._context(dict(props or {})))
        markup = self._expand(markup)
        return _SLOT_RE.sub(lambda _: slot, markup)

    def __repr__(self):
        return f"SfcComponent({self.name!r})"


def define_component(name: str, template: str, scope: Optional[Mapping[str, Any]] = None,
                     styles: Iterable[str] = ()) -> SfcComponent:
    return SfcComponent(name, template, scope=scope, styles=styles)


def as_component(value: Any, name: Optional[str] = None) -> Component:
    if isinstance(value, Component):
        return value
    if isinstance(value, str):
        return TemplateComponent(name or "component", value)
    if callable(value):
        return FunctionComponent(value, name)
    raise TypeError(f"cannot use {type(value).__name__} as a component")


# --------------------------------------------------------------------------------------
# Built-ins
# --------------------------------------------------------------------------------------

class RemoteComponent:
    """Embeds a remote page: <remote url="..." width="..." height="..." />"""
    name = "remote"

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        props = dict(props or {})
        url = props.get("url") or props.get("src") or ""
        width = props.get("width", "100%")
        height = props.get("height", "100%")
        scale = props.get("scale")
        style = f"width:{width};height:{height};border:0;"
        if scale:
            style += f"transform:scale({scale});transform-origin:0 0;"
        return (
            f'<iframe class="slide-remote" src="{html.escape(str(url), quote=True)}" '
            f'style="{html.escape(style, quote=True)}" loading="lazy"></iframe>'
        )


class SlideLoading:
    name = "slide-loading"

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        return '<div class="slide-loading">Loading slide...</div>'


class SlideError:
    name = "slide-error"

    def render(self, props: Optional[Mapping[str, Any]] = None, slot: str = "") -> str:
        props = dict(props or {})
        error = props.get("error")
        message = html.escape(str(error)) if error else "Failed to load slide"
        no = props.get("no")
        title = f"Slide {no}" if no else "Slide"
        return f'<div class="slide-error"><strong>{title}</strong><pre>{message}</pre></div>'


def load_layouts(extra_dir: Optional[str] = None) -> Dict[str, LayoutComponent]:
    """Built-in layouts, overridden/extended by ``*.html`` files in ``extra_dir``."""
    layouts: Dict[str, LayoutComponent] = {}
    dirs = [LAYOUTS_DIR] + ([Path(extra_dir)] if extra_dir else [])
    for directory in dirs:
        if not directory.is_dir():
            logger.warning("Layouts directory not found: %s", directory)
            continue
        for path in sorted(directory.glob("*.html")):
            layouts[path.stem] = LayoutComponent(path.stem, path.read_text(encoding="utf-8"))
    return layouts
