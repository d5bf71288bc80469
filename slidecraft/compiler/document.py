# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/document.py
"""
Component-source document model.

The generator produces a ComponentDocument, the transform steps edit it, and
``to_source()`` serializes it exactly once into the wire format consumed by
the component compiler:

    <template>
    <div>BODY</div>
    </template>

    <script setup>
    import Binding from "specifier"
    import { a, b as c } from "specifier"
    const $name = <json>
    </script>

followed by ``<style>`` blocks when present.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

ROOT_TAG = "div"

_TEMPLATE_OPEN = "<template>"
_TEMPLATE_CLOSE = "</template>"
_SETUP_OPEN_RE = re.compile(r"^<script setup(?P<attrs>[^>]*)>[ \t]*$", re.M)
_SCRIPT_CLOSE_RE = re.compile(r"^</script>[ \t]*$", re.M)
_STYLE_RE = re.compile(r"<style(?P<attrs>(?:\s[^>]*)?)>\n?(?P<content>[\s\S]*?)\n?</style>")
_WRAPPER_RE = re.compile(r"^<(?P<tag>[A-Za-z][\w-]*)(?P<attrs>(?:\s[^>]*)?)>\n(?P<body>[\s\S]*)\n</(?P=tag)>$")
_ATTR_RE = re.compile(r"""(?P<name>[^\s=/>]+)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s>]+)))?""")

_IDENT = r"\$?[A-Za-z_][\w$]*"
_DEFAULT_IMPORT_RE = re.compile(rf"^import\s+(?P<binding>{_IDENT})\s+from\s+(['\"])(?P<spec>[^'\"]+)\2;?$")
_NAMED_IMPORT_RE = re.compile(
    rf"^import\s+(?:(?P<binding>{_IDENT})\s*,\s*)?\{{(?P<names>[^}}]*)\}}\s*from\s+(['\"])(?P<spec>[^'\"]+)\3;?$"
)
_CONST_RE = re.compile(rf"^const\s+(?P<name>{_IDENT})\s*=\s*(?P<value>.+?);?$")


# --------------------------------------------------------------------------------------
# Setup statements
# --------------------------------------------------------------------------------------

@dataclass(frozen=True)
class ImportStatement:
    """``import binding from "specifier"`` and/or ``import { a, b as c } from ...``"""
    binding: Optional[str]
    specifier: str
    named: Tuple[Tuple[str, str], ...] = ()

    @property
    def bindings(self) -> List[str]:
        names = [self.binding] if self.binding else []
        return names + [local for _, local in self.named]

    def render(self) -> str:
        parts = []
        if self.binding:
            parts.append(self.binding)
        if self.named:
            inner = ", ".join(name if name == local else f"{name} as {local}" for name, local in self.named)
            parts.append("{ " + inner + " }")
        return f'import {", ".join(parts)} from "{self.specifier}"'


@dataclass(frozen=True)
class ConstStatement:
    """``const name = value``; value is JSON text."""
    name: str
    value: str

    @property
    def bindings(self) -> List[str]:
        return [self.name]

    def render(self) -> str:
        return f"const {self.name} = {self.value}"


@dataclass(frozen=True)
class RawStatement:
    text: str

    @property
    def bindings(self) -> List[str]:
        return []

    def render(self) -> str:
        return self.text


SetupStatement = Union[ImportStatement, ConstStatement, RawStatement]


def _parse_named(names: str) -> Tuple[Tuple[str, str], ...]:
    out = []
    for part in names.split(","):
        part = part.strip()
        if not part:
            continue
        if " as " in part:
            name, local = (p.strip() for p in part.split(" as ", 1))
        else:
            name = local = part
        out.append((name, local))
    return tuple(out)


def parse_statement(line: str) -> SetupStatement:
    text = line.strip()
    m = _DEFAULT_IMPORT_RE.match(text)
    if m:
        return ImportStatement(m.group("binding"), m.group("spec"))
    m = _NAMED_IMPORT_RE.match(text)
    if m:
        return ImportStatement(m.group("binding"), m.group("spec"), _parse_named(m.group("names")))
    m = _CONST_RE.match(text)
    if m:
        return ConstStatement(m.group("name"), m.group("value").strip())
    return RawStatement(line.rstrip())


@dataclass
class SetupBlock:
    statements: List[SetupStatement] = field(default_factory=list)
    attrs: str = ""

    def find_binding(self, name: str) -> Optional[SetupStatement]:
        for stmt in self.statements:
            if name in stmt.bindings:
                return stmt
        return None

    def add(self, stmt: SetupStatement, *, override: bool = False) -> None:
        """Add a statement, keyed by the names it binds.

        An identical statement already present is a no-op. A statement whose
        bindings collide with existing ones replaces them only when ``override``.
        """
        if stmt in self.statements:
            return
        clashes = [s for s in self.statements if set(s.bindings) & set(stmt.bindings)]
        if clashes and not override:
            return
        for s in clashes:
            self.statements.remove(s)
        self.statements.append(stmt)

    def add_import(self, binding: str, specifier: str, *, override: bool = False) -> None:
        self.add(ImportStatement(binding, specifier), override=override)

    def add_const(self, name: str, value: str, *, override: bool = True) -> None:
        self.add(ConstStatement(name, value), override=override)

    @property
    def imports(self) -> List[ImportStatement]:
        return [s for s in self.statements if isinstance(s, ImportStatement)]

    def render(self) -> str:
        imports = [s for s in self.statements if isinstance(s, ImportStatement)]
        rest = [s for s in self.statements if not isinstance(s, ImportStatement)]
        lines = [s.render() for s in imports + rest]
        body = "\n".join(lines)
        return f"<script setup{self.attrs}>\n" + (body + "\n" if body else "") + "</script>"


# --------------------------------------------------------------------------------------
# Template / styles
# --------------------------------------------------------------------------------------

def parse_attrs(text: str) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for m in _ATTR_RE.finditer(text or ""):
        value = m.group("dq")
        if value is None:
            value = m.group("sq")
        if value is None:
            value = m.group("bare") or ""
        attrs[m.group("name")] = value
    return attrs


def render_attrs(attrs: Dict[str, str]) -> str:
    return "".join(f' {k}="{v}"' for k, v in attrs.items())


@dataclass
class Wrapper:
    tag: str
    attrs: Dict[str, str] = field(default_factory=dict)


@dataclass
class TemplateModel:
    """Template markup: ``<div>body</div>`` or ``<Wrapper attrs>\\nbody\\n</Wrapper>``.

    ``root_tag=None`` with no wrapper means the body is emitted as is.
    """
    body: str
    root_tag: Optional[str] = ROOT_TAG
    wrapper: Optional[Wrapper] = None

    def render(self) -> str:
        if self.wrapper is not None:
            w = self.wrapper
            return f"<{w.tag}{render_attrs(w.attrs)}>\n{self.body}\n</{w.tag}>"
        if self.root_tag:
            return f"<{self.root_tag}>{self.body}</{self.root_tag}>"
        return self.body

    def wrap(self, tag: str, attrs: Dict[str, str]) -> None:
        """Replace the root container with a wrapper element around the trimmed body."""
        self.body = self.body.strip()
        self.root_tag = None
        self.wrapper = Wrapper(tag, dict(attrs))

    @classmethod
    def parse(cls, text: str) -> "TemplateModel":
        m = _WRAPPER_RE.match(text)
        if m and m.group("tag") != ROOT_TAG:
            return cls(body=m.group("body"), root_tag=None,
                       wrapper=Wrapper(m.group("tag"), parse_attrs(m.group("attrs"))))
        opener, closer = f"<{ROOT_TAG}>", f"</{ROOT_TAG}>"
        if text.startswith(opener) and text.endswith(closer):
            return cls(body=text[len(opener):-len(closer)])
        return cls(body=text, root_tag=None)


@dataclass
class StyleBlock:
    content: str
    attrs: str = ""

    def render(self) -> str:
        return f"<style{self.attrs}>\n{self.content}\n</style>"


# --------------------------------------------------------------------------------------
# Document
# --------------------------------------------------------------------------------------

@dataclass
class ComponentDocument:
    template: TemplateModel
    setup: Optional[SetupBlock] = field(default_factory=SetupBlock)
    styles: List[StyleBlock] = field(default_factory=list)

    def to_source(self) -> str:
        parts = [f"{_TEMPLATE_OPEN}\n{self.template.render()}\n{_TEMPLATE_CLOSE}"]
        if self.setup is not None:
            parts.append(self.setup.render())
        parts.extend(style.render() for style in self.styles)
        return "\n\n".join(parts)

    @classmethod
    def from_source(cls, source: str) -> "ComponentDocument":
        setup_match = _SETUP_OPEN_RE.search(source)
        template_part = source[:setup_match.start()] if setup_match else source

        setup: Optional[SetupBlock] = None
        rest = ""
        if setup_match:
            close = _SCRIPT_CLOSE_RE.search(source, setup_match.end())
            end = close.start() if close else len(source)
            body = source[setup_match.end():end]
            setup = SetupBlock(
                statements=[parse_statement(line) for line in body.splitlines() if line.strip()],
                attrs=setup_match.group("attrs"),
            )
            rest = source[close.end():] if close else ""

        start = template_part.find(_TEMPLATE_OPEN)
        stop = template_part.rfind(_TEMPLATE_CLOSE)
        if start < 0 or stop < start:
            inner = template_part.strip()
        else:
            inner = template_part[start + len(_TEMPLATE_OPEN):stop]
            if inner.startswith("\n"):
                inner = inner[1:]
            if inner.endswith("\n"):
                inner = inner[:-1]

        styles = [StyleBlock(m.group("content"), m.group("attrs")) for m in _STYLE_RE.finditer(rest)]
        return cls(template=TemplateModel.parse(inner), setup=setup, styles=styles)


def extract_template_body(source: str) -> str:
    """Body markup of a component-source document, without root container or wrapper."""
    return ComponentDocument.from_source(source).template.body
