# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/compiler/sfc.py
"""
Component-source document ➜ runnable Python unit.

The produced code defines one coroutine:

    async def setup(_import):
        ...
        return define_component(name, template=..., scope={...}, styles=...)

``_import(specifier)`` resolves a virtual module; ``define_component`` is
supplied by the evaluator. Only imports and JSON constants are accepted in
the setup block; anything else is reported in ``CompileResult.errors``.
"""
from __future__ import annotations

import ast
import json
import re
from typing import Any, Dict, List, Mapping, Optional, Union

from slidecraft.compiler.document import ComponentDocument, ConstStatement, ImportStatement, RawStatement
from slidecraft.types import CompileResult

_BINDING_RE = re.compile(r"^\$?[A-Za-z_]\w*$")
_INTERPOLATION_RE = re.compile(r"\{\{(.*?)\}\}", re.S)
_DOLLAR_NAME_RE = re.compile(r"\$([A-Za-z_]\w*)")


def _local(binding: str) -> str:
    if binding.startswith("$"):
        return f"_s_{binding[1:]}"
    return f"_b_{binding}"


def rewrite_template(template: str) -> str:
    """``{{ $frontmatter.title }}`` ➜ ``{{ frontmatter.title }}``"""
    return _INTERPOLATION_RE.sub(lambda m: "{{" + _DOLLAR_NAME_RE.sub(r"\1", m.group(1)) + "}}", template)


def _literal(value: Any) -> str:
    text = repr(value)
    ast.literal_eval(text)
    return text


def compile_component_source(filename: str, source: Union[str, ComponentDocument],
                             options: Optional[Mapping[str, Any]] = None) -> CompileResult:
    options = dict(options or {})
    errors: List[Union[str, Exception]] = []
    try:
        document = source if isinstance(source, ComponentDocument) else ComponentDocument.from_source(source)
    except Exception as e:
        return CompileResult(errors=[e])

    lines: List[str] = [
        f"# compiled from {filename}",
        f"TEMPLATE = {_literal(rewrite_template(document.template.render()))}",
        f"STYLES = {_literal([s.content for s in document.styles])}",
        "",
        "async def setup(_import):",
    ]
    scope: Dict[str, str] = {}
    module_no = 0

    for stmt in (document.setup.statements if document.setup else []):
        if isinstance(stmt, ImportStatement):
            bad = [b for b in stmt.bindings if not _BINDING_RE.match(b)]
            if bad:
                errors.append(f"{filename}: invalid binding name(s) {', '.join(bad)}")
                continue
            module = f"_m{module_no}"
            module_no += 1
            lines.append(f"    {module} = await _import({_literal(stmt.specifier)})")
            if stmt.binding:
                lines.append(f"    {_local(stmt.binding)} = {module}.default")
                scope[stmt.binding] = _local(stmt.binding)
            for name, local in stmt.named:
                if not name.isidentifier():
                    errors.append(f"{filename}: invalid import name {name!r}")
                    continue
                lines.append(f"    {_local(local)} = {module}.{name}")
                scope[local] = _local(local)
        elif isinstance(stmt, ConstStatement):
            if not _BINDING_RE.match(stmt.name):
                errors.append(f"{filename}: invalid binding name {stmt.name}")
                continue
            try:
                value = json.loads(stmt.value)
                lines.append(f"    {_local(stmt.name)} = {_literal(value)}")
            except (ValueError, SyntaxError) as e:
                errors.append(f"{filename}: const {stmt.name} is not a JSON literal ({e})")
                continue
            scope[stmt.name] = _local(stmt.name)
        elif isinstance(stmt, RawStatement):
            text = stmt.text.strip()
            if not text or text.startswith("//"):
                continue
            errors.append(f"{filename}: unsupported setup statement: {text}")

    scope_src = ", ".join(f"{_literal(name)}: {local}" for name, local in scope.items())
    lines.append(
        f"    return define_component({_literal(options.get('name', filename))}, "
        f"template=TEMPLATE, scope={{{scope_src}}}, styles=STYLES)"
    )
    code = "\n".join(lines) + "\n"

    try:
        compile(code, filename, "exec")
    except SyntaxError as e:
        errors.append(e)

    if errors:
        return CompileResult(errors=errors)
    return CompileResult(
        component_code=code,
        style_code="\n".join(s.content for s in document.styles),
        errors=[],
    )
