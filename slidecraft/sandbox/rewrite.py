# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/sandbox/rewrite.py
"""
Textual rewrite of configuration source before it reaches the interpreter.

    from atomic import define_config, preset_uno as uno
        -> define_config = (await __import__("atomic")).define_config; uno = (await __import__("atomic")).preset_uno
    import atomic.core as core   -> core = await __import__("atomic.core")
    import atomic                -> atomic = await __import__("atomic")
    await import("theme.json")   -> await __import__("theme.json")
    export default <expr>        -> return <expr>

Line numbers are kept: a multi-line import collapses to one line followed by
the same number of newlines.
"""
from __future__ import annotations

import json
import re
from typing import List

IMPORT_FN = "__import__"

_SPECIFIER = r"""(?P<spec>"[^"\n]+"|'[^'\n]+'|[\w@][\w.@/-]*)"""
_FROM_IMPORT_RE = re.compile(
    r"^(?P<indent>[ \t]*)from\s+" + _SPECIFIER + r"\s+import\s+(?P<names>\([^)]*\)|[^\n;]+)",
    re.M,
)
_IMPORT_AS_RE = re.compile(r"^(?P<indent>[ \t]*)import\s+" + _SPECIFIER + r"\s+as\s+(?P<alias>[A-Za-z_]\w*)[ \t]*$", re.M)
_IMPORT_RE = re.compile(r"^(?P<indent>[ \t]*)import\s+(?P<name>[A-Za-z_]\w*)[ \t]*$", re.M)
_DYNAMIC_IMPORT_RE = re.compile(r"(?<![\w.])import\s*\(")
_EXPORT_DEFAULT_RE = re.compile(r"^(?P<indent>[ \t]*)export\s+default\s+", re.M)
_NAME_RE = re.compile(r"^([A-Za-z_]\w*)(?:\s+as\s+([A-Za-z_]\w*))?$")


def _specifier(raw: str) -> str:
    if raw[0] in "\"'":
        return raw[1:-1]
    return raw


def _import_call(specifier: str) -> str:
    return f"(await {IMPORT_FN}({json.dumps(specifier)}))"


def _rewrite_from(m: re.Match) -> str:
    names = m.group("names").strip()
    if names.startswith("("):
        names = names[1:-1]
    specifier = _specifier(m.group("spec"))
    statements: List[str] = []
    for item in names.split(","):
        item = item.strip()
        if not item:
            continue
        parsed = _NAME_RE.match(item)
        if not parsed:
            # left for the interpreter to reject
            return m.group(0)
        name, alias = parsed.group(1), parsed.group(2) or parsed.group(1)
        statements.append(f"{alias} = {_import_call(specifier)}.{name}")
    newlines = "\n" * m.group(0).count("\n")
    return m.group("indent") + "; ".join(statements) + newlines


def rewrite_config_source(source: str) -> str:
    source = _FROM_IMPORT_RE.sub(_rewrite_from, source)
    source = _IMPORT_AS_RE.sub(
        lambda m: f"{m.group('indent')}{m.group('alias')} = await {IMPORT_FN}({json.dumps(_specifier(m.group('spec')))})",
        source,
    )
    source = _IMPORT_RE.sub(
        lambda m: f"{m.group('indent')}{m.group('name')} = await {IMPORT_FN}({json.dumps(m.group('name'))})",
        source,
    )
    source = _DYNAMIC_IMPORT_RE.sub(f"{IMPORT_FN}(", source)
    source = _EXPORT_DEFAULT_RE.sub(lambda m: f"{m.group('indent')}return ", source, count=1)
    return source
