# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/variants.py
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from slidecraft.css.config import CSSEntries, Variant, VariantContext, VariantMatch

_NEGATABLE_RE = re.compile(r"^(?:\d|\.\d|var\(--un-)")

PSEUDO_CLASSES: Dict[str, str] = {
    "active": ":active",
    "checked": ":checked",
    "default": ":default",
    "disabled": ":disabled",
    "empty": ":empty",
    "enabled": ":enabled",
    "first": ":first-child",
    "first-of-type": ":first-of-type",
    "focus": ":focus",
    "focus-visible": ":focus-visible",
    "focus-within": ":focus-within",
    "hover": ":hover",
    "indeterminate": ":indeterminate",
    "invalid": ":invalid",
    "last": ":last-child",
    "last-of-type": ":last-of-type",
    "odd": ":nth-child(odd)",
    "even": ":nth-child(even)",
    "only": ":only-child",
    "optional": ":optional",
    "read-only": ":read-only",
    "required": ":required",
    "target": ":target",
    "valid": ":valid",
    "visited": ":visited",
}

PSEUDO_ELEMENTS: Dict[str, str] = {
    "after": "::after",
    "backdrop": "::backdrop",
    "before": "::before",
    "file": "::file-selector-button",
    "first-letter": "::first-letter",
    "first-line": "::first-line",
    "marker": "::marker",
    "placeholder": "::placeholder",
    "selection": "::selection",
}

_PSEUDO_ORDER = list(PSEUDO_CLASSES) + list(PSEUDO_ELEMENTS)
_PSEUDO_RE = re.compile(
    r"^(" + "|".join(sorted(map(re.escape, _PSEUDO_ORDER), key=len, reverse=True)) + r"):"
)
_GROUP_RE = re.compile(
    r"^(group|peer)-(" + "|".join(sorted(map(re.escape, PSEUDO_CLASSES), key=len, reverse=True)) + r"):"
)


def _pseudo(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    m = _PSEUDO_RE.match(matcher)
    if not m:
        return None
    name = m.group(1)
    suffix = PSEUDO_CLASSES.get(name) or PSEUDO_ELEMENTS[name]
    return VariantMatch(
        matcher=matcher[m.end():],
        selector=lambda s: f"{s}{suffix}",
        sort=_PSEUDO_ORDER.index(name) + 1,
    )


def _group_peer(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    m = _GROUP_RE.match(matcher)
    if not m:
        return None
    kind, name = m.group(1), m.group(2)
    pseudo = PSEUDO_CLASSES[name]
    if kind == "group":
        selector = lambda s: f".group{pseudo} {s}"  # noqa: E731
    else:
        selector = lambda s: f".peer{pseudo}~{s}"  # noqa: E731
    return VariantMatch(matcher=matcher[m.end():], selector=selector, sort=100 + _PSEUDO_ORDER.index(name))


def _sorted_breakpoints(ctx: VariantContext) -> List[Tuple[str, str]]:
    points = ctx.theme.get("breakpoints") or {}

    def _px(value: str) -> float:
        m = re.match(r"^([\d.]+)", str(value))
        return float(m.group(1)) if m else 0.0

    return sorted(points.items(), key=lambda kv: _px(kv[1]))


def _breakpoints(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    for order, (name, size) in enumerate(_sorted_breakpoints(ctx)):
        for prefix, query in (
            (f"{name}:", f"@media (min-width: {size})"),
            (f"lt-{name}:", f"@media (max-width: calc({size} - 0.1px))"),
        ):
            if matcher.startswith(prefix):
                parent_order = 1000 + order if not prefix.startswith("lt-") else 500 - order
                return VariantMatch(matcher=matcher[len(prefix):], parent=query, parent_order=parent_order)
    return None


def _dark(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    for prefix, cls in (("dark:", ".dark"), ("light:", ".light")):
        if matcher.startswith(prefix):
            return VariantMatch(matcher=matcher[len(prefix):], selector=lambda s, c=cls: f"{c} {s}")
    return None


def _print(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    if matcher.startswith("print:"):
        return VariantMatch(matcher=matcher[len("print:"):], parent="@media print", parent_order=2000)
    return None


def _important_body(entries: CSSEntries) -> CSSEntries:
    return [
        (k, v if v.endswith("!important") or k.startswith("--") else f"{v} !important")
        for k, v in entries
    ]


def _important(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    if matcher.startswith("!"):
        return VariantMatch(matcher=matcher[1:], body=_important_body)
    if matcher.endswith("!") and len(matcher) > 1:
        return VariantMatch(matcher=matcher[:-1], body=_important_body)
    return None


def _negate(value: str) -> str:
    if value.startswith("var("):
        return f"calc({value} * -1)"
    return re.sub(r"(^|\s)(\d|\.\d)", r"\1-\2", value)


def _negative_body(entries: CSSEntries) -> Optional[CSSEntries]:
    changed = False
    out: CSSEntries = []
    for k, v in entries:
        if not k.startswith("--un-") or k.endswith(("-x", "-y", "-z", "-rotate")):
            if _NEGATABLE_RE.match(v) and v != "0":
                out.append((k, _negate(v)))
                changed = True
                continue
        out.append((k, v))
    return out if changed else None


def _negative(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
    if matcher.startswith("-") and len(matcher) > 1 and matcher[1] != "-":
        return VariantMatch(matcher=matcher[1:], body=_negative_body)
    return None


variant_important = Variant("important", _important)
variant_negative = Variant("negative", _negative)
variant_breakpoints = Variant("breakpoints", _breakpoints, multi_pass=True,
                              autocomplete=("sm:", "md:", "lg:", "xl:", "2xl:"))
variant_dark = Variant("dark", _dark, autocomplete=("dark:", "light:"))
variant_print = Variant("print", _print, autocomplete=("print:",))
variant_pseudo = Variant("pseudo", _pseudo, multi_pass=True,
                         autocomplete=tuple(f"{name}:" for name in _PSEUDO_ORDER))
variant_group_peer = Variant("group-peer", _group_peer,
                             autocomplete=tuple(f"{kind}-{name}:" for kind in ("group", "peer") for name in PSEUDO_CLASSES))


def default_variants() -> List[Variant]:
    return [
        variant_important,
        variant_negative,
        variant_breakpoints,
        variant_dark,
        variant_print,
        variant_group_peer,
        variant_pseudo,
    ]
