# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/presets/preset_attributify.py
from __future__ import annotations

import re
from typing import Any, Optional

from slidecraft.css.config import Preset, Variant, VariantContext, VariantMatch
from slidecraft.css.extractors import make_attributify_extractor

_ATTRIBUTE_TOKEN_RE = re.compile(r'^\[([\w:!%.~<-]+)(~?=)"(.*)"\]$')


def _attributify_match(prefix: str):
    def match(matcher: str, ctx: VariantContext) -> Optional[VariantMatch]:
        m = _ATTRIBUTE_TOKEN_RE.match(matcher)
        if not m:
            return None
        name, op, body = m.group(1), m.group(2), m.group(3)
        if prefix:
            if not name.startswith(prefix):
                return None
            name = name[len(prefix):]
        if op == "=":
            return VariantMatch(matcher=name) if body == "" else None

        variants, _, value = body.rpartition(":")
        if variants:
            variants += ":"
        important = ""
        if value.startswith("!"):
            important, value = "!", value[1:]
        negative = ""
        if value.startswith("-") and len(value) > 1:
            negative, value = "-", value[1:]
        if value == "~":
            utility = name
        else:
            utility = f"{name}-{value}"
        return VariantMatch(matcher=f"{variants}{important}{negative}{utility}")
    return match


def preset_attributify(**options: Any) -> Preset:
    """``<div mt="5 hover:2" flex>``: attribute names and values compose utilities."""
    prefix = options.get("prefix", "")
    non_valued = options.get("non_valued", True)
    return Preset(
        name="atomic/preset-attributify",
        variants=[Variant("attributify", _attributify_match(prefix))],
        extractors=[make_attributify_extractor(non_valued)],
        options=dict(options),
    )
