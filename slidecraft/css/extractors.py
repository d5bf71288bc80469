# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/extractors.py
from __future__ import annotations

import re
from typing import Iterable, List, Set

from slidecraft.css.config import Extractor, ExtractorContext

DEFAULT_SPLIT_RE = re.compile(r"""[\\:]?[\s'"`;{}]+""")
SPLIT_WITH_VARIANT_GROUP_RE = re.compile(r"""([\\:]?[\s"'`;<>]|:\(|\)"|\)\s)""")
VALID_TOKEN_RE = re.compile(r"[\w\u00a0-\uffff%-?]")

_ELEMENT_RE = re.compile(r"<\w[\w:.$-]*\s((?:'[^']*'|\"[^\"]*\"|`[^`]*`|\{[^}]*\}|[^>'\"`{}])*)/?>", re.S)
_ATTR_RE = re.compile(r"""(?:\s|^)([?]|(?!\d|-{2}|-\d)[\w\u00a0-\uffff:!%.~<-]+)=?(?:"([^"]*)"|'([^']*)'|\{([^}]*)\})?""")
_IGNORED_ATTRS = {"class", "className", "style", "href", "src", "id", "alt", "title", "type", "name", "value"}


def split_code(code: str) -> List[str]:
    return [token for token in DEFAULT_SPLIT_RE.split(code) if token]


def is_valid_token(token: str) -> bool:
    return bool(token) and bool(VALID_TOKEN_RE.search(token))


def _extract_split(ctx: ExtractorContext) -> Iterable[str]:
    return split_code(ctx.code)


extractor_split = Extractor(name="atomic/extractor-split", extract=_extract_split, order=0)


def extract_attributify(code: str, non_valued: bool = True) -> Set[str]:
    """``<div mt="5 hover:2" flex>`` -> {'[mt~="5"]', '[mt~="hover:2"]', '[flex=""]'}"""
    out: Set[str] = set()
    for element in _ELEMENT_RE.finditer(code):
        for m in _ATTR_RE.finditer(element.group(1)):
            name = m.group(1)
            if not name or name in _IGNORED_ATTRS or name.startswith(("v-", ":", "@", "data-", "aria-")):
                continue
            value = next((g for g in m.group(2, 3, 4) if g is not None), None)
            if value is None:
                if non_valued and "=" not in m.group(0):
                    out.add(f'[{name}=""]')
                continue
            for token in value.split():
                out.add(f'[{name}~="{token}"]')
    return out


def make_attributify_extractor(non_valued: bool = True) -> Extractor:
    return Extractor(
        name="atomic/preset-attributify/extractor",
        extract=lambda ctx: extract_attributify(ctx.code, non_valued),
        order=10,
    )
