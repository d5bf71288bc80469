# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/autocomplete.py
from __future__ import annotations

import itertools
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from slidecraft.css.generator import AtomicGenerator

MAX_SUGGESTIONS = 100

_SHORTHANDS: Dict[str, Sequence[str]] = {
    "num": ("0", "1", "2", "3", "4", "5", "6", "8", "10", "12", "16", "20", "24", "32", "48", "64"),
    "percent": ("0", "10", "20", "25", "30", "40", "50", "60", "70", "75", "80", "90", "100"),
    "directions": ("", "x", "y", "t", "r", "b", "l", "s", "e"),
}
_PLACEHOLDER_RE = re.compile(r"<(\w+)>|\$(\w+)|\(([\w|-]+)\)")
_TOKEN_BOUNDARY_RE = re.compile(r"""[\s'"`;{}<>=]""")


@dataclass
class Replacement:
    start: int
    end: int
    replacement: str


@dataclass
class SuggestResult:
    suggestions: List[Tuple[str, str]] = field(default_factory=list)
    resolve_replacement: Callable[[str], Replacement] = lambda s: Replacement(0, 0, s)


def _theme_keys(theme: Mapping[str, Any], section: str) -> List[str]:
    values = theme.get(section)
    if not isinstance(values, Mapping):
        return []
    out: List[str] = []
    for key, value in values.items():
        if key == "DEFAULT":
            continue
        if section == "colors" and isinstance(value, Mapping):
            out.append(key)
            out.extend(f"{key}-{shade}" for shade in value if shade != "DEFAULT")
        else:
            out.append(key)
    return out


def expand_template(template: str, theme: Mapping[str, Any]) -> List[str]:
    """``p<directions>-<num>`` / ``text-$colors`` / ``ease-(in|out)`` -> concrete candidates"""
    pieces: List[Sequence[str]] = []
    cursor = 0
    for m in _PLACEHOLDER_RE.finditer(template):
        pieces.append((template[cursor:m.start()],))
        if m.group(1):
            pieces.append(_SHORTHANDS.get(m.group(1), ()))
        elif m.group(2):
            pieces.append(_theme_keys(theme, m.group(2)))
        else:
            pieces.append(m.group(3).split("|"))
        cursor = m.end()
    pieces.append((template[cursor:],))
    return ["".join(combo).replace("--", "-").rstrip("-") for combo in itertools.product(*pieces)]


class Autocomplete:

    def __init__(self, generator: AtomicGenerator):
        self.generator = generator
        self._candidates: Optional[List[str]] = None
        self._variants: Optional[List[str]] = None

    def reset(self) -> None:
        self._candidates = None
        self._variants = None

    @property
    def candidates(self) -> List[str]:
        if self._candidates is None:
            config = self.generator.config
            found: Set[str] = set()
            for name, (_, rule) in config.static_rules.items():
                if not rule.meta.internal:
                    found.add(name)
            for _, rule in config.dynamic_rules:
                for template in rule.meta.autocomplete:
                    found.update(expand_template(template, config.theme))
            found.update(config.static_shortcuts)
            self._candidates = sorted(c for c in found if c)
        return self._candidates

    @property
    def variants(self) -> List[str]:
        if self._variants is None:
            self._variants = sorted({a for v in self.generator.config.variants for a in v.autocomplete})
        return self._variants

    @staticmethod
    def _rank(query: str, values: Iterable[str]) -> List[str]:
        hits = [v for v in values if query in v]
        return sorted(hits, key=lambda v: (not v.startswith(query), len(v), v))

    async def suggest(self, text: str) -> List[str]:
        if not text:
            return []
        head, sep, query = text.rpartition(":")
        prefix = f"{head}{sep}"
        if not query:
            return [f"{prefix}{v}" for v in self.variants][:MAX_SUGGESTIONS]
        ranked = self._rank(query, self.candidates)
        variants = [v for v in self._rank(query, self.variants) if v.startswith(query)]
        out: List[str] = []
        for value in itertools.chain(ranked, variants):
            full = f"{prefix}{value}"
            if full not in out:
                out.append(full)
            if len(out) >= MAX_SUGGESTIONS:
                break
        return out

    async def suggest_in_file(self, content: str, cursor: int) -> SuggestResult:
        cursor = max(0, min(cursor, len(content)))
        start = cursor
        while start > 0 and not _TOKEN_BOUNDARY_RE.match(content[start - 1]):
            start -= 1
        end = cursor
        while end < len(content) and not _TOKEN_BOUNDARY_RE.match(content[end]):
            end += 1
        token = content[start:cursor]
        suggestions = await self.suggest(token)
        return SuggestResult(
            suggestions=[(value, value) for value in suggestions],
            resolve_replacement=lambda value: Replacement(start, end, value),
        )


def create_autocomplete(generator: AtomicGenerator) -> Autocomplete:
    return Autocomplete(generator)
