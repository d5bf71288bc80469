# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/generator.py
"""
On-demand atomic CSS generator.

generate(code):
  1. extract candidate tokens (split extractor + configured extractors)
  2. per token (cached): strip variants, expand shortcuts or match a rule
  3. compose selectors / bodies / at-rule parents from the applied variants
  4. group by layer, then by parent, sort, merge identical bodies
  5. emit ``/* layer: <name> */`` sections in layer order, preflights first
"""
from __future__ import annotations

import inspect
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from slidecraft.css.config import (
    CSSEntries,
    ExtractorContext,
    PreflightContext,
    ResolvedConfig,
    RuleContext,
    RuleMeta,
    UserConfig,
    VariantContext,
    VariantMatch,
    resolve_config,
)
from slidecraft.css.extractors import extractor_split, is_valid_token
from slidecraft.css.utils import entries_to_css, expand_variant_group, normalize_entries, to_escaped_selector

logger = logging.getLogger(__name__)

MAX_VARIANTS = 50
SHORTCUT_DEPTH = 5
SHORTCUTS_LAYER = "shortcuts"
DEFAULT_LAYER = "default"


@dataclass
class StyleUtil:
    """One generated CSS rule before layer assembly."""
    index: int
    selector: Optional[str]
    entries: CSSEntries
    parents: Tuple[str, ...] = ()
    parent_order: int = 0
    sort: int = 0
    variant_sort: int = 0
    layer: str = DEFAULT_LAYER
    no_merge: bool = False
    # raw CSS returned by a rule instead of a body
    css: Optional[str] = None

    @property
    def body(self) -> str:
        return entries_to_css(self.entries)


@dataclass
class _RuleHit:
    index: int
    body: Union[CSSEntries, str]
    meta: RuleMeta


@dataclass
class GenerateResult:
    css: str
    layers: List[str]
    matched: Set[str]
    _layer_css: Dict[str, str] = field(default_factory=dict, repr=False)

    def get_layer(self, name: str = DEFAULT_LAYER) -> Optional[str]:
        return self._layer_css.get(name)

    def get_layers(self, includes: Optional[Iterable[str]] = None, excludes: Optional[Iterable[str]] = None) -> str:
        includes = list(includes) if includes is not None else self.layers
        excludes = set(excludes or ())
        return "\n".join(
            self._layer_css[name] for name in self.layers
            if name in includes and name not in excludes
        )


class AtomicGenerator:

    def __init__(self, config: Optional[UserConfig] = None, defaults: Optional[UserConfig] = None):
        self.user_config = config
        self.defaults = defaults
        self.config: ResolvedConfig = resolve_config(config, defaults)
        self._cache: Dict[str, Optional[List[StyleUtil]]] = {}

    def set_config(self, config: Optional[UserConfig] = None, defaults: Optional[UserConfig] = None) -> None:
        self.user_config = config
        if defaults is not None:
            self.defaults = defaults
        self.config = resolve_config(config, self.defaults)
        self._cache.clear()

    # ----------------------------------------------------------------------------------
    # Extraction
    # ----------------------------------------------------------------------------------

    async def apply_extractors(self, code: str, id: Optional[str] = None) -> Set[str]:
        extractors = [extractor_split] + [e for e in self.config.extractors if e is not extractor_split]
        tokens: Set[str] = set()
        ctx = ExtractorContext(code=code, id=id)
        for extractor in extractors:
            result = extractor.extract(ctx)
            if inspect.isawaitable(result):
                result = await result
            tokens.update(t for t in (result or ()) if t)
        return tokens

    # ----------------------------------------------------------------------------------
    # Variants
    # ----------------------------------------------------------------------------------

    def match_variants(self, raw: str, current: Optional[str] = None) -> Tuple[str, List[VariantMatch]]:
        processed = current if current is not None else raw
        applied: List[VariantMatch] = []
        used: Set[int] = set()
        ctx = VariantContext(theme=self.config.theme, generator=self)
        while True:
            for variant in self.config.variants:
                if not variant.multi_pass and id(variant) in used:
                    continue
                result = variant.match(processed, ctx)
                if result is None or result.matcher == processed:
                    continue
                processed = result.matcher
                applied.append(result)
                used.add(id(variant))
                break
            else:
                break
            if len(applied) > MAX_VARIANTS:
                raise ValueError(f"too many variants applied to {raw!r}")
        return processed, applied

    def _compose(self, raw: str, variants: Sequence[VariantMatch], hit: _RuleHit,
                 layer: Optional[str] = None) -> Optional[StyleUtil]:
        parents: List[str] = []
        parent_order = 0
        variant_sort = 0
        variant_layer = None
        for v in variants:
            if v.parent:
                parents.append(v.parent)
                parent_order = max(parent_order, v.parent_order)
            variant_sort += v.sort
            variant_layer = v.layer or variant_layer
        resolved_layer = variant_layer or layer or hit.meta.layer or DEFAULT_LAYER

        if isinstance(hit.body, str):
            return StyleUtil(hit.index, None, [], tuple(parents), parent_order, hit.meta.sort,
                             variant_sort, resolved_layer, True, css=hit.body)

        selector = to_escaped_selector(raw)
        entries: Optional[CSSEntries] = list(hit.body)
        for v in reversed(variants):
            if v.selector is not None:
                selector = v.selector(selector)
            if v.body is not None:
                entries = v.body(entries)
                if entries is None:
                    return None
        return StyleUtil(hit.index, selector, entries, tuple(parents), parent_order, hit.meta.sort,
                         variant_sort, resolved_layer, hit.meta.no_merge)

    # ----------------------------------------------------------------------------------
    # Rules / shortcuts
    # ----------------------------------------------------------------------------------

    @staticmethod
    def _normalize_body(result: Any) -> Optional[Union[CSSEntries, str]]:
        if result is None or result is False:
            return None
        if isinstance(result, str):
            return result or None
        if isinstance(result, Mapping):
            return normalize_entries(result) or None
        if isinstance(result, (list, tuple)):
            return normalize_entries(result) or None
        raise TypeError(f"invalid rule result: {result!r}")

    async def match_rule(self, processed: str, raw: str, internal: bool = False) -> Optional[_RuleHit]:
        ctx = RuleContext(raw=raw, current=processed, theme=self.config.theme, generator=self)
        static = self.config.static_rules.get(processed)
        if static is not None:
            index, rule = static
            if internal or not rule.meta.internal:
                result = rule.handler
                if callable(result):
                    result = result(re.match(re.escape(processed), processed), ctx)
                    if inspect.isawaitable(result):
                        result = await result
                body = self._normalize_body(result)
                if body is not None:
                    return _RuleHit(index, body, rule.meta)

        for index, rule in reversed(self.config.dynamic_rules):
            if rule.meta.internal and not internal:
                continue
            m = rule.matcher.match(processed)
            if not m:
                continue
            result = rule.handler(m, ctx) if callable(rule.handler) else rule.handler
            if inspect.isawaitable(result):
                result = await result
            body = self._normalize_body(result)
            if body is not None:
                return _RuleHit(index, body, rule.meta)
        return None

    def expand_shortcut(self, processed: str, depth: int = SHORTCUT_DEPTH) -> Optional[Tuple[List[str], Optional[str]]]:
        if depth <= 0:
            return None
        shortcut = self.config.static_shortcuts.get(processed)
        expansion: Any = None
        if shortcut is not None:
            expansion = shortcut.expansion
        else:
            ctx = RuleContext(raw=processed, current=processed, theme=self.config.theme, generator=self)
            for candidate in self.config.dynamic_shortcuts:
                m = candidate.matcher.match(processed)
                if not m:
                    continue
                expansion = candidate.expansion(m, ctx) if callable(candidate.expansion) else candidate.expansion
                if expansion:
                    shortcut = candidate
                    break
        if shortcut is None or not expansion:
            return None
        if isinstance(expansion, str):
            expansion = expand_variant_group(expansion).split()

        items: List[str] = []
        for item in expansion:
            nested = self.expand_shortcut(item, depth - 1)
            items.extend(nested[0] if nested else [item])
        return items, shortcut.layer

    async def _stringify_shortcut(self, raw: str, outer: List[VariantMatch], items: List[str],
                                  layer: Optional[str]) -> Optional[List[StyleUtil]]:
        merged: Dict[Tuple[Tuple[str, ...], str, str], StyleUtil] = {}
        raws: List[StyleUtil] = []
        for item in items:
            processed, inner = self.match_variants(item)
            hit = await self.match_rule(processed, item, internal=True)
            if hit is None:
                logger.debug("Shortcut %r: unmatched utility %r", raw, item)
                continue
            util = self._compose(raw, outer + inner, hit, layer or SHORTCUTS_LAYER)
            if util is None:
                continue
            if util.css is not None:
                raws.append(util)
                continue
            key = (util.parents, util.selector, util.layer)
            if key in merged:
                existing = merged[key]
                existing.entries = existing.entries + [e for e in util.entries if e not in existing.entries]
            else:
                util.index = -1
                merged[key] = util
        utils = list(merged.values()) + raws
        return utils or None

    async def parse_token(self, raw: str) -> Optional[List[StyleUtil]]:
        if raw in self._cache:
            return self._cache[raw]
        if self._is_blocked(raw) or not is_valid_token(raw):
            self._cache[raw] = None
            return None

        processed, variants = self.match_variants(raw)
        expanded = self.expand_shortcut(processed)
        if expanded is not None:
            items, layer = expanded
            utils = await self._stringify_shortcut(raw, variants, items, layer)
        else:
            hit = await self.match_rule(processed, raw)
            util = self._compose(raw, variants, hit) if hit is not None else None
            utils = [util] if util is not None else None
        self._cache[raw] = utils
        return utils

    def _is_blocked(self, raw: str) -> bool:
        for entry in self.config.blocklist:
            if isinstance(entry, str) and entry == raw:
                return True
            if isinstance(entry, re.Pattern) and entry.search(raw):
                return True
        return False

    # ----------------------------------------------------------------------------------
    # Assembly
    # ----------------------------------------------------------------------------------

    @staticmethod
    def _render_group(utils: List[StyleUtil]) -> List[str]:
        ordered = sorted(
            utils,
            key=lambda u: (u.index, u.sort, u.variant_sort, u.selector or "", u.css or u.body),
        )
        lines: List[str] = []
        by_body: Dict[str, List[str]] = {}
        slots: List[Union[str, Tuple[str, List[str]]]] = []
        for util in ordered:
            if util.css is not None:
                slots.append(util.css)
                continue
            body = util.body
            if util.no_merge:
                slots.append(f"{util.selector}{{{body}}}")
                continue
            if body in by_body:
                if util.selector not in by_body[body]:
                    by_body[body].append(util.selector)
                continue
            by_body[body] = [util.selector]
            slots.append((body, by_body[body]))
        for slot in slots:
            if isinstance(slot, str):
                lines.append(slot)
            else:
                body, selectors = slot
                lines.append(f"{','.join(selectors)}{{{body}}}")
        return lines

    def _render_layer(self, utils: List[StyleUtil]) -> List[str]:
        groups: Dict[Tuple[str, ...], List[StyleUtil]] = {}
        orders: Dict[Tuple[str, ...], int] = {}
        for util in utils:
            groups.setdefault(util.parents, []).append(util)
            orders[util.parents] = max(orders.get(util.parents, 0), util.parent_order)
        lines: List[str] = []
        for parents in sorted(groups, key=lambda p: (orders[p], p)):
            content = "\n".join(self._render_group(groups[parents]))
            for parent in reversed(parents):
                content = f"{parent}{{\n{content}\n}}"
            lines.append(content)
        return lines

    async def generate(self, code: str, id: Optional[str] = None, preflights: bool = True,
                       safelist: bool = True) -> GenerateResult:
        tokens = await self.apply_extractors(code, id)
        if safelist:
            tokens.update(self.config.safelist)

        matched: Set[str] = set()
        by_layer: Dict[str, List[StyleUtil]] = {}
        for token in sorted(tokens):
            utils = await self.parse_token(token)
            if not utils:
                continue
            matched.add(token)
            for util in utils:
                by_layer.setdefault(util.layer, []).append(util)

        preflight_css: Dict[str, List[str]] = {}
        if preflights:
            ctx = PreflightContext(generator=self, theme=self.config.theme)
            for preflight in self.config.preflights:
                css = await preflight.css(ctx)
                if css:
                    preflight_css.setdefault(preflight.layer, []).append(css)

        names = sorted(set(by_layer) | set(preflight_css), key=self.config.layer_order)
        layer_css: Dict[str, str] = {}
        for name in names:
            parts = preflight_css.get(name, []) + self._render_layer(by_layer.get(name, []))
            content = "\n".join(p for p in parts if p)
            if content:
                layer_css[name] = f"/* layer: {name} */\n{content}"
        layers = [name for name in names if name in layer_css]
        return GenerateResult(
            css="\n".join(layer_css[name] for name in layers),
            layers=layers,
            matched=matched,
            _layer_css=layer_css,
        )


def create_generator(config: Optional[UserConfig] = None, defaults: Optional[UserConfig] = None) -> AtomicGenerator:
    return AtomicGenerator(config, defaults)
