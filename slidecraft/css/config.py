# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/config.py
"""
Configuration model of the atomic CSS engine.

User configurations (usually produced by the sandboxed config evaluator) and
presets are plain containers; ``resolve_config`` flattens them into one
ResolvedConfig the generator works with:

- presets first (depth-first, in order), user entries after
- rules / variants / shortcuts / preflights / extractors / transformers concatenated
- theme deep-merged, layers merged over the default layer order
"""
from __future__ import annotations

import inspect
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Pattern, Sequence, Tuple, Union

from slidecraft.css.magic import EditableString

DEFAULT_LAYERS: Dict[str, int] = {"preflights": -100, "shortcuts": -10, "default": 0}

CSSEntries = List[Tuple[str, str]]


class Enforce(str, Enum):
    PRE = "pre"
    DEFAULT = "default"
    POST = "post"


@dataclass(frozen=True)
class HighlightAnnotation:
    offset: int
    length: int
    class_name: str


@dataclass
class TransformContext:
    """What a transformer can see besides the buffer."""
    generator: Any
    theme: Dict[str, Any] = field(default_factory=dict)


TransformFn = Callable[[EditableString, str, TransformContext],
                       Union[None, Iterable[HighlightAnnotation], Awaitable[Optional[Iterable[HighlightAnnotation]]]]]


@dataclass
class Transformer:
    """Text pass over markup or CSS. ``enforce`` picks the pass it runs in."""
    name: str
    transform: TransformFn
    enforce: Enforce = Enforce.DEFAULT
    id_filter: Optional[Callable[[str], bool]] = None

    def __post_init__(self):
        self.enforce = Enforce(self.enforce or Enforce.DEFAULT)

    async def apply(self, buffer: EditableString, id: str, context: TransformContext) -> List[HighlightAnnotation]:
        if self.id_filter is not None and not self.id_filter(id):
            return []
        result = self.transform(buffer, id, context)
        if inspect.isawaitable(result):
            result = await result
        return list(result or [])


@dataclass
class PreflightContext:
    generator: Any
    theme: Dict[str, Any]


@dataclass
class Preflight:
    get_css: Callable[[PreflightContext], Union[str, None, Awaitable[Optional[str]]]]
    layer: str = "preflights"

    async def css(self, context: PreflightContext) -> str:
        result = self.get_css(context)
        if inspect.isawaitable(result):
            result = await result
        return result or ""


@dataclass
class ExtractorContext:
    code: str
    id: Optional[str] = None


@dataclass
class Extractor:
    name: str
    extract: Callable[[ExtractorContext], Union[Iterable[str], None, Awaitable[Optional[Iterable[str]]]]]
    order: int = 0


@dataclass
class RuleMeta:
    layer: Optional[str] = None
    sort: int = 0
    autocomplete: Tuple[str, ...] = ()
    no_merge: bool = False
    # only reachable through shortcuts
    internal: bool = False


@dataclass
class RuleContext:
    raw: str
    current: str
    theme: Dict[str, Any]
    generator: Any


RuleBody = Union[None, str, Mapping[str, Any], Sequence[Tuple[str, Any]]]
RuleHandler = Union[Mapping[str, Any], Callable[[re.Match, RuleContext], RuleBody]]


@dataclass
class Rule:
    matcher: Union[str, Pattern]
    handler: RuleHandler
    meta: RuleMeta = field(default_factory=RuleMeta)

    @property
    def static(self) -> bool:
        return isinstance(self.matcher, str)


@dataclass
class Shortcut:
    matcher: Union[str, Pattern]
    expansion: Union[str, Sequence[str], Callable[[re.Match, RuleContext], Union[str, Sequence[str], None]]]
    layer: Optional[str] = None

    @property
    def static(self) -> bool:
        return isinstance(self.matcher, str)


@dataclass
class VariantMatch:
    matcher: str
    selector: Optional[Callable[[str], str]] = None
    parent: Optional[str] = None
    parent_order: int = 0
    body: Optional[Callable[[CSSEntries], Optional[CSSEntries]]] = None
    sort: int = 0
    layer: Optional[str] = None


@dataclass
class VariantContext:
    theme: Dict[str, Any]
    generator: Any


@dataclass
class Variant:
    name: str
    match: Callable[[str, VariantContext], Optional[VariantMatch]]
    multi_pass: bool = False
    autocomplete: Tuple[str, ...] = ()


@dataclass
class Preset:
    name: str
    rules: List[Any] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)
    shortcuts: List[Any] = field(default_factory=list)
    preflights: List[Any] = field(default_factory=list)
    extractors: List[Extractor] = field(default_factory=list)
    transformers: List[Transformer] = field(default_factory=list)
    theme: Dict[str, Any] = field(default_factory=dict)
    layers: Dict[str, int] = field(default_factory=dict)
    presets: List["Preset"] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass
class UserConfig:
    rules: List[Any] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)
    shortcuts: Any = field(default_factory=list)
    preflights: List[Any] = field(default_factory=list)
    extractors: List[Extractor] = field(default_factory=list)
    transformers: List[Transformer] = field(default_factory=list)
    presets: List[Preset] = field(default_factory=list)
    theme: Dict[str, Any] = field(default_factory=dict)
    layers: Dict[str, int] = field(default_factory=dict)
    safelist: List[str] = field(default_factory=list)
    blocklist: List[Any] = field(default_factory=list)


def define_config(config: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> UserConfig:
    """``define_config(rules=[...], presets=[...])`` or ``define_config({...})``"""
    if isinstance(config, UserConfig):
        return config
    values = {**dict(config or {}), **kwargs}
    unknown = set(values) - set(UserConfig.__dataclass_fields__)
    if unknown:
        raise TypeError(f"unknown config keys: {', '.join(sorted(unknown))}")
    if isinstance(values.get("shortcuts"), Mapping):
        values["shortcuts"] = [values["shortcuts"]]
    return UserConfig(**{k: list(v) if isinstance(v, tuple) else v for k, v in values.items()})


# --------------------------------------------------------------------------------------
# Normalization
# --------------------------------------------------------------------------------------

def _as_meta(meta: Any) -> RuleMeta:
    if meta is None:
        return RuleMeta()
    if isinstance(meta, RuleMeta):
        return meta
    if isinstance(meta, Mapping):
        meta = dict(meta)
        if "autocomplete" in meta:
            auto = meta["autocomplete"]
            meta["autocomplete"] = (auto,) if isinstance(auto, str) else tuple(auto)
        return RuleMeta(**meta)
    raise TypeError(f"invalid rule meta: {meta!r}")


def normalize_rule(entry: Any) -> Rule:
    if isinstance(entry, Rule):
        return entry
    if isinstance(entry, (list, tuple)) and len(entry) in (2, 3):
        matcher, handler = entry[0], entry[1]
        if not isinstance(matcher, (str, re.Pattern)):
            raise TypeError(f"rule matcher must be a string or regex, got {type(matcher).__name__}")
        if not (isinstance(handler, Mapping) or callable(handler) or isinstance(handler, (list, tuple))):
            raise TypeError(f"invalid rule body for {matcher!r}")
        return Rule(matcher, handler, _as_meta(entry[2] if len(entry) == 3 else None))
    raise TypeError(f"invalid rule: {entry!r}")


def normalize_shortcuts(entries: Any) -> List[Shortcut]:
    if entries is None:
        return []
    if isinstance(entries, (Mapping, Shortcut)):
        entries = [entries]
    out: List[Shortcut] = []
    for entry in entries:
        if isinstance(entry, Shortcut):
            out.append(entry)
        elif isinstance(entry, Mapping):
            out.extend(Shortcut(name, expansion) for name, expansion in entry.items())
        elif isinstance(entry, (list, tuple)) and len(entry) in (2, 3):
            meta = entry[2] if len(entry) == 3 else {}
            out.append(Shortcut(entry[0], entry[1], layer=(meta or {}).get("layer")))
        else:
            raise TypeError(f"invalid shortcut: {entry!r}")
    return out


def normalize_preflight(entry: Any) -> Preflight:
    if isinstance(entry, Preflight):
        return entry
    if isinstance(entry, Mapping) and "get_css" in entry:
        return Preflight(entry["get_css"], entry.get("layer") or "preflights")
    if isinstance(entry, str):
        return Preflight(lambda _ctx, css=entry: css)
    raise TypeError(f"invalid preflight: {entry!r}")


def _typed(entries: Iterable[Any], kind: type, what: str) -> list:
    out = []
    for entry in entries or []:
        if not isinstance(entry, kind):
            raise TypeError(f"invalid {what}: {entry!r}")
        out.append(entry)
    return out


def merge_deep(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in (override or {}).items():
        if isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_deep(out[key], value)
        else:
            out[key] = value
    return out


def flatten_presets(presets: Iterable[Preset]) -> List[Preset]:
    out: List[Preset] = []
    for preset in presets or []:
        if not isinstance(preset, Preset):
            raise TypeError(f"invalid preset: {preset!r}")
        out.extend(flatten_presets(preset.presets))
        if all(p is not preset for p in out):
            out.append(preset)
    return out


@dataclass
class ResolvedConfig:
    rules: List[Rule]
    variants: List[Variant]
    shortcuts: List[Shortcut]
    preflights: List[Preflight]
    extractors: List[Extractor]
    transformers: List[Transformer]
    theme: Dict[str, Any]
    layers: Dict[str, int]
    safelist: List[str]
    blocklist: List[Any]
    presets: List[Preset] = field(default_factory=list)

    def __post_init__(self):
        self.static_rules: Dict[str, Tuple[int, Rule]] = {}
        self.dynamic_rules: List[Tuple[int, Rule]] = []
        for index, rule in enumerate(self.rules):
            if rule.static:
                self.static_rules[rule.matcher] = (index, rule)
            else:
                self.dynamic_rules.append((index, rule))
        self.static_shortcuts: Dict[str, Shortcut] = {}
        self.dynamic_shortcuts: List[Shortcut] = []
        for shortcut in self.shortcuts:
            if shortcut.static:
                self.static_shortcuts[shortcut.matcher] = shortcut
            else:
                self.dynamic_shortcuts.append(shortcut)

    def layer_order(self, layer: str) -> Tuple[int, str]:
        return self.layers.get(layer, 0), layer


def resolve_config(user: Optional[UserConfig] = None, defaults: Optional[UserConfig] = None) -> ResolvedConfig:
    sources: List[Any] = []
    configs = [c for c in (defaults, user) if c is not None]
    for config in configs:
        if isinstance(config, Mapping):
            config = define_config(config)
        sources.extend(flatten_presets(config.presets))
        sources.append(config)

    rules: List[Rule] = []
    variants: List[Variant] = []
    shortcuts: List[Shortcut] = []
    preflights: List[Preflight] = []
    extractors: List[Extractor] = []
    transformers: List[Transformer] = []
    theme: Dict[str, Any] = {}
    layers: Dict[str, int] = dict(DEFAULT_LAYERS)
    safelist: List[str] = []
    blocklist: List[Any] = []

    for src in sources:
        rules.extend(normalize_rule(r) for r in src.rules or [])
        variants.extend(_typed(src.variants, Variant, "variant"))
        shortcuts.extend(normalize_shortcuts(src.shortcuts))
        preflights.extend(normalize_preflight(p) for p in src.preflights or [])
        extractors.extend(_typed(src.extractors, Extractor, "extractor"))
        transformers.extend(_typed(src.transformers, Transformer, "transformer"))
        theme = merge_deep(theme, src.theme or {})
        layers.update(src.layers or {})
        if isinstance(src, UserConfig):
            safelist.extend(src.safelist or [])
            blocklist.extend(src.blocklist or [])

    extractors.sort(key=lambda e: e.order)
    return ResolvedConfig(
        rules=rules,
        variants=variants,
        shortcuts=shortcuts,
        preflights=preflights,
        extractors=extractors,
        transformers=transformers,
        theme=theme,
        layers=layers,
        safelist=safelist,
        blocklist=blocklist,
        presets=[s for s in sources if isinstance(s, Preset)],
    )
