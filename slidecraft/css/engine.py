# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/engine.py
"""
CSS generation boundary used by the slide orchestrator and the editor hint API.

generate():
  a. evaluate the configuration program in the sandbox
  b. replace any preflight in the custom CSS layer with one carrying the
     caller's CSS (comments stripped, indentation normalized)
  c. run markup through the pre / default / post transformer passes
  d. run the custom CSS through the same passes when the directives
     transformer is configured, otherwise record ``custom_css_warn``
  e. generate the layered stylesheet

Nothing raises past this boundary: failures land in ``custom_config_error``.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from slidecraft.config import get_settings
from slidecraft.css.autocomplete import Autocomplete, create_autocomplete
from slidecraft.css.bundle import DEFAULT_CONFIG_SOURCE, build_module_map
from slidecraft.css.config import (
    Enforce,
    HighlightAnnotation,
    Preflight,
    TransformContext,
    UserConfig,
    define_config,
    normalize_preflight,
)
from slidecraft.css.generator import AtomicGenerator, GenerateResult, create_generator
from slidecraft.css.magic import EditableString
from slidecraft.css.transformers import DIRECTIVES_TRANSFORMER
from slidecraft.errors import EngineNotInitializedError, SlidecraftError
from slidecraft.runtime.modules import ModuleCache
from slidecraft.sandbox.evaluator import evaluate_user_config

logger = logging.getLogger(__name__)

CUSTOM_CSS_LAYER_ORDER = -50
MARKUP_ID = "input.html"
CSS_ID = "input.css"

_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_INDENT_RE = re.compile(r"\n\s+")


def clean_output(code: str) -> str:
    return _INDENT_RE.sub("\n", _BLOCK_COMMENT_RE.sub("", code)).strip()


@dataclass
class GenerateOptions:
    markup: str
    custom_css: str = ""
    custom_config_raw: Optional[str] = None
    layer_name: Optional[str] = None


@dataclass
class GenerateOutput:
    output: Optional[GenerateResult] = None
    annotations: List[HighlightAnnotation] = field(default_factory=list)
    custom_config_error: Optional[BaseException] = None
    custom_css_warn: Optional[BaseException] = None

    @property
    def css(self) -> Optional[str]:
        return self.output.css if self.output is not None else None


@dataclass
class CompletionContext:
    text: str
    pos: int


@dataclass
class CompletionOption:
    label: str
    apply: str
    type: str = "text"
    boost: int = 99


@dataclass
class CompletionResult:
    from_: int
    options: List[CompletionOption]


class MissingDirectivesWarning(SlidecraftError):
    """Custom CSS was emitted without directive processing"""


class CssEngine:

    def __init__(self,
                 custom_config_raw: Optional[str] = None,
                 custom_css_layer_name: Optional[str] = None,
                 module_map: Optional[Mapping[str, Any]] = None,
                 module_cache: Optional[ModuleCache] = None):
        self.custom_config_raw = custom_config_raw or DEFAULT_CONFIG_SOURCE
        self.custom_css_layer_name = custom_css_layer_name or get_settings().CUSTOM_CSS_LAYER
        self.module_map = module_map if module_map is not None else build_module_map()
        self.module_cache = module_cache
        self.generator: Optional[AtomicGenerator] = None
        self.autocomplete: Optional[Autocomplete] = None
        self._init_task: Optional[asyncio.Future] = None

    @property
    def initialized(self) -> bool:
        return self.generator is not None and self.autocomplete is not None

    async def _evaluate(self, source: str) -> UserConfig:
        config = await evaluate_user_config(source, self.module_map, self.module_cache)
        return define_config(config) if config is not None else define_config()

    async def _init(self) -> AtomicGenerator:
        config = await self._evaluate(self.custom_config_raw)
        self.generator = create_generator(config)
        self.autocomplete = create_autocomplete(self.generator)
        logger.debug("CSS engine initialized (%d rules)", len(self.generator.config.rules))
        return self.generator

    async def init(self) -> AtomicGenerator:
        """Evaluate the configuration once; concurrent callers share the same evaluation."""
        if self.generator is not None:
            return self.generator
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._init())
        try:
            return await asyncio.shield(self._init_task)
        except Exception:
            self._init_task = None
            raise

    # ----------------------------------------------------------------------------------
    # transformer passes
    # ----------------------------------------------------------------------------------

    async def _apply_pass(self, code: str, id: str, generator: AtomicGenerator,
                          enforce: Enforce) -> tuple:
        annotations: List[HighlightAnnotation] = []
        ctx = TransformContext(generator=generator, theme=generator.config.theme)
        for transformer in generator.config.transformers:
            if transformer.enforce != enforce:
                continue
            buffer = EditableString(code)
            annotations.extend(await transformer.apply(buffer, id, ctx))
            if buffer.has_changed():
                code = str(buffer)
        return code, annotations

    async def transform(self, code: str, id: str, generator: Optional[AtomicGenerator] = None) -> tuple:
        generator = generator or self.generator
        if generator is None:
            raise EngineNotInitializedError("generator")
        annotations: List[HighlightAnnotation] = []
        for enforce in (Enforce.PRE, Enforce.DEFAULT, Enforce.POST):
            code, found = await self._apply_pass(code, id, generator, enforce)
            annotations.extend(found)
        return code, annotations

    # ----------------------------------------------------------------------------------
    # generate
    # ----------------------------------------------------------------------------------

    def _with_custom_layer(self, config: UserConfig, layer_name: str, holder: Dict[str, str]) -> UserConfig:
        preflights = [p for p in config.preflights if normalize_preflight(p).layer != layer_name]
        preflights.append(Preflight(lambda ctx: holder["css"], layer=layer_name))
        layers = dict(config.layers or {})
        layers.setdefault(layer_name, CUSTOM_CSS_LAYER_ORDER)
        return dataclasses.replace(config, preflights=preflights, layers=layers)

    async def generate(self, options: GenerateOptions) -> GenerateOutput:
        result = GenerateOutput()
        try:
            if self.generator is None:
                raise EngineNotInitializedError("generator")
            layer_name = options.layer_name or self.custom_css_layer_name
            custom_css = options.custom_css or ""
            holder = {"css": clean_output(custom_css)}

            # per-call generator: concurrent calls carry different custom layers
            config = await self._evaluate(options.custom_config_raw or self.custom_config_raw)
            generator = create_generator(self._with_custom_layer(config, layer_name, holder))

            markup, annotations = await self.transform(options.markup, MARKUP_ID, generator)
            result.annotations.extend(annotations)

            if any(t.name == DIRECTIVES_TRANSFORMER for t in generator.config.transformers):
                css, annotations = await self.transform(custom_css, CSS_ID, generator)
                holder["css"] = clean_output(css)
                result.annotations.extend(annotations)
            else:
                result.custom_css_warn = MissingDirectivesWarning(
                    f"Using directives requires the '{DIRECTIVES_TRANSFORMER}' transformer."
                )

            result.output = await generator.generate(markup)
        except Exception as e:
            logger.exception("CSS generation failed")
            result.output = None
            result.custom_config_error = e
        return result

    # ----------------------------------------------------------------------------------
    # hints
    # ----------------------------------------------------------------------------------

    async def get_hint(self, context: CompletionContext) -> Optional[CompletionResult]:
        if self.autocomplete is None:
            raise EngineNotInitializedError("autocomplete")
        result = await self.autocomplete.suggest_in_file(context.text, context.pos)
        if not result.suggestions:
            return None
        resolved = result.resolve_replacement(result.suggestions[0][0])
        return CompletionResult(
            from_=resolved.start,
            options=[CompletionOption(label=label, apply=value) for value, label in result.suggestions],
        )


async def generate_css(options: GenerateOptions, module_cache: Optional[ModuleCache] = None) -> GenerateOutput:
    engine = CssEngine(
        custom_config_raw=options.custom_config_raw,
        custom_css_layer_name=options.layer_name,
        module_cache=module_cache,
    )
    try:
        await engine.init()
    except Exception as e:
        logger.exception("CSS engine initialization failed")
        return GenerateOutput(custom_config_error=e)
    return await engine.generate(options)


async def get_hint(context: CompletionContext, config: Optional[Mapping[str, str]] = None) -> Optional[CompletionResult]:
    engine = CssEngine(custom_config_raw=(config or {}).get("custom_config_raw"))
    await engine.init()
    return await engine.get_hint(context)
