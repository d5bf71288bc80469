# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/__init__.py
from slidecraft.css.autocomplete import Autocomplete, create_autocomplete
from slidecraft.css.config import Enforce, Preflight, Preset, Transformer, UserConfig, define_config, resolve_config
from slidecraft.css.engine import (
    CompletionContext,
    CompletionResult,
    CssEngine,
    GenerateOptions,
    GenerateOutput,
    clean_output,
    generate_css,
    get_hint,
)
from slidecraft.css.generator import AtomicGenerator, GenerateResult, create_generator
from slidecraft.css.presets import preset_attributify, preset_icons, preset_uno
from slidecraft.css.transformers import transformer_directives, transformer_variant_group

__all__ = [
    "AtomicGenerator",
    "Autocomplete",
    "CompletionContext",
    "CompletionResult",
    "CssEngine",
    "Enforce",
    "GenerateOptions",
    "GenerateOutput",
    "GenerateResult",
    "Preflight",
    "Preset",
    "Transformer",
    "UserConfig",
    "clean_output",
    "create_autocomplete",
    "create_generator",
    "define_config",
    "generate_css",
    "get_hint",
    "preset_attributify",
    "preset_icons",
    "preset_uno",
    "resolve_config",
    "transformer_directives",
    "transformer_variant_group",
]
