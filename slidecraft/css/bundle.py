# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/css/bundle.py
"""Modules a configuration program may import without touching the network."""
from __future__ import annotations

from typing import Callable, Dict

from slidecraft.css.autocomplete import create_autocomplete
from slidecraft.css.config import Enforce, Preflight, define_config, resolve_config
from slidecraft.css.generator import create_generator
from slidecraft.css.presets import preset_attributify, preset_icons, preset_uno
from slidecraft.css.transformers import transformer_directives, transformer_variant_group
from slidecraft.css.utils import (
    color_entries,
    color_resolver,
    direction_map,
    entries_to_css,
    escape_selector,
    expand_variant_group,
    h,
    parse_color,
    regex,
    theme_value,
    to_escaped_selector,
)
from slidecraft.runtime.modules import ModuleNamespace

DEFAULT_CONFIG_SOURCE = '''from atomic import (
    define_config,
    preset_attributify,
    preset_icons,
    preset_uno,
)

export default define_config(
    rules=[
        ["custom-rule", {"color": "red"}],
    ],
    shortcuts={
        "custom-shortcut": "text-lg text-orange hover:text-teal",
    },
    presets=[
        preset_uno(),
        preset_attributify(),
        preset_icons(
            scale=1.2,
            cdn="https://esm.sh/",
        ),
    ],
)
'''


def _atomic() -> ModuleNamespace:
    return ModuleNamespace(
        define_config=define_config,
        preset_uno=preset_uno,
        preset_attributify=preset_attributify,
        preset_icons=preset_icons,
        transformer_directives=transformer_directives,
        transformer_variant_group=transformer_variant_group,
        create_generator=create_generator,
        regex=regex,
        h=h,
        Preflight=Preflight,
        Enforce=Enforce,
    )


def _core() -> ModuleNamespace:
    return ModuleNamespace(
        define_config=define_config,
        resolve_config=resolve_config,
        create_generator=create_generator,
        escape_selector=escape_selector,
        to_escaped_selector=to_escaped_selector,
        entries_to_css=entries_to_css,
        expand_variant_group=expand_variant_group,
        Preflight=Preflight,
        Enforce=Enforce,
    )


def _rule_utils() -> ModuleNamespace:
    return ModuleNamespace(
        h=h,
        regex=regex,
        parse_color=parse_color,
        color_entries=color_entries,
        color_resolver=color_resolver,
        direction_map=direction_map,
        theme_value=theme_value,
    )


def build_module_map() -> Dict[str, Callable[[], ModuleNamespace]]:
    return {
        "atomic": _atomic,
        "atomic.core": _core,
        "atomic.rule_utils": _rule_utils,
        "atomic.transformer_directives": lambda: ModuleNamespace(default=transformer_directives),
        "atomic.transformer_variant_group": lambda: ModuleNamespace(default=transformer_variant_group),
        "atomic.autocomplete": lambda: ModuleNamespace(create_autocomplete=create_autocomplete),
    }


BUNDLED_PACKAGES = tuple(build_module_map())
