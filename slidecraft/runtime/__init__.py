# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/runtime/__init__.py
from slidecraft.runtime.components import (
    Component,
    SfcComponent,
    SlideError,
    SlideLoading,
    as_component,
    define_component,
    load_layouts,
)
from slidecraft.runtime.context import ModuleContext
from slidecraft.runtime.evaluator import evaluate
from slidecraft.runtime.modules import ModuleCache, ModuleNamespace, ModuleRegistry

__all__ = [
    "Component",
    "ModuleCache",
    "ModuleContext",
    "ModuleNamespace",
    "ModuleRegistry",
    "SfcComponent",
    "SlideError",
    "SlideLoading",
    "as_component",
    "define_component",
    "evaluate",
    "load_layouts",
]
