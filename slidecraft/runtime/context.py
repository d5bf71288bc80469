# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/runtime/context.py
from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, Optional

from slidecraft.compiler.transforms import REMOTE_SPECIFIER, custom_specifier, layout_specifier
from slidecraft.config import get_settings
from slidecraft.errors import ModuleResolutionError, SlideCompileError, SlidecraftError
from slidecraft.runtime import components as comps
from slidecraft.runtime.modules import ModuleCache, ModuleNamespace, ModuleRegistry, Producer, produce

logger = logging.getLogger(__name__)

RUNTIME_SPECIFIER = "runtime"


def _runtime_module() -> ModuleNamespace:
    return ModuleNamespace(
        default=comps.define_component,
        define_component=comps.define_component,
        as_component=comps.as_component,
        SfcComponent=comps.SfcComponent,
        LayoutComponent=comps.LayoutComponent,
        RemoteComponent=comps.RemoteComponent,
    )


class ModuleContext:
    """
    Owner of one virtual module space: registry + cache.

    Built-ins (``runtime``, ``built-in:remote``, ``layouts:<name>``) are
    registered by ``init()``; custom components are added on demand with
    ``register_custom_component``. ``dispose()`` drops both registry and
    cache. Independent decks should use independent contexts.
    """

    def __init__(self, registry: Optional[ModuleRegistry] = None, cache: Optional[ModuleCache] = None,
                 layouts_dir: Optional[str] = None):
        self.registry = registry if registry is not None else ModuleRegistry()
        self.cache = cache if cache is not None else ModuleCache()
        self.layouts_dir = layouts_dir if layouts_dir is not None else get_settings().LAYOUTS_DIR
        self._layouts: Dict[str, comps.LayoutComponent] = {}
        self._custom: Dict[str, Any] = {}
        self._initialized = False

    # ---------------- lifecycle ----------------

    def init(self) -> "ModuleContext":
        if self._initialized:
            return self
        self.registry.register(RUNTIME_SPECIFIER, _runtime_module)
        remote = comps.RemoteComponent()
        self.registry.register(REMOTE_SPECIFIER, lambda: ModuleNamespace(default=remote))
        self._layouts = comps.load_layouts(self.layouts_dir)
        for name, layout in self._layouts.items():
            self.registry.register(layout_specifier(name), (lambda layout=layout: ModuleNamespace(default=layout)))
        self._initialized = True
        logger.debug("Module context initialized: %d layouts", len(self._layouts))
        return self

    def dispose(self) -> None:
        self.cache.clear()
        self.registry.clear()
        self._layouts.clear()
        self._custom.clear()
        self._initialized = False

    def __enter__(self) -> "ModuleContext":
        return self.init()

    def __exit__(self, *exc) -> None:
        self.dispose()

    # ---------------- registration ----------------

    @property
    def layouts(self) -> Dict[str, str]:
        """layout name -> virtual specifier"""
        return {name: layout_specifier(name) for name in self._layouts}

    def register(self, specifier: str, producer: Producer) -> None:
        self.registry.register(specifier, producer)

    def register_custom_component(self, name: str, component: Any) -> None:
        if not name.isidentifier():
            raise SlidecraftError(f"Invalid component name: {name!r}")
        existing = self._custom.get(name)
        if existing is component:
            return
        if existing is not None:
            raise SlidecraftError(f"Component {name!r} is already registered in this context")
        comp = comps.as_component(component, name)
        self._custom[name] = component
        self.registry.register(custom_specifier(name), lambda: ModuleNamespace(default=comp))

    def register_source_component(self, name: str, source: str,
                                  sfc_options: Optional[Dict[str, Any]] = None) -> None:
        """Component given as component-source text; compiled on first import."""
        from slidecraft.compiler.sfc import compile_component_source
        from slidecraft.runtime.evaluator import evaluate

        if not name.isidentifier():
            raise SlidecraftError(f"Invalid component name: {name!r}")
        if name in self._custom:
            if self._custom[name] == source:
                return
            raise SlidecraftError(f"Component {name!r} is already registered in this context")
        self._custom[name] = source

        async def _produce() -> ModuleNamespace:
            result = compile_component_source(f"{name}.component", source, {**(sfc_options or {}), "name": name})
            if not result.ok:
                raise SlideCompileError(f"Failed to compile component {name!r}", result.errors)
            component = await evaluate(result.component_code, name, self)()
            return ModuleNamespace(default=component)

        self.registry.register(custom_specifier(name), _produce)

    # ---------------- resolution ----------------

    def resolve(self, specifier: str) -> Optional[Awaitable[ModuleNamespace]]:
        producer = self.registry.get(specifier)
        if producer is None:
            return None
        return self.cache.load(specifier, lambda: produce(producer))

    async def import_module(self, specifier: str) -> ModuleNamespace:
        pending = self.resolve(specifier)
        if pending is None:
            raise ModuleResolutionError(specifier)
        return await pending
