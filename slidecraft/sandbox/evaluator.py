# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/sandbox/evaluator.py
"""
Evaluate a user configuration program inside the sandbox.

The only binding the program gets is ``__import__(specifier)``, which resolves
through, in order:

1. the allow-listed module map (pre-bundled modules)
2. data files (``.json`` / ``.yaml`` / ``.yml``) fetched from the CDN and
   exposed as ``default``
3. any other specifier: module source fetched from the CDN and evaluated in
   the same sandbox; its public top-level bindings become exports

Every resolved specifier is memoized in the process-wide module cache (or the
cache passed in), so repeated evaluations do not fetch again.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

import yaml

from slidecraft.errors import ConfigEvaluationError, SandboxError, SlidecraftError
from slidecraft.net import cdn_url, fetch_text
from slidecraft.runtime.modules import ModuleCache, ModuleNamespace, as_namespace, produce
from slidecraft.sandbox.interpreter import SandboxInterpreter
from slidecraft.sandbox.rewrite import IMPORT_FN, rewrite_config_source

logger = logging.getLogger(__name__)

DATA_EXTENSIONS = (".json", ".yaml", ".yml")

ImportFunction = Callable[[str], Awaitable[ModuleNamespace]]

_global_module_cache = ModuleCache()


def get_global_module_cache() -> ModuleCache:
    return _global_module_cache


def clear_global_module_cache() -> None:
    _global_module_cache.clear()


def _parse_data(specifier: str, text: str) -> Any:
    if specifier.endswith(".json"):
        return json.loads(text)
    return yaml.safe_load(text)


def _public(env: Mapping[str, Any]) -> dict:
    return {k: v for k, v in env.items() if not k.startswith("_") and k != "default"}


def make_import_function(module_map: Mapping[str, Any], cache: ModuleCache,
                         cdn_base: Optional[str] = None) -> ImportFunction:
    """The ``__import__`` handed to sandboxed code; a bare function so nothing else leaks."""

    async def resolve(specifier: str) -> ModuleNamespace:
        if specifier in module_map:
            entry = module_map[specifier]
            if isinstance(entry, ModuleNamespace) or not callable(entry):
                return as_namespace(entry)
            return await produce(entry)

        url = cdn_url(specifier, base=cdn_base)
        if specifier.endswith(DATA_EXTENSIONS):
            logger.debug("Loading config data %s", url)
            return ModuleNamespace(default=_parse_data(specifier, await fetch_text(url)))

        logger.debug("Loading config module %s", url)
        source = await fetch_text(url)
        value, env = await SandboxInterpreter({IMPORT_FN: import_module}, label=url).run(
            rewrite_config_source(source))
        return ModuleNamespace(default=value, **_public(env))

    async def import_module(specifier: Any) -> ModuleNamespace:
        if not isinstance(specifier, str) or not specifier:
            raise SandboxError(f"invalid module specifier: {specifier!r}")
        return await cache.load(specifier, lambda: resolve(specifier))

    return import_module


async def evaluate_user_config(source: str, module_map: Mapping[str, Any],
                               cache: Optional[ModuleCache] = None,
                               cdn_base: Optional[str] = None) -> Any:
    """Run a configuration program; returns its ``export default`` value (None when absent)."""
    import_module = make_import_function(
        module_map, cache if cache is not None else _global_module_cache, cdn_base)
    interpreter = SandboxInterpreter({IMPORT_FN: import_module}, label="<config>")
    try:
        value, _ = await interpreter.run(rewrite_config_source(source))
    except SlidecraftError:
        raise
    except Exception as e:
        raise ConfigEvaluationError(f"Failed to evaluate configuration: {e}") from e
    return value
