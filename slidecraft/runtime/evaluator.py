# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/runtime/evaluator.py
from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from slidecraft.errors import SlideCompileError
from slidecraft.runtime.components import define_component

if TYPE_CHECKING:
    from slidecraft.runtime.context import ModuleContext

Thunk = Callable[[], Awaitable[Any]]


def evaluate(code: str, label: str, context: "ModuleContext") -> Thunk:
    """
    Execute compiled component code and return its entry point.

    The code runs with empty builtins; its only hooks are ``define_component``
    and the ``_import`` function handed to ``setup``. The returned thunk
    starts ``setup`` on first call and hands every later caller the same
    task, so setup side effects happen exactly once.
    """
    namespace = {"__builtins__": {}, "define_component": define_component}
    exec(compile(code, label or "<component>", "exec"), namespace)
    setup = namespace.get("setup")
    if setup is None or not inspect.iscoroutinefunction(setup):
        raise SlideCompileError(f"{label}: compiled code defines no async setup()")

    task: asyncio.Future | None = None

    async def _import(specifier: str):
        return await context.import_module(specifier)

    def thunk() -> Awaitable[Any]:
        nonlocal task
        if task is None:
            task = asyncio.ensure_future(setup(_import))
        return asyncio.shield(task)

    return thunk
