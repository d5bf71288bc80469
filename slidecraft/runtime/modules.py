# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Elena Viter

# slidecraft/runtime/modules.py
from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Optional, Union

logger = logging.getLogger(__name__)

# zero-argument producer of a module: sync or async, namespace or bare value
Producer = Callable[[], Union[Any, Awaitable[Any]]]


class ModuleNamespace:
    """Read-only module object: ``default`` plus named exports."""
    __slots__ = ("_exports",)

    def __init__(self, default: Any = None, **exports: Any):
        object.__setattr__(self, "_exports", {"default": default, **exports})

    def __getattr__(self, name: str) -> Any:
        try:
            return self._exports[name]
        except KeyError:
            raise AttributeError(f"module has no export {name!r}") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("module namespace is read-only")

    def __contains__(self, name: str) -> bool:
        return name in self._exports

    def keys(self) -> List[str]:
        return list(self._exports)

    def __repr__(self) -> str:
        return f"ModuleNamespace({', '.join(self._exports)})"


def as_namespace(value: Any) -> ModuleNamespace:
    return value if isinstance(value, ModuleNamespace) else ModuleNamespace(default=value)


async def produce(producer: Producer) -> ModuleNamespace:
    value = producer()
    if inspect.isawaitable(value):
        value = await value
    return as_namespace(value)


class _Settled:
    __slots__ = ("value", "error")

    def __init__(self, value: Any = None, error: Optional[BaseException] = None):
        self.value = value
        self.error = error

    def unwrap(self) -> Any:
        if self.error is not None:
            raise self.error
        return self.value


class ModuleCache:
    """
    key -> single in-flight or settled load.

    The factory for a key runs at most once until ``clear()``; concurrent
    callers share the in-flight task and a settled failure re-raises for
    every later caller. ``clear()`` while loads are in flight is the
    caller's responsibility.
    """

    def __init__(self):
        self._pending: Dict[str, asyncio.Future] = {}
        self._settled: Dict[str, _Settled] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._settled or key in self._pending

    def __len__(self) -> int:
        return len(set(self._settled) | set(self._pending))

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(set(self._settled) | set(self._pending)))

    async def _run(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await factory()
        except BaseException as e:
            self._settled[key] = _Settled(error=e)
            raise
        else:
            self._settled[key] = _Settled(value=value)
            return value
        finally:
            self._pending.pop(key, None)

    async def load(self, key: str, factory: Callable[[], Awaitable[Any]]) -> Any:
        settled = self._settled.get(key)
        if settled is not None:
            return settled.unwrap()
        task = self._pending.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, factory))
            self._pending[key] = task
        return await asyncio.shield(task)

    def clear(self) -> None:
        self._pending.clear()
        self._settled.clear()


class ModuleRegistry:
    """Virtual specifier -> producer. Lookup is by exact match."""

    def __init__(self):
        self._producers: Dict[str, Producer] = {}

    def register(self, specifier: str, producer: Producer) -> None:
        self._producers[specifier] = producer

    def has(self, specifier: str) -> bool:
        return specifier in self._producers

    def get(self, specifier: str) -> Optional[Producer]:
        return self._producers.get(specifier)

    def specifiers(self) -> List[str]:
        return list(self._producers)

    def clear(self) -> None:
        self._producers.clear()
