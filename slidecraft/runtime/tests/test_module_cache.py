# SPDX-License-Identifier: MIT

import asyncio

import pytest

from slidecraft.runtime.modules import ModuleCache, ModuleNamespace, ModuleRegistry, produce


@pytest.mark.asyncio
async def test_concurrent_loads_share_one_invocation():
    cache = ModuleCache()
    calls = 0

    async def factory():
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return object()

    results = await asyncio.gather(*(cache.load("a", factory) for _ in range(5)))
    assert calls == 1
    assert all(r is results[0] for r in results)
    assert await cache.load("a", factory) is results[0]
    assert calls == 1
    assert "a" in cache
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_settled_failure_is_reraised():
    cache = ModuleCache()
    calls = 0

    async def factory():
        nonlocal calls
        calls += 1
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        await cache.load("bad", factory)
    with pytest.raises(RuntimeError, match="boom"):
        await cache.load("bad", factory)
    assert calls == 1


@pytest.mark.asyncio
async def test_clear_allows_reload():
    cache = ModuleCache()
    calls = 0

    async def factory():
        nonlocal calls
        calls += 1
        return calls

    assert await cache.load("k", factory) == 1
    cache.clear()
    assert "k" not in cache
    assert await cache.load("k", factory) == 2


@pytest.mark.asyncio
async def test_produce_wraps_values_in_namespace():
    ns = await produce(lambda: 42)
    assert isinstance(ns, ModuleNamespace)
    assert ns.default == 42

    async def async_producer():
        return ModuleNamespace(default="d", extra=1)

    ns = await produce(async_producer)
    assert ns.default == "d"
    assert ns.extra == 1
    assert sorted(ns.keys()) == ["default", "extra"]


def test_namespace_is_read_only():
    ns = ModuleNamespace(default=1)
    with pytest.raises(AttributeError):
        ns.default = 2
    with pytest.raises(AttributeError):
        ns.missing


def test_registry_exact_match():
    registry = ModuleRegistry()
    registry.register("custom:card", lambda: 1)
    assert registry.has("custom:card")
    assert not registry.has("custom:car")
    assert registry.get("custom:Card") is None
    assert registry.specifiers() == ["custom:card"]
    registry.clear()
    assert registry.specifiers() == []
