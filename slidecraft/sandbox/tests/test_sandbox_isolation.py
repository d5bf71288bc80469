# SPDX-License-Identifier: MIT

import pytest

import slidecraft.sandbox.evaluator as sandbox_evaluator
from slidecraft.errors import ConfigEvaluationError, SandboxError
from slidecraft.net import cdn_url
from slidecraft.runtime.modules import ModuleCache, ModuleNamespace
from slidecraft.sandbox.evaluator import evaluate_user_config
from slidecraft.sandbox.interpreter import SandboxInterpreter

MODULES = {
    "atomic": lambda: ModuleNamespace(double=lambda x: x * 2, name="atomic"),
    "data": ModuleNamespace(default={"a": 1}),
}


async def _run(source, module_map=MODULES, cache=None):
    return await evaluate_user_config(source, module_map, cache=cache if cache is not None else ModuleCache())


@pytest.mark.asyncio
async def test_default_export_is_returned():
    value = await _run("from atomic import double\nexport default {'x': double(21)}")
    assert value == {"x": 42}


@pytest.mark.asyncio
async def test_no_default_export_returns_none():
    assert await _run("a = 1") is None


@pytest.mark.asyncio
async def test_closures_are_callable_by_the_host():
    rule = await _run("export default [lambda m: {'width': m + 'px'}, lambda: 1]")
    assert rule[0]("10") == {"width": "10px"}

    handler = await _run("def f(x, y=2):\n    return x * y\nexport default f")
    assert handler(3) == 6
    assert handler(3, y=3) == 9


@pytest.mark.asyncio
async def test_control_flow_and_comprehensions():
    source = (
        "out = []\n"
        "for i in range(3):\n"
        "    out.append(i)\n"
        "export default out"
    )
    # no builtins: range is not visible
    with pytest.raises(SandboxError, match="name 'range' is not defined"):
        await _run(source)

    source = (
        "total = 0\n"
        "for i in [1, 2, 3, 4]:\n"
        "    if i % 2:\n"
        "        continue\n"
        "    total += i\n"
        "export default {'total': total, 'sq': [i * i for i in [1, 2]], 'd': {k: v for k, v in [('a', 1)]}}"
    )
    assert await _run(source) == {"total": 6, "sq": [1, 4], "d": {"a": 1}}


@pytest.mark.asyncio
@pytest.mark.parametrize("source, message", [
    ("export default len([1])", "name 'len' is not defined"),
    ("export default __import__.__globals__", "access to attribute '__globals__' is not allowed"),
    ("export default 'x'.format", "access to attribute 'format' is not allowed"),
    ("x = (lambda: 1)\nexport default x.__code__", "access to attribute '__code__' is not allowed"),
    ("export default open('/etc/passwd')", "name 'open' is not defined"),
    ("class A:\n    pass", "unsupported statement: ClassDef"),
    ("import atomic\nexport default atomic._exports", "access to attribute '_exports' is not allowed"),
])
async def test_disallowed_constructs(source, message):
    with pytest.raises((SandboxError, ConfigEvaluationError)) as exc:
        await _run(source)
    assert message in str(exc.value)


@pytest.mark.asyncio
@pytest.mark.parametrize("source", [
    "if True:\n    x = await __import__('atomic')",
    "export default [await __import__('atomic') for _ in [1]]",
    "f = lambda: await __import__('atomic')",
])
async def test_await_only_in_top_level_statements(source):
    with pytest.raises(SandboxError, match="'await' is only allowed in top-level statements"):
        await _run(source)


@pytest.mark.asyncio
async def test_item_assignment_limited_to_dicts_and_lists():
    assert await _run("d = {}\nd['k'] = 1\nexport default d") == {"k": 1}
    with pytest.raises(SandboxError, match="item assignment"):
        await _run("from atomic import name\nname[0] = 'x'")


@pytest.mark.asyncio
async def test_loop_limit():
    interpreter = SandboxInterpreter({}, max_iterations=10)
    with pytest.raises(SandboxError, match="loop iteration limit"):
        await interpreter.run("while True:\n    pass")


@pytest.mark.asyncio
async def test_syntax_error_is_reported():
    with pytest.raises(SandboxError, match="invalid syntax"):
        await _run("export default (")


@pytest.mark.asyncio
async def test_module_map_values_and_namespaces():
    assert await _run("import data\nexport default data.default") == {"a": 1}


@pytest.mark.asyncio
async def test_data_files_are_fetched_once(monkeypatch):
    urls = []

    async def fake_fetch(url, timeout_sec=None):
        urls.append(url)
        return '{"primary": "#123456"}'

    monkeypatch.setattr(sandbox_evaluator, "fetch_text", fake_fetch)
    cache = ModuleCache()
    source = "theme = (await import('themes/brand.json')).default\nexport default theme['primary']"
    assert await _run(source, cache=cache) == "#123456"
    assert await _run(source, cache=cache) == "#123456"
    assert urls == [cdn_url("themes/brand.json")]


@pytest.mark.asyncio
async def test_remote_modules_are_evaluated_in_the_sandbox(monkeypatch):
    async def fake_fetch(url, timeout_sec=None):
        return "from atomic import double\nsize = double(4)\n_hidden = 1\nexport default 'remote'"

    monkeypatch.setattr(sandbox_evaluator, "fetch_text", fake_fetch)
    source = "import helpers as h\nexport default [h.default, h.size]"
    assert await _run(source) == ["remote", 8]

    with pytest.raises(SandboxError, match="access to attribute '_hidden'"):
        await _run("import helpers as h\nexport default h._hidden")


@pytest.mark.asyncio
async def test_runtime_errors_are_wrapped():
    with pytest.raises(ConfigEvaluationError, match="Failed to evaluate configuration"):
        await _run("export default 1 / 0")
