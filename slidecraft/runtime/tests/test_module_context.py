# SPDX-License-Identifier: MIT

import pytest

from slidecraft.errors import ModuleResolutionError, SlideCompileError, SlidecraftError
from slidecraft.runtime.components import (
    LayoutComponent,
    RemoteComponent,
    SlideError,
    SlideLoading,
    as_component,
    define_component,
    load_layouts,
)
from slidecraft.runtime.context import ModuleContext
from slidecraft.runtime.modules import ModuleCache, ModuleRegistry


def test_builtin_layouts_are_loaded():
    layouts = load_layouts()
    assert {"default", "cover", "center", "end"} <= set(layouts)
    assert all(isinstance(layout, LayoutComponent) for layout in layouts.values())


def test_extra_layouts_dir_overrides_builtins(tmp_path):
    (tmp_path / "default.html").write_text('<section class="mine">{{ slot }}</section>', encoding="utf-8")
    (tmp_path / "two-cols.html").write_text("<div>{{ slot }}</div>", encoding="utf-8")
    layouts = load_layouts(str(tmp_path))
    assert "two-cols" in layouts
    assert layouts["default"].render({}, "x") == '<section class="mine">x</section>'


@pytest.mark.asyncio
async def test_context_resolves_builtins():
    with ModuleContext() as context:
        remote = await context.import_module("built-in:remote")
        assert isinstance(remote.default, RemoteComponent)
        layout = await context.import_module("layouts:default")
        assert isinstance(layout.default, LayoutComponent)
        assert context.layouts["cover"] == "layouts:cover"


@pytest.mark.asyncio
async def test_unknown_specifier_raises():
    with ModuleContext() as context:
        assert context.resolve("custom:nothing") is None
        with pytest.raises(ModuleResolutionError):
            await context.import_module("custom:nothing")


@pytest.mark.asyncio
async def test_custom_components_are_scoped_to_their_context():
    first = ModuleContext().init()
    second = ModuleContext().init()
    try:
        first.register_custom_component("card", "<div class=\"card\">{{ slot }}</div>")
        module = await first.import_module("custom:card")
        assert module.default.render({}, "hi") == '<div class="card">hi</div>'
        with pytest.raises(ModuleResolutionError):
            await second.import_module("custom:card")
    finally:
        first.dispose()
        second.dispose()


@pytest.mark.asyncio
async def test_dispose_clears_registry_and_cache():
    context = ModuleContext().init()
    context.register_custom_component("card", lambda props, slot: "<b>card</b>")
    await context.import_module("custom:card")
    context.dispose()
    assert "custom:card" not in context.cache
    with pytest.raises(ModuleResolutionError):
        await context.import_module("custom:card")


@pytest.mark.asyncio
async def test_context_uses_the_cache_it_is_given():
    cache = ModuleCache()
    registry = ModuleRegistry()
    context = ModuleContext(registry=registry, cache=cache).init()
    try:
        assert context.cache is cache
        assert context.registry is registry
        await context.import_module("built-in:remote")
        assert "built-in:remote" in cache
    finally:
        context.dispose()


def test_duplicate_component_name_is_rejected():
    with ModuleContext() as context:
        component = lambda props, slot: "a"  # noqa: E731
        context.register_custom_component("card", component)
        context.register_custom_component("card", component)
        with pytest.raises(SlidecraftError):
            context.register_custom_component("card", lambda props, slot: "b")
        with pytest.raises(SlidecraftError):
            context.register_custom_component("not a name", component)


@pytest.mark.asyncio
async def test_source_component_compiles_on_first_import():
    with ModuleContext() as context:
        source = "<template>\n<div class=\"badge\"><slot/></div>\n</template>\n\n<script setup>\n</script>"
        context.register_source_component("Badge", source)
        module = await context.import_module("custom:Badge")
        assert module.default.render({}, "new") == '<div class="badge">new</div>'
        assert (await context.import_module("custom:Badge")) is module


@pytest.mark.asyncio
async def test_broken_source_component_fails_on_import():
    with ModuleContext() as context:
        context.register_source_component(
            "Broken", "<template>\n<div/>\n</template>\n\n<script setup>\nwhile (true) {}\n</script>")
        with pytest.raises(SlideCompileError):
            await context.import_module("custom:Broken")


def test_nested_components_expand_with_props():
    card = as_component('<div class="card" data-title="{{ title }}">{{ slot }}</div>', "Card")
    page = define_component(
        "page",
        template='<div><Card :title="$frontmatter.title">body</Card></div>',
        scope={"Card": card, "$frontmatter": {"title": "T"}},
    )
    assert page.render() == '<div><div class="card" data-title="T">body</div></div>'


def test_placeholders():
    assert SlideLoading().render() == '<div class="slide-loading">Loading slide...</div>'
    html = SlideError().render({"error": ValueError("bad <input>"), "no": 3})
    assert "Slide 3" in html
    assert "bad &lt;input&gt;" in html


def test_remote_component_escapes_url():
    html = RemoteComponent().render({"url": 'https://example.com/?a="b"'})
    assert 'src="https://example.com/?a=&quot;b&quot;"' in html
