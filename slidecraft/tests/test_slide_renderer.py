# SPDX-License-Identifier: MIT

import asyncio
import logging
import math

import pytest
from bs4 import BeautifulSoup

import slidecraft.runtime.evaluator as runtime_evaluator
from slidecraft.css.presets.preset_uno import preflight_css
from slidecraft.runtime.components import as_component, define_component
from slidecraft.runtime.modules import ModuleNamespace
from slidecraft.slides import LazySlideComponent, SlideRenderer, render_slides
from slidecraft.types import CssConfigOptions, RendererOptions, SlideSource

E2E_CSS = "/* layer: preflights */\n" + preflight_css() + "\n/* layer: default */\n.mt-5{margin-top:1.25rem;}"


@pytest.fixture
def renderer():
    r = SlideRenderer()
    yield r
    r.dispose()


@pytest.mark.asyncio
async def test_load_is_idempotent_and_runs_setup_once(monkeypatch, renderer):
    calls = []

    def counting_define_component(*args, **kwargs):
        calls.append(args[0])
        return define_component(*args, **kwargs)

    monkeypatch.setattr(runtime_evaluator, "define_component", counting_define_component)

    slides = await renderer.render([SlideSource(content="# One")])
    first, second = await asyncio.gather(slides[0].load(), slides[0].load())
    third = await slides[0].load()

    assert first is second
    assert third is first
    assert first.default is third.default
    assert calls == ["/slides.md__slide_0.md"]


@pytest.mark.asyncio
async def test_slide_renders_inside_default_layout(renderer):
    slides = await renderer.render([SlideSource(content="# One")])
    html = await slides[0].component.render()

    soup = BeautifulSoup(html, "html.parser")
    layout = soup.find("div", class_="slide-layout")
    assert layout is not None
    assert "default" in layout["class"]
    assert layout.find("h1").get_text() == "One"
    assert slides[0].component.last_error is None


@pytest.mark.asyncio
async def test_frontmatter_reaches_the_layout(renderer):
    slides = await renderer.render([
        SlideSource(frontmatter={"layout": "cover", "background": "/bg.png"}, content="# Title"),
    ])
    html = await slides[0].component.render()
    assert "slide-layout cover" in html
    assert "url('/bg.png')" in html


@pytest.mark.asyncio
async def test_unknown_layout_renders_with_fallback(renderer, caplog):
    slides = await renderer.render([SlideSource(frontmatter={"layout": "nope"}, content="text")])
    with caplog.at_level(logging.ERROR, logger="slidecraft"):
        html = await slides[0].component.render()

    assert "slide-layout default" in html
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert 'Unknown layout "nope"' in errors[0].getMessage()


@pytest.mark.asyncio
async def test_failing_slide_renders_error_placeholder(renderer, caplog):
    slides = await renderer.render([
        SlideSource(content="# Fine"),
        SlideSource(content="Broken {{ 1 + }}"),
    ])
    with caplog.at_level(logging.ERROR, logger="slidecraft"):
        broken = await slides[1].component.render()
    fine = await slides[0].component.render()

    assert '<div class="slide-error">' in broken
    assert "Slide 2" in broken
    assert slides[1].component.last_error is not None
    assert any("Failed to load slide 2" in r.getMessage() for r in caplog.records)
    assert "<h1>Fine</h1>" in fine

    # failures are not memoized: each load compiles again
    with pytest.raises(Exception):
        await slides[1].load()
    with pytest.raises(Exception):
        await slides[1].load()


@pytest.mark.asyncio
async def test_template_syntax_in_code_and_prose_stays_literal(renderer):
    slides = await renderer.render([
        SlideSource(content="    {{ 7*7 }}\n    {% if %}\n\nSee {#x here and {% not a tag"),
    ])
    html = await slides[0].component.render()

    assert slides[0].component.last_error is None
    assert "slide-error" not in html
    assert "49" not in html
    text = BeautifulSoup(html, "html.parser").get_text()
    assert "{{ 7*7 }}" in text
    assert "See {#x here and {% not a tag" in text


@pytest.mark.asyncio
async def test_registered_components_render_in_slides():
    renderer = SlideRenderer(RendererOptions(
        components={"card": '<div class="card">{{ slot }}</div>'},
        sfc_components={"Badge": "<template>\n<span class=\"badge\"><slot/></span>\n</template>\n\n<script setup>\n</script>"},
    ))
    try:
        slides = await renderer.render([SlideSource(content="<card>hi</card> and <Badge>new</Badge>")])
        html = await slides[0].component.render()
    finally:
        renderer.dispose()
    assert '<div class="card">hi</div>' in html
    assert '<span class="badge">new</span>' in html


@pytest.mark.asyncio
async def test_meta(renderer):
    slides = await renderer.render([
        SlideSource(content="# A"),
        {"frontmatter": {"title": "B"}, "content": "# B", "note": "Hello [click] there"},
    ])
    assert [s.no for s in slides] == [1, 2]
    meta = slides[1].meta["slide"]
    assert meta["no"] == 2
    assert meta["index"] == 1
    assert meta["id"] == 1
    assert meta["filepath"] == "/slides.md__slide_1.md"
    assert meta["frontmatter"] == {"title": "B"}
    assert meta["note"] == "Hello [click] there"
    assert meta["clicks"] == 1
    assert "slide-note-click-mark" in meta["note_html"]
    assert math.isnan(meta["start"])
    assert slides[1].meta["clicks_context"] is None


@pytest.mark.asyncio
async def test_css_end_to_end(renderer):
    slides = await renderer.render([SlideSource(content="# Hello\n\nText{.mt-5}")])
    output = await slides[0].css()
    assert output.custom_config_error is None
    assert output.css == E2E_CSS
    assert (await slides[0].css()) is output


@pytest.mark.asyncio
async def test_frontmatter_class_contributes_utilities(renderer):
    slides = await renderer.render([SlideSource(frontmatter={"class": "mt-5"}, content="plain")])
    output = await slides[0].css()
    assert output.output.get_layer() == "/* layer: default */\n.mt-5{margin-top:1.25rem;}"


@pytest.mark.asyncio
async def test_css_disabled_uses_standalone_generation():
    renderer = SlideRenderer(RendererOptions(css=CssConfigOptions(enabled=False)))
    try:
        assert renderer.css_engine is None
        slides = await renderer.render([SlideSource(content="Text{.mt-5}")])
        output = await slides[0].css()
    finally:
        renderer.dispose()
    assert output.css == E2E_CSS


@pytest.mark.asyncio
async def test_broken_css_configuration_is_reported_per_slide():
    renderer = SlideRenderer(RendererOptions(css=CssConfigOptions(custom_config_raw="export default len(1)")))
    try:
        slides = await renderer.render([SlideSource(content="Text{.mt-5}")])
        output = await slides[0].css()
        html = await slides[0].component.render()
    finally:
        renderer.dispose()
    assert output.css is None
    assert output.custom_config_error is not None
    assert '<span class="mt-5">Text</span>' in html


@pytest.mark.asyncio
async def test_render_slides_helper():
    slides = await render_slides([{"content": "# X"}])
    assert len(slides) == 1
    assert "<h1>X</h1>" in await slides[0].component.render()


@pytest.mark.asyncio
async def test_stream_yields_loading_placeholder_for_slow_slides():
    async def slow():
        await asyncio.sleep(0.05)
        return ModuleNamespace(default=as_component("<b>done</b>", "slow"))

    chunks = [chunk async for chunk in LazySlideComponent(slow, delay=5).stream()]
    assert chunks == ['<div class="slide-loading">Loading slide...</div>', "<b>done</b>"]


@pytest.mark.asyncio
async def test_stream_skips_placeholder_for_fast_slides():
    async def fast():
        return ModuleNamespace(default=as_component("<b>done</b>", "fast"))

    chunks = [chunk async for chunk in LazySlideComponent(fast, delay=300).stream()]
    assert chunks == ["<b>done</b>"]


@pytest.mark.asyncio
async def test_on_error_callback_replaces_logging():
    errors = []

    async def failing():
        raise RuntimeError("nope")

    component = LazySlideComponent(failing, on_error=errors.append, no=7)
    html = await component.render()
    assert "Slide 7" in html
    assert "nope" in html
    assert len(errors) == 1
    assert isinstance(errors[0], RuntimeError)


def test_slides_info_from_dicts(renderer):
    infos = renderer.get_slides_info([{"content": "a"}, SlideSource(content="b", note="n")])
    assert [i.index for i in infos] == [0, 1]
    assert infos[1].note == "n"
    assert infos[1].source.filepath == "/slides.md__slide_1.md"
    assert infos[0].source.raw == ""
