# SPDX-License-Identifier: MIT

import re

import pytest

from slidecraft.css.config import Preflight, define_config
from slidecraft.css.generator import create_generator
from slidecraft.css.presets import preset_uno
from slidecraft.css.presets.preset_uno import preflight_css


def _uno(**kwargs):
    return create_generator(define_config(presets=[preset_uno()], **kwargs))


@pytest.mark.asyncio
async def test_single_utility_with_preflights():
    result = await _uno().generate('<p class="mt-5">x</p>')
    assert result.layers == ["preflights", "default"]
    assert result.get_layer() == "/* layer: default */\n.mt-5{margin-top:1.25rem;}"
    assert result.css == "/* layer: preflights */\n" + preflight_css() + "\n/* layer: default */\n.mt-5{margin-top:1.25rem;}"
    assert "mt-5" in result.matched


@pytest.mark.asyncio
@pytest.mark.parametrize("token, expected", [
    ("hover:text-red-500",
     ".hover\\:text-red-500:hover{--un-text-opacity:1;color:rgb(239 68 68 / var(--un-text-opacity));}"),
    ("md:p-4", "@media (min-width: 768px){\n.md\\:p-4{padding:1rem;}\n}"),
    ("text-red-500/50", ".text-red-500\\/50{color:rgb(239 68 68 / 0.5);}"),
    ("!m-2", ".\\!m-2{margin:0.5rem !important;}"),
    ("-mt-2", ".-mt-2{margin-top:-0.5rem;}"),
])
async def test_variants_and_modifiers(token, expected):
    result = await _uno().generate(f'<div class="{token}"></div>', preflights=False)
    assert result.css == f"/* layer: default */\n{expected}"


@pytest.mark.asyncio
async def test_identical_bodies_merge_selectors():
    generator = create_generator(define_config(rules=[["a", {"color": "red"}], ["b", {"color": "red"}]]))
    result = await generator.generate("a b")
    assert result.css == "/* layer: default */\n.a,.b{color:red;}"


@pytest.mark.asyncio
async def test_static_and_dynamic_custom_rules():
    generator = create_generator(define_config(rules=[
        ["custom-rule", {"color": "red"}],
        [re.compile(r"^gap-(\d+)px$"), lambda m, ctx: {"gap": f"{m.group(1)}px"}],
    ]))
    result = await generator.generate("custom-rule gap-3px unknown")
    assert result.matched == {"custom-rule", "gap-3px"}
    assert ".custom-rule{color:red;}" in result.css
    assert ".gap-3px{gap:3px;}" in result.css


@pytest.mark.asyncio
async def test_shortcut_merges_into_one_rule():
    generator = _uno(shortcuts={"btn": "p-4 text-red-500"})
    result = await generator.generate('<a class="btn"></a>', preflights=False)
    assert result.layers == ["shortcuts"]
    assert result.get_layer("shortcuts") == (
        "/* layer: shortcuts */\n"
        ".btn{padding:1rem;--un-text-opacity:1;color:rgb(239 68 68 / var(--un-text-opacity));}"
    )


@pytest.mark.asyncio
async def test_layers_are_ordered():
    generator = _uno(
        shortcuts={"btn": "p-4"},
        preflights=[Preflight(lambda ctx: ".z{}", layer="zeta"), Preflight(lambda ctx: ".a{}", layer="alpha")],
    )
    result = await generator.generate('<a class="btn mt-5"></a>')
    assert result.layers == ["preflights", "shortcuts", "alpha", "default", "zeta"]


@pytest.mark.asyncio
async def test_safelist_and_blocklist():
    generator = _uno(safelist=["m-2"], blocklist=["mt-5"])
    result = await generator.generate('<p class="mt-5"></p>', preflights=False)
    assert result.css == "/* layer: default */\n.m-2{margin:0.5rem;}"


@pytest.mark.asyncio
async def test_generation_is_deterministic():
    markup = '<div class="p-4 md:p-4 hover:text-red-500 mt-5 -mt-2 text-red-500/50"></div>'
    first = await _uno().generate(markup)
    second = await _uno().generate(markup)
    assert first.css == second.css


@pytest.mark.asyncio
async def test_empty_markup_has_only_preflights():
    result = await _uno().generate("")
    assert result.layers == ["preflights"]
    assert result.get_layer() is None


def test_set_config_replaces_rules():
    generator = create_generator(define_config(rules=[["a", {"color": "red"}]]))
    generator.set_config(define_config(rules=[["b", {"color": "blue"}]]))
    assert list(generator.config.static_rules) == ["b"]


def test_unknown_config_key_is_rejected():
    with pytest.raises(TypeError, match="unknown config keys"):
        define_config(colours={})
