# SPDX-License-Identifier: MIT

import asyncio

import pytest

from slidecraft.compiler.generator import generate
from slidecraft.css.bundle import build_module_map
from slidecraft.css.config import Transformer
from slidecraft.css.engine import (
    CssEngine,
    GenerateOptions,
    MissingDirectivesWarning,
    clean_output,
    generate_css,
)
from slidecraft.css.presets.preset_uno import preflight_css
from slidecraft.errors import EngineNotInitializedError, SandboxError
from slidecraft.runtime.modules import ModuleCache, ModuleNamespace

E2E_CSS = "/* layer: preflights */\n" + preflight_css() + "\n/* layer: default */\n.mt-5{margin-top:1.25rem;}"

UNO_WITH_SLIDES_PREFLIGHT = '''from atomic import define_config, preset_uno, Preflight

export default define_config(
    presets=[preset_uno()],
    preflights=[
        Preflight(lambda ctx: ".old{color:blue;}", layer="slides"),
        Preflight(lambda ctx: ".keep{color:green;}", layer="extra"),
    ],
)
'''

UNO_WITH_DIRECTIVES = '''from atomic import define_config, preset_uno, transformer_directives

export default define_config(
    presets=[preset_uno()],
    transformers=[transformer_directives()],
)
'''


def test_clean_output_strips_comments_and_indentation():
    assert clean_output("/* a */\n.a {\n    color: red;\n}\n") == ".a {\ncolor: red;\n}"


@pytest.mark.asyncio
async def test_end_to_end_markup_to_css():
    markup = generate("# Hello\n\nText{.mt-5}").template.body
    output = await generate_css(GenerateOptions(markup=markup))
    assert output.custom_config_error is None
    assert output.css == E2E_CSS


@pytest.mark.asyncio
async def test_generation_is_deterministic():
    options = GenerateOptions(
        markup='<div class="p-4 md:p-4 hover:text-red-500 mt-5 custom-rule custom-shortcut"></div>',
        custom_css=".deck { color: red; }",
    )
    first = await generate_css(options)
    second = await generate_css(options)
    assert first.css is not None
    assert first.css == second.css


@pytest.mark.asyncio
async def test_custom_layer_replaces_matching_preflight():
    engine = CssEngine(custom_config_raw=UNO_WITH_SLIDES_PREFLIGHT)
    await engine.init()
    output = await engine.generate(GenerateOptions(markup="<p></p>", custom_css="/* brand */\n.deck {\n  color: red;\n}"))

    assert output.custom_config_error is None
    css = output.css
    assert ".old{color:blue;}" not in css
    assert ".keep{color:green;}" in css
    assert css.count("/* layer: slides */") == 1
    assert output.output.get_layer("slides") == "/* layer: slides */\n.deck {\ncolor: red;\n}"
    assert output.output.layers == ["preflights", "slides", "extra"]


@pytest.mark.asyncio
async def test_empty_custom_css_drops_the_layer():
    engine = CssEngine(custom_config_raw=UNO_WITH_SLIDES_PREFLIGHT)
    await engine.init()
    output = await engine.generate(GenerateOptions(markup="<p></p>"))
    assert "slides" not in output.output.layers
    assert ".old{color:blue;}" not in output.css


@pytest.mark.asyncio
async def test_custom_layer_name():
    engine = CssEngine(custom_config_raw=UNO_WITH_SLIDES_PREFLIGHT, custom_css_layer_name="brand")
    await engine.init()
    output = await engine.generate(GenerateOptions(markup="", custom_css=".x{}"))
    # a different layer name leaves the configured preflight alone
    assert ".old{color:blue;}" in output.css
    assert "/* layer: brand */\n.x{}" in output.css


@pytest.mark.asyncio
async def test_missing_directives_transformer_is_warned():
    output = await generate_css(GenerateOptions(markup="", custom_css=".box { @apply mt-5; }"))
    assert isinstance(output.custom_css_warn, MissingDirectivesWarning)
    assert "@apply mt-5" in output.css


@pytest.mark.asyncio
async def test_directives_are_applied_to_custom_css():
    output = await generate_css(GenerateOptions(
        markup="",
        custom_css=".box { @apply mt-5; }",
        custom_config_raw=UNO_WITH_DIRECTIVES,
    ))
    assert output.custom_css_warn is None
    slides = output.output.get_layer("slides")
    assert "@apply" not in slides
    assert ".box { margin-top:1.25rem; }" in slides


@pytest.mark.asyncio
async def test_configuration_error_leaves_output_empty():
    output = await generate_css(GenerateOptions(markup="<p class='mt-5'></p>", custom_config_raw="export default len(1)"))
    assert output.output is None
    assert output.css is None
    assert isinstance(output.custom_config_error, SandboxError)


@pytest.mark.asyncio
async def test_per_call_configuration_error_is_captured():
    engine = CssEngine()
    await engine.init()
    output = await engine.generate(GenerateOptions(markup="", custom_config_raw="export default ("))
    assert output.output is None
    assert isinstance(output.custom_config_error, SandboxError)


@pytest.mark.asyncio
async def test_generate_before_init_reports_error():
    output = await CssEngine().generate(GenerateOptions(markup="<p></p>"))
    assert output.output is None
    assert isinstance(output.custom_config_error, EngineNotInitializedError)


@pytest.mark.asyncio
async def test_init_is_shared():
    engine = CssEngine()
    first = await engine.init()
    assert engine.initialized
    assert await engine.init() is first


SLOW_FIRST_CONFIG = '''from atomic import define_config, preset_uno
from slow import pause

export default define_config(presets=[preset_uno()], transformers=[pause])
'''


@pytest.mark.asyncio
async def test_concurrent_generate_keeps_each_custom_layer():
    async def pause(buffer, id, ctx):
        # the first request is still transforming when the second one finishes
        await asyncio.sleep(0.05 if "slowpoke" in buffer.original else 0)

    module_map = {**build_module_map(), "slow": lambda: ModuleNamespace(pause=Transformer("pause", pause))}
    engine = CssEngine(custom_config_raw=SLOW_FIRST_CONFIG, module_map=module_map, module_cache=ModuleCache())
    await engine.init()

    first, second = await asyncio.gather(
        engine.generate(GenerateOptions(markup='<p class="slowpoke mt-5"></p>', custom_css=".A{color:red;}")),
        engine.generate(GenerateOptions(markup='<p class="quick"></p>', custom_css=".B{color:blue;}")),
    )

    assert first.custom_config_error is None
    assert second.custom_config_error is None
    assert ".A{color:red;}" in first.css
    assert ".B{" not in first.css
    assert ".mt-5{margin-top:1.25rem;}" in first.css
    assert ".B{color:blue;}" in second.css
    assert ".A{" not in second.css
    assert ".mt-5" not in second.css
