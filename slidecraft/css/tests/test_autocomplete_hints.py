# SPDX-License-Identifier: MIT

import pytest

from slidecraft.css.autocomplete import create_autocomplete, expand_template
from slidecraft.css.config import define_config
from slidecraft.css.engine import CompletionContext, CssEngine, get_hint
from slidecraft.css.generator import create_generator
from slidecraft.css.presets import preset_uno
from slidecraft.errors import EngineNotInitializedError


def _autocomplete(**kwargs):
    return create_autocomplete(create_generator(define_config(presets=[preset_uno()], **kwargs)))


def test_expand_template():
    theme = {"colors": {"red": {"100": "#fee", "500": "#f00"}, "white": "#fff"}}
    assert expand_template("text-$colors", theme) == ["text-red", "text-red-100", "text-red-500", "text-white"]
    assert expand_template("m<directions>-<num>", {})[:2] == ["m-0", "m-1"]
    assert "mx-4" in expand_template("m<directions>-<num>", {})
    assert expand_template("ease-(in|out)", {}) == ["ease-in", "ease-out"]


@pytest.mark.asyncio
async def test_suggest_ranks_prefix_matches_first():
    suggestions = await _autocomplete().suggest("mt-")
    assert suggestions
    assert suggestions[0] == "mt-0"
    assert all("mt-" in s for s in suggestions)


@pytest.mark.asyncio
async def test_suggest_keeps_variant_prefix():
    suggestions = await _autocomplete().suggest("hover:mt-")
    assert suggestions
    assert all(s.startswith("hover:mt-") for s in suggestions)


@pytest.mark.asyncio
async def test_suggest_variants_after_colon():
    suggestions = await _autocomplete().suggest("md:")
    assert "md:hover:" in suggestions


@pytest.mark.asyncio
async def test_custom_rules_and_shortcuts_are_candidates():
    ac = _autocomplete(rules=[["custom-rule", {"color": "red"}]], shortcuts={"custom-shortcut": "p-4"})
    assert "custom-rule" in ac.candidates
    assert "custom-shortcut" in ac.candidates
    assert (await ac.suggest("custom-"))[:2] == ["custom-rule", "custom-shortcut"]


@pytest.mark.asyncio
async def test_suggest_in_file_replaces_the_whole_token():
    text = '<div class="p-4 mt- x">'
    cursor = text.index("mt-") + 3
    result = await _autocomplete().suggest_in_file(text, cursor)
    value = result.suggestions[0][0]
    replacement = result.resolve_replacement(value)
    assert replacement.start == text.index("mt-")
    assert replacement.end == cursor
    assert replacement.replacement == value


@pytest.mark.asyncio
async def test_empty_query_has_no_suggestions():
    assert await _autocomplete().suggest("") == []


@pytest.mark.asyncio
async def test_engine_hint():
    engine = CssEngine()
    await engine.init()
    text = '<p class="text-re'
    hint = await engine.get_hint(CompletionContext(text=text, pos=len(text)))
    assert hint is not None
    assert hint.from_ == text.index("text-re")
    assert hint.options
    assert all("text-re" in option.apply for option in hint.options)
    assert hint.options[0].label == hint.options[0].apply


@pytest.mark.asyncio
async def test_hint_without_matches_is_none():
    text = "zzzzqqq"
    assert await get_hint(CompletionContext(text=text, pos=len(text))) is None


@pytest.mark.asyncio
async def test_hint_requires_initialized_engine():
    with pytest.raises(EngineNotInitializedError):
        await CssEngine().get_hint(CompletionContext(text="m", pos=1))
