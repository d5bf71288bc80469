# SPDX-License-Identifier: MIT

import json
import logging

import pytest

from slidecraft.compiler.document import ComponentDocument, ImportStatement
from slidecraft.compiler.generator import generate
from slidecraft.compiler.pipeline import compile_to_component_source
from slidecraft.compiler.transforms import (
    BuiltinCapabilityTransform,
    CustomComponentTransform,
    LayoutWrapperTransform,
    TransformPipeline,
    default_pipeline,
    format_available_layouts,
    match_slide_index,
    slide_filepath,
)
from slidecraft.config import get_settings
from slidecraft.errors import ComponentSourceError
from slidecraft.types import CompileOptions, SlideInfo, SourceSlideInfo

LAYOUTS = {name: f"layouts:{name}" for name in ("default", "cover", "center")}


def _info(index, frontmatter=None, content=""):
    frontmatter = dict(frontmatter or {})
    return SlideInfo(
        frontmatter=frontmatter,
        content=content,
        note="",
        index=index,
        source=SourceSlideInfo(frontmatter=frontmatter, content=content, filepath=slide_filepath(index), index=index),
    )


def _layout_import(document):
    stmt = document.setup.find_binding("InjectedLayout")
    assert isinstance(stmt, ImportStatement)
    return stmt.specifier


def test_slide_index_from_filepath():
    assert match_slide_index(slide_filepath(3)) == 3
    assert match_slide_index("/other.md") is None


def test_layout_from_frontmatter():
    deck = [_info(0, {"layout": "cover", "title": "Hi"})]
    document = LayoutWrapperTransform(deck, LAYOUTS).apply(generate("# Hi"), slide_filepath(0))
    assert _layout_import(document) == "layouts:cover"
    assert document.template.wrapper.tag == "InjectedLayout"
    assert document.template.wrapper.attrs == {"v-bind": "$frontmatter"}
    frontmatter = document.setup.find_binding("$frontmatter")
    assert json.loads(frontmatter.value) == {"layout": "cover", "title": "Hi"}
    assert document.setup.find_binding("remote") == ImportStatement("remote", "built-in:remote")


def test_missing_layout_falls_back_to_default():
    deck = [_info(0), _info(1)]
    document = LayoutWrapperTransform(deck, LAYOUTS).apply(generate("text"), slide_filepath(1))
    assert _layout_import(document) == "layouts:default"


@pytest.fixture
def center_default_layout(monkeypatch):
    monkeypatch.setenv("SLIDECRAFT_DEFAULT_LAYOUT", "center")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_fallback_layout_comes_from_settings(center_default_layout, caplog):
    deck = [_info(0), _info(1, {"layout": "nope"}), _info(2, {"layout": "cover"})]
    transform = LayoutWrapperTransform(deck, LAYOUTS)
    assert transform.fallback == "center"
    assert transform.resolve_layout(0) == "center"
    with caplog.at_level(logging.ERROR, logger="slidecraft.compiler.transforms"):
        assert transform.resolve_layout(1) == "center"
    assert transform.resolve_layout(2) == "cover"
    assert LayoutWrapperTransform(deck, LAYOUTS, fallback="cover").resolve_layout(0) == "cover"


def test_deck_default_layout_applies_to_slides_without_one():
    deck = [_info(0, {"default": {"layout": "center"}}), _info(1)]
    transform = LayoutWrapperTransform(deck, LAYOUTS)
    assert transform.resolve_layout(1) == "center"
    assert transform.resolve_layout(0) == "center"


def test_unknown_layout_falls_back_with_one_error(caplog):
    deck = [_info(0, {"layout": "nope"})]
    with caplog.at_level(logging.ERROR, logger="slidecraft.compiler.transforms"):
        document = LayoutWrapperTransform(deck, LAYOUTS).apply(generate("text"), slide_filepath(0))

    assert _layout_import(document) == "layouts:default"
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert 'Unknown layout "nope"' in errors[0].getMessage()
    assert "cover" in errors[0].getMessage()


def test_layout_step_requires_setup_block():
    document = ComponentDocument.from_source("<template>\n<div>x</div>\n</template>")
    assert document.setup is None
    with pytest.raises(ComponentSourceError) as exc:
        LayoutWrapperTransform([_info(0)], LAYOUTS).apply(document, slide_filepath(0))
    assert exc.value.slide_index == 0


def test_layout_step_skips_unrelated_documents():
    document = generate("text")
    before = document.to_source()
    after = LayoutWrapperTransform([_info(0)], LAYOUTS).apply(document, "/component.vue")
    assert after.to_source() == before


def test_custom_components_are_imported():
    document = CustomComponentTransform(["card", "Badge"]).apply(generate("<card/>"), slide_filepath(0))
    assert document.setup.find_binding("card") == ImportStatement("card", "custom:card")
    assert document.setup.find_binding("Badge") == ImportStatement("Badge", "custom:Badge")


def test_builtin_remote_added_once():
    pipeline = TransformPipeline([BuiltinCapabilityTransform(), BuiltinCapabilityTransform()])
    document = pipeline.run(generate("x"), "/component.vue")
    assert document.setup.imports == [ImportStatement("remote", "built-in:remote")]


def test_registered_card_component_is_imported_into_slide():
    deck = [_info(0, content="<card/>")]
    source = compile_to_component_source(CompileOptions(
        slides_info=deck,
        filename=slide_filepath(0),
        code="<card/>",
        components={"card": "<div class=\"card\">{{ slot }}</div>"},
        layouts=LAYOUTS,
    ))
    assert 'import card from "custom:card"' in source
    assert 'import InjectedLayout from "layouts:default"' in source
    assert 'import remote from "built-in:remote"' in source


def test_default_pipeline_output_shape():
    deck = [_info(0)]
    document = default_pipeline(deck, LAYOUTS).run(generate("# Hello"), slide_filepath(0))
    source = document.to_source()
    assert source.startswith('<template>\n<InjectedLayout v-bind="$frontmatter">\n<h1>Hello</h1>\n</InjectedLayout>\n</template>')
    assert "const $frontmatter = {}" in source


def test_format_available_layouts():
    text = format_available_layouts(["a", "b", "c", "d"])
    assert text.count("\n    ") == 2
    assert "a" in text and "d" in text
