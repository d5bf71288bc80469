# SPDX-License-Identifier: MIT

import pytest

from slidecraft.compiler.document import ComponentDocument
from slidecraft.compiler.generator import generate
from slidecraft.compiler.sfc import compile_component_source, rewrite_template
from slidecraft.runtime.context import ModuleContext
from slidecraft.runtime.evaluator import evaluate


def test_rewrite_template_strips_dollar_bindings():
    assert rewrite_template("<h1>{{ $frontmatter.title }}</h1>") == "<h1>{{ frontmatter.title }}</h1>"
    assert rewrite_template("<p>$5 and {{ x }}</p>") == "<p>$5 and {{ x }}</p>"


def test_compiles_imports_and_constants():
    document = generate("# Hi")
    document.setup.add_import("remote", "built-in:remote")
    document.setup.add_const("$frontmatter", '{"title": "T"}')
    result = compile_component_source("/slides.md__slide_0.md", document)

    assert result.ok
    assert result.errors == []
    assert "await _import('built-in:remote')" in result.component_code
    assert "_s_frontmatter = {'title': 'T'}" in result.component_code
    assert "async def setup(_import):" in result.component_code


def test_accepts_source_text():
    source = generate("text").to_source()
    assert compile_component_source("x.md", source).ok


def test_unsupported_setup_statement_is_reported():
    source = "<template>\n<div>x</div>\n</template>\n\n<script setup>\nlet a = window.location\n</script>"
    result = compile_component_source("x.md", source)
    assert not result.ok
    assert result.component_code is None
    assert any("unsupported setup statement" in str(e) for e in result.errors)


def test_non_json_const_is_reported():
    document = ComponentDocument.from_source(
        "<template>\n<div>x</div>\n</template>\n\n<script setup>\nconst a = foo()\n</script>")
    result = compile_component_source("x.md", document)
    assert not result.ok
    assert any("not a JSON literal" in str(e) for e in result.errors)


def test_style_code_is_collected():
    document = generate("x\n\n<style>\n.a { color: red; }\n</style>\n")
    result = compile_component_source("x.md", document)
    assert result.style_code == ".a { color: red; }"


@pytest.mark.asyncio
async def test_compiled_unit_renders_with_bound_constants():
    document = generate("# {{ $frontmatter.title }}")
    document.setup.add_const("$frontmatter", '{"title": "Deck"}')
    result = compile_component_source("x.md", document)

    with ModuleContext() as context:
        component = await evaluate(result.component_code, "x.md", context)()
        assert component.render() == "<div><h1>Deck</h1>\n</div>"
