# SPDX-License-Identifier: MIT

from slidecraft.compiler.document import (
    ComponentDocument,
    ConstStatement,
    ImportStatement,
    RawStatement,
    SetupBlock,
    TemplateModel,
    extract_template_body,
    parse_statement,
)
from slidecraft.compiler.generator import generate, generate_source


def test_generate_wraps_body_in_root_container():
    source = generate_source("# Hello")
    assert source.startswith("<template>\n<div>")
    assert "<h1>Hello</h1>" in source
    assert "</div>\n</template>" in source
    assert "<script setup>\n</script>" in source


def test_generate_is_deterministic():
    markup = "# Hello\n\nText{.mt-5}\n\n- a\n- b"
    assert generate_source(markup) == generate_source(markup)


def test_pure_markup_is_not_rendered():
    source = generate_source("# not a heading", pure=True)
    assert "<div># not a heading</div>" in source


def test_style_blocks_are_hoisted_out_of_the_template():
    document = generate("# Title\n\n<style>\nh1 { color: red; }\n</style>\n")
    assert "<style>" not in document.template.body
    assert [s.content for s in document.styles] == ["h1 { color: red; }"]
    assert document.to_source().endswith("<style>\nh1 { color: red; }\n</style>")


def test_round_trip_through_source():
    document = generate("# Hello\n\nWorld")
    document.setup.add_import("InjectedLayout", "layouts:default")
    document.setup.add_const("$frontmatter", '{"title": "x"}')
    document.template.wrap("InjectedLayout", {"v-bind": "$frontmatter"})

    source = document.to_source()
    parsed = ComponentDocument.from_source(source)
    assert parsed.to_source() == source
    assert parsed.template.wrapper.tag == "InjectedLayout"
    assert parsed.template.wrapper.attrs == {"v-bind": "$frontmatter"}
    assert parsed.setup.find_binding("$frontmatter") == ConstStatement("$frontmatter", '{"title": "x"}')


def test_extract_template_body():
    assert extract_template_body(generate_source("Hi", pure=True)) == "Hi"
    wrapped = "<template>\n<Layout a=\"1\">\nbody\n</Layout>\n</template>\n\n<script setup>\n</script>"
    assert extract_template_body(wrapped) == "body"


def test_parse_statement_forms():
    assert parse_statement('import remote from "built-in:remote"') == ImportStatement("remote", "built-in:remote")
    assert parse_statement("import { a, b as c } from 'pkg'") == ImportStatement(None, "pkg", (("a", "a"), ("b", "c")))
    assert parse_statement("const $x = [1, 2];") == ConstStatement("$x", "[1, 2]")
    assert parse_statement("console.log(1)") == RawStatement("console.log(1)")


def test_named_import_renders_back():
    stmt = ImportStatement("D", "pkg", (("a", "a"), ("b", "c")))
    assert stmt.render() == 'import D, { a, b as c } from "pkg"'
    assert stmt.bindings == ["D", "a", "c"]


def test_setup_add_keeps_existing_binding_unless_overridden():
    setup = SetupBlock()
    setup.add_import("Card", "custom:Card")
    setup.add_import("Card", "custom:Other")
    assert setup.imports == [ImportStatement("Card", "custom:Card")]

    setup.add_import("Card", "custom:Other", override=True)
    assert setup.imports == [ImportStatement("Card", "custom:Other")]


def test_setup_renders_imports_first():
    setup = SetupBlock()
    setup.add_const("$frontmatter", "{}")
    setup.add_import("remote", "built-in:remote")
    assert setup.render() == '<script setup>\nimport remote from "built-in:remote"\nconst $frontmatter = {}\n</script>'


def test_template_without_root_is_emitted_as_is():
    assert TemplateModel(body="<p>x</p>", root_tag=None).render() == "<p>x</p>"
