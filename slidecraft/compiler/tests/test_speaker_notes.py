# SPDX-License-Identifier: MIT

from slidecraft.compiler.note import CLICK_MARK_CLASS, render_note, shared_md, stringify_markdown_tokens


def test_empty_note():
    note = render_note("")
    assert note.html == ""
    assert note.clicks == 0


def test_plain_note_is_rendered_as_markdown():
    note = render_note("Say **hello**")
    assert note.html == "<p>Say <strong>hello</strong></p>\n"
    assert note.clicks == 0


def test_click_marks_are_cumulative():
    note = render_note("intro\n\n[click] first\n\n[click:2] later\n\n[click] last")
    assert note.clicks == 4
    assert f'<span class="{CLICK_MARK_CLASS}" data-clicks="1"></span> first' in note.html
    assert 'data-clicks="3"' in note.html
    assert 'data-clicks="4"' in note.html
    assert "[click" not in note.html


def test_stringify_markdown_tokens():
    tokens = shared_md.parse("# Title\n\nSome `code` here\n\n- item")
    assert stringify_markdown_tokens(tokens) == "Title Some code here item"
