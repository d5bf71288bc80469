# SPDX-License-Identifier: MIT

from slidecraft.deck import parse_deck, split_note, split_slides

DECK = """---
layout: cover
title: Deck
---
# Title

---
layout: center
---
# Second

<!-- speaker note -->

---

# Third
"""


def test_parse_deck_with_headmatter_and_frontmatter():
    slides = parse_deck(DECK)
    assert len(slides) == 3
    assert slides[0].frontmatter == {"layout": "cover", "title": "Deck"}
    assert slides[0].content == "# Title"
    assert slides[1].frontmatter == {"layout": "center"}
    assert slides[1].content == "# Second"
    assert slides[1].note == "speaker note"
    assert slides[2].frontmatter == {}
    assert slides[2].content == "# Third"
    assert slides[2].note == ""


def test_separator_inside_code_fence_does_not_split():
    text = "# A\n\n```yaml\n---\nkey: value\n---\n```\n\n---\n\n# B"
    slides = parse_deck(text)
    assert len(slides) == 2
    assert "key: value" in slides[0].content
    assert slides[1].content == "# B"


def test_plain_text_after_separator_is_not_frontmatter():
    slides = parse_deck("# A\n---\nJust text\n---\n# C")
    assert [s.content for s in slides] == ["# A", "Just text", "# C"]
    assert all(s.frontmatter == {} for s in slides)


def test_deck_without_separators_is_one_slide():
    slides = parse_deck("# Only")
    assert len(slides) == 1
    assert slides[0].content == "# Only"


def test_empty_deck():
    slides = parse_deck("")
    assert len(slides) == 1
    assert slides[0].content == ""


def test_windows_line_endings():
    slides = parse_deck("# A\r\n\r\n---\r\n\r\n# B\r\n")
    assert [s.content for s in slides] == ["# A", "# B"]


def test_note_must_be_last():
    assert split_note("text\n<!-- note -->") == ("text", "note")
    assert split_note("<!-- hidden -->\ntext") == ("<!-- hidden -->\ntext", "")
    assert split_note("a <!-- one --> b\n<!-- two -->") == ("a <!-- one --> b", "two")


def test_split_slides_drops_trailing_empty_chunk():
    chunks = split_slides("# A\n---\n")
    assert len(chunks) == 1
    assert chunks[0][0] == {}
