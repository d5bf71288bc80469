# SPDX-License-Identifier: MIT

import pytest

from slidecraft.cli import main


def test_render_writes_html_and_css(tmp_path):
    deck = tmp_path / "deck.md"
    deck.write_text("# Hello\n\nText{.mt-5}\n\n---\nlayout: center\n---\n# Two\n", encoding="utf-8")
    out = tmp_path / "out"

    main(["render", str(deck), "-o", str(out)])

    assert (out / "slide-1.html").exists()
    assert (out / "slide-2.html").exists()
    assert "slide-layout center" in (out / "slide-2.html").read_text(encoding="utf-8")
    assert ".mt-5{margin-top:1.25rem;}" in (out / "slide-1.css").read_text(encoding="utf-8")


def test_custom_css_lands_in_its_layer(tmp_path):
    deck = tmp_path / "deck.md"
    deck.write_text("# Hello", encoding="utf-8")
    css = tmp_path / "brand.css"
    css.write_text(".deck { color: red; }", encoding="utf-8")
    out = tmp_path / "out"

    main(["render", str(deck), "-o", str(out), "--css", str(css)])

    assert "/* layer: slides */\n.deck { color: red; }" in (out / "slide-1.css").read_text(encoding="utf-8")


def test_missing_deck_exits(tmp_path):
    with pytest.raises(SystemExit) as exc:
        main(["render", str(tmp_path / "nope.md"), "-o", str(tmp_path)])
    assert "Deck not found" in str(exc.value)


def test_failed_slide_sets_exit_status(tmp_path):
    deck = tmp_path / "deck.md"
    deck.write_text("Broken {{ 1 + }}", encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        main(["render", str(deck), "-o", str(tmp_path / "out")])
    assert exc.value.code == 1
    assert "slide-error" in (tmp_path / "out" / "slide-1.html").read_text(encoding="utf-8")
