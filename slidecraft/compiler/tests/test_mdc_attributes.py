# SPDX-License-Identifier: MIT

import pytest
from bs4 import BeautifulSoup

from slidecraft.compiler.markdown import create_markdown

CARD = '::card\nThe content of the card{style="color: green;" .custom-class .green}!\n::'


def _card(html):
    soup = BeautifulSoup(html, "html.parser")
    card = soup.find("card")
    assert card is not None
    return card


def test_card_directive_carries_inline_attributes():
    html = create_markdown().render(CARD)
    card = _card(html)
    span = card.find("span")
    assert span is not None
    assert span["style"] == "color: green;"
    assert span["class"] == ["custom-class", "green"]
    assert span.get_text() == "The content of the card"
    assert card.get_text() == "The content of the card!"
    # single paragraph is unwrapped
    assert card.find("p") is None


@pytest.mark.parametrize("source", [
    CARD,
    "\n\n" + CARD + "\n\n",
    '::card\n  The content of the card{style="color: green;" .custom-class .green}!   \n  ::',
    '\n::card\n\nThe content of the card{style="color: green;" .custom-class .green}!\n\n::\n',
])
def test_card_directive_is_whitespace_independent(source):
    expected = _card(create_markdown().render(CARD))
    card = _card(create_markdown().render(source))
    assert str(card) == str(expected)


def test_text_with_class_becomes_span():
    html = create_markdown().render("Text{.mt-5}")
    assert '<span class="mt-5">Text</span>' in html


def test_block_component_attributes_land_on_component():
    html = create_markdown().render('::card{.outer title="Hi"}\nbody\n::')
    card = _card(html)
    assert card["class"] == ["outer"]
    assert card["title"] == "Hi"


def test_inline_component_with_label_and_props():
    html = create_markdown().render("Inline :badge[new]{type=info} component")
    badge = BeautifulSoup(html, "html.parser").find("badge")
    assert badge is not None
    assert badge["type"] == "info"
    assert badge.get_text() == "new"


def test_nested_block_components():
    html = create_markdown().render("::outer\n:::inner\ntext\n:::\n::")
    outer = BeautifulSoup(html, "html.parser").find("outer")
    assert outer is not None
    inner = outer.find("inner")
    assert inner is not None
    assert inner.get_text().strip() == "text"


def test_fenced_code_braces_are_escaped():
    html = create_markdown().render("```js\nconst a = {b: 1}\n```")
    assert "{b" not in html
    assert "&#123;" in html


@pytest.mark.parametrize("text", [
    "see {#x here",
    "ratio {a=1 b",
    "Hello {% not closed",
    "a :badge{type=info and more",
])
def test_unterminated_attribute_list_keeps_its_text(text):
    html = create_markdown().render(text)
    soup = BeautifulSoup(html, "html.parser")
    assert soup.find("span") is None
    assert soup.find("badge") is None
    assert soup.get_text().strip() == text


def test_indented_code_braces_are_escaped():
    html = create_markdown().render("    {{ 7*7 }}\n    {% if %}\n")
    assert html.startswith("<pre><code>")
    assert "{" not in html
    assert "&#123;&#123; 7*7 &#125;&#125;" in html


def test_prose_keeps_interpolation_but_not_statements():
    html = create_markdown().render("{{ title }} and {% raw %} and {# note")
    assert "{{ title }}" in html
    assert "&#123;% raw %}" in html
    assert "&#123;# note" in html
