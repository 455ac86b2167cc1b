import pytest

from novelsource.plugins.selectors.css import CssSelector, split_pseudo

HTML = """
<!DOCTYPE html>
<html><body>
<ul class="results">
  <li>
    <a class="name" href="/book/1">斗破苍穹</a>
    <span class="author"> 天蚕土豆 </span>
    <img src="//img.s.test/1.jpg" data-src="/lazy/1.jpg">
    <span class="empty">   </span>
  </li>
  <li>
    <a class="name" href="/book/2">武动乾坤</a>
  </li>
</ul>
<div id="content"><p>第一段</p><p> </p><p>第二段&nbsp;</p></div>
</body></html>
"""


@pytest.fixture
def sel():
    return CssSelector()


@pytest.fixture
def doc(sel):
    result = sel.parse(HTML)
    assert result.ok
    return result.document


@pytest.fixture
def items(sel, doc):
    return sel.select_items("ul.results li", doc)


@pytest.mark.parametrize(
    "selector, expected",
    [
        ("a::attr(href)", ("a", "href", False)),
        ("a::attr( data-src )", ("a", "data-src", False)),
        ("p::text", ("p", None, True)),
        ("::attr(href)", ("", "href", False)),
        (".title", (".title", None, False)),
    ],
)
def test_split_pseudo(selector, expected):
    assert split_pseudo(selector) == expected


def test_select_items_document_order(sel, items):
    assert len(items) == 2
    assert sel.extract_field("a.name", items[0]) == "斗破苍穹"
    assert sel.extract_field("a.name", items[1]) == "武动乾坤"


def test_extract_text_is_trimmed(sel, items):
    assert sel.extract_field("span.author", items[0]) == "天蚕土豆"


def test_extract_whitespace_only_falls_back(sel, items):
    assert sel.extract_field("span.empty", items[0], "N/A") == "N/A"


def test_extract_explicit_attr(sel, items):
    assert sel.extract_field("a.name", items[0], attr="href") == "/book/1"
    assert sel.extract_field("img", items[0], attr="src") == "//img.s.test/1.jpg"


def test_inline_attr_overrides_explicit_attr(sel, items):
    assert (
        sel.extract_field("img::attr(data-src)", items[0], attr="src")
        == "/lazy/1.jpg"
    )


def test_text_suffix_ignores_explicit_attr(sel, items):
    assert sel.extract_field("a.name::text", items[0], attr="href") == "斗破苍穹"


def test_missing_attr_falls_back(sel, items):
    assert sel.extract_field("img", items[1], "none", attr="src") == "none"
    assert sel.extract_field("a.name", items[0], "none", attr="title") == "none"


def test_invalid_selector_falls_back(sel, items):
    assert sel.extract_field("a[[", items[0], "N/A") == "N/A"


def test_invalid_container_selector_yields_empty(sel, doc):
    assert sel.select_items("ul[[", doc) == []


def test_extract_all_paragraphs(sel, doc):
    assert sel.extract_all("#content p", doc) == ["第一段", "第二段"]


def test_extract_all_inline_attr(sel, doc):
    assert sel.extract_all("a.name::attr(href)", doc) == ["/book/1", "/book/2"]
