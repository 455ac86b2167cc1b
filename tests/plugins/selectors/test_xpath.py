import pytest

from novelsource.plugins.selectors.xpath import XPathSelector, to_relative

HTML = """<?xml version="1.0" encoding="utf-8"?>
<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.0 Transitional//EN" "x.dtd">
<html><body>
<div class="item">
  <h3><a href="/book/1">Book A</a></h3>
  <span class="author"> Someone </span>
  <ul><li>1</li><li>2</li></ul>
</div>
<div class="item">
  <h3>Book B</h3>
</div>
<div id="content"><p>Para 1</p><p>  </p><p>Para&nbsp;2</p></div>
</body></html>
"""


@pytest.fixture
def sel():
    return XPathSelector()


@pytest.fixture
def items(sel):
    doc = sel.parse(HTML).document
    return sel.select_items("//div[@class='item']", doc)


@pytest.mark.parametrize(
    "selector, expected",
    [
        ("h3/text()", "./h3/text()"),
        ("//h3", ".//h3"),
        ("/h3", "./h3"),
        ("./h3", "./h3"),
        ("../div", "../div"),
        ("text()", "./text()"),
        ("string(h3)", "string(h3)"),
        ("count(ul/li)", "count(ul/li)"),
        ("  h3 ", "./h3"),
    ],
)
def test_to_relative(selector, expected):
    assert to_relative(selector) == expected


def test_parse_tolerates_xml_declaration_and_legacy_doctype(sel):
    result = sel.parse(HTML)
    assert result.ok


def test_container_is_document_absolute(items):
    assert len(items) == 2


def test_field_is_relative_to_item(sel, items):
    assert sel.extract_field("h3/a/text()", items[0]) == "Book A"
    assert sel.extract_field("h3/text()", items[1]) == "Book B"
    # '//h3' must not escape the item
    assert sel.extract_field("//h3", items[1]) == "Book B"


def test_node_result_uses_text_content(sel, items):
    assert sel.extract_field("h3", items[0]) == "Book A"
    assert sel.extract_field("span[@class='author']", items[0]) == "Someone"


def test_attribute_result(sel, items):
    assert sel.extract_field("h3/a/@href", items[0]) == "/book/1"


def test_element_result_with_attr_hint(sel, items):
    assert sel.extract_field("h3/a", items[0], attr="href") == "/book/1"


def test_scalar_results_are_stringified(sel, items):
    assert sel.extract_field("count(ul/li)", items[0]) == "2"
    assert sel.extract_field("boolean(ul)", items[0]) == "true"
    assert sel.extract_field("string(h3)", items[1]) == "Book B"


def test_no_match_returns_default(sel, items):
    assert sel.extract_field("span[@class='author']", items[1], "Unknown") == (
        "Unknown"
    )


def test_invalid_expression_returns_default(sel, items):
    assert sel.extract_field("h3[", items[0], "N/A") == "N/A"


def test_invalid_container_yields_empty(sel):
    doc = sel.parse(HTML).document
    assert sel.select_items("//div[", doc) == []


def test_scalar_container_yields_empty(sel):
    doc = sel.parse(HTML).document
    assert sel.select_items("count(//div)", doc) == []


def test_extract_all_drops_blank_paragraphs(sel):
    doc = sel.parse(HTML).document
    assert sel.extract_all("//div[@id='content']/p", doc) == ["Para 1", "Para 2"]
