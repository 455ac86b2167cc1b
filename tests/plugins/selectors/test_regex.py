import pytest

from novelsource.plugins.selectors.regex import RegexSelector

BODY = (
    '<li><a href="/b/1">斗破苍穹</a><i>天蚕土豆</i></li>\n'
    '<LI><a href="/b/2">武动乾坤</a></LI>\n'
    "<p>第一段&nbsp;</p><p> </p><p>第二段</p>"
)


@pytest.fixture
def sel():
    return RegexSelector()


@pytest.fixture
def doc(sel):
    return sel.parse(BODY).document


@pytest.fixture
def items(sel, doc):
    return sel.select_items("<li>.*?</li>", doc)


def test_container_is_global_and_case_insensitive(items):
    assert len(items) == 2
    assert items[1].startswith("<LI>")


def test_capture_group_is_preferred(sel, items):
    assert sel.extract_field(r"<a[^>]*>([^<]+)</a>", items[0]) == "斗破苍穹"
    assert sel.extract_field(r'href="([^"]+)"', items[1]) == "/b/2"


def test_whole_match_without_group(sel, items):
    assert sel.extract_field(r"斗破\w+", items[0]) == "斗破苍穹"


def test_whole_match_when_group_empty(sel, items):
    assert sel.extract_field(r"(\d*)苍穹", items[0]) == "苍穹"


def test_field_no_match_returns_default(sel, items):
    assert sel.extract_field(r"<i>(.*?)</i>", items[1], "Unknown") == "Unknown"


def test_invalid_pattern_is_recovered(sel, doc, items):
    assert sel.select_items("(", doc) == []
    assert sel.extract_field("(", items[0], "N/A") == "N/A"


def test_body_is_preprocessed(doc):
    assert "&nbsp;" not in doc


def test_extract_all(sel, doc):
    assert sel.extract_all(r"<p>(.*?)</p>", doc) == ["第一段", "第二段"]
