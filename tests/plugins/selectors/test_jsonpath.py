import json

import pytest

from novelsource.plugins.selectors.jsonpath import JsonPathSelector

DATA = {
    "code": 0,
    "data": {
        "list": [
            {
                "name": "斗破苍穹",
                "author": {"name": "天蚕土豆"},
                "words": 5300000,
                "score": 9.5,
                "vip": True,
                "tags": ["玄幻"],
                "cover": None,
                "url": "/book/1",
            },
            {"name": " 武动乾坤 ", "words": 4000000.0},
        ]
    },
}


@pytest.fixture
def sel():
    return JsonPathSelector()


@pytest.fixture
def doc(sel):
    result = sel.parse(json.dumps(DATA, ensure_ascii=False))
    assert result.ok
    return result.document


@pytest.fixture
def items(sel, doc):
    return sel.select_items("$.data.list", doc)


def test_single_array_match_is_flattened(items):
    assert len(items) == 2


def test_wildcard_container(sel, doc):
    assert len(sel.select_items("$.data.list[*]", doc)) == 2


def test_plain_key_fields(sel, items):
    assert sel.extract_field("name", items[0]) == "斗破苍穹"
    assert sel.extract_field("name", items[1]) == "武动乾坤"
    assert sel.extract_field("url", items[0]) == "/book/1"


def test_scalars_are_stringified(sel, items):
    assert sel.extract_field("words", items[0]) == "5300000"
    assert sel.extract_field("words", items[1]) == "4000000"
    assert sel.extract_field("score", items[0]) == "9.5"
    assert sel.extract_field("vip", items[0]) == "true"


def test_null_objects_and_arrays_count_as_no_match(sel, items):
    assert sel.extract_field("cover", items[0], "N/A") == "N/A"
    assert sel.extract_field("tags", items[0], "N/A") == "N/A"
    assert sel.extract_field("author", items[0], "N/A") == "N/A"


def test_dollar_field_is_a_path(sel, items):
    assert sel.extract_field("$.author.name", items[0]) == "天蚕土豆"
    assert sel.extract_field("$.author.name", items[1], "N/A") == "N/A"


def test_missing_key_returns_default(sel, items):
    assert sel.extract_field("author", items[1], "Unknown Author") == "Unknown Author"


def test_non_mapping_item_returns_default(sel):
    assert sel.extract_field("name", "plain", "N/A") == "N/A"


def test_invalid_json_is_a_diagnostic(sel):
    result = sel.parse("<html>not json</html>")
    assert result.document is None
    assert any("invalid JSON" in d for d in result.diagnostics)


def test_bom_is_ignored(sel):
    assert sel.parse('\ufeff{"a": 1}').document == {"a": 1}


def test_entities_are_left_alone(sel):
    assert sel.parse('{"a": "x&nbsp;y"}').document == {"a": "x&nbsp;y"}


def test_invalid_expression_yields_empty(sel, doc):
    assert sel.select_items("$[[", doc) == []


def test_extract_all(sel, doc):
    assert sel.extract_all("$.data.list[*].name", doc) == ["斗破苍穹", "武动乾坤"]
