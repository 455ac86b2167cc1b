import pytest

from novelsource.plugins.base.errors import ConfigurationError, NovelSourceError
from novelsource.plugins.base.selector import BaseSelector
from novelsource.plugins.registry import available_dialects, build_selector
from novelsource.schemas import SelectorDialect


@pytest.mark.parametrize("dialect", list(SelectorDialect))
def test_every_dialect_has_a_selector(dialect):
    sel = build_selector(dialect)
    assert isinstance(sel, BaseSelector)
    assert sel.dialect == dialect


@pytest.mark.parametrize("raw", ["xpath", "XPath", " xpath "])
def test_string_dialects_are_normalized(raw):
    assert build_selector(raw).dialect is SelectorDialect.XPATH


@pytest.mark.parametrize("raw", ["yaml", "", "css3"])
def test_unknown_dialect_is_a_configuration_error(raw):
    with pytest.raises(ConfigurationError):
        build_selector(raw)


def test_configuration_error_is_a_novelsource_error():
    assert issubclass(ConfigurationError, NovelSourceError)


def test_available_dialects():
    assert set(available_dialects()) == {"css", "xpath", "jsonpath", "regex"}
