"""
Dialect dispatch: maps a book source's rule type to its selector.
"""

from __future__ import annotations

__all__ = ["available_dialects", "build_selector"]

from novelsource.plugins.base.errors import ConfigurationError
from novelsource.plugins.base.selector import BaseSelector
from novelsource.schemas import SelectorDialect


def available_dialects() -> list[SelectorDialect]:
    """Return every supported selector dialect."""
    return list(SelectorDialect)


def build_selector(dialect: SelectorDialect | str) -> BaseSelector:
    """Create the selector for a dialect.

    Args:
        dialect: A :class:`SelectorDialect` or its string value. Matching is
            case-insensitive and ignores surrounding whitespace.

    Returns:
        BaseSelector: A fresh selector instance.

    Raises:
        ConfigurationError: If the dialect is not supported.
    """
    try:
        key = SelectorDialect(str(dialect).strip().lower())
    except ValueError:
        raise ConfigurationError(f"Unsupported rule type: {dialect!r}") from None

    match key:
        case SelectorDialect.CSS:
            from novelsource.plugins.selectors.css import CssSelector

            return CssSelector()
        case SelectorDialect.XPATH:
            from novelsource.plugins.selectors.xpath import XPathSelector

            return XPathSelector()
        case SelectorDialect.JSONPATH:
            from novelsource.plugins.selectors.jsonpath import JsonPathSelector

            return JsonPathSelector()
        case SelectorDialect.REGEX:
            from novelsource.plugins.selectors.regex import RegexSelector

            return RegexSelector()
        case _:
            raise ConfigurationError(f"Unsupported rule type: {dialect!r}")
