"""
CSS dialect: lxml HTML documents queried through cssselect.

Field selectors may end with a pseudo-element picking what is read from
the first matched element:

* ``a::attr(href)`` reads an attribute,
* ``p::text`` reads the text even when the caller asks for an attribute.

A selector made only of the pseudo-element (``::attr(href)``) reads the
item itself.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from cssselect import SelectorError
from lxml.cssselect import CSSSelector

from novelsource.plugins.base.errors import ExtractionError
from novelsource.plugins.base.selector import BaseHtmlSelector
from novelsource.schemas import SelectorDialect

_PSEUDO_RE = re.compile(
    r"::(?:attr\(\s*([^)\s]+)\s*\)|(text))\s*$",
    re.IGNORECASE,
)


@lru_cache(maxsize=256)
def _compile(expr: str) -> CSSSelector:
    try:
        return CSSSelector(expr, translator="html")
    except SelectorError as e:
        raise ExtractionError(f"invalid CSS selector {expr!r}: {e}") from e


def split_pseudo(selector: str) -> tuple[str, str | None, bool]:
    """Split a selector into (css, attribute, wants_text)."""
    m = _PSEUDO_RE.search(selector)
    if not m:
        return selector.strip(), None, False
    return selector[: m.start()].strip(), m.group(1), m.group(2) is not None


class CssSelector(BaseHtmlSelector):
    dialect = SelectorDialect.CSS

    def _select(self, container_selector: str, document: Any) -> list[Any]:
        return list(_compile(container_selector.strip())(document))

    def _extract(self, field_selector: str, item: Any, attr: str | None) -> str | None:
        css, inline_attr, wants_text = split_pseudo(field_selector)
        nodes = _compile(css)(item) if css else [item]
        if not nodes:
            return None

        name = None if wants_text else (inline_attr or attr)
        if name is None:
            return nodes[0].text_content()
        for node in nodes:
            value = node.get(name)
            if value and value.strip():
                return value
        return None

    def _extract_texts(self, selector: str, document: Any) -> list[str]:
        css, inline_attr, _ = split_pseudo(selector)
        nodes = _compile(css)(document) if css else [document]
        if inline_attr:
            return [node.get(inline_attr) or "" for node in nodes]
        return [node.text_content() for node in nodes]
