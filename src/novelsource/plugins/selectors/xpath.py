"""
XPath dialect over lxml HTML documents.

Container and content selectors are evaluated against the whole document.
Field selectors are evaluated relative to the current item:

* ``span`` becomes ``./span``,
* ``//span`` becomes ``.//span``,
* ``./span`` and ``../span`` are used as written,
* a leading function call (``string(a)``, ``count(li)``) is used as
  written, since XPath functions already take the item as context.
"""

from __future__ import annotations

import re
from typing import Any

from lxml import etree

from novelsource.plugins.base.errors import ExtractionError
from novelsource.plugins.base.selector import BaseHtmlSelector
from novelsource.schemas import SelectorDialect

_FUNCTION_RE = re.compile(r"^[A-Za-z_][\w.-]*\s*\(")
_NODE_TESTS = frozenset({"text", "node", "comment", "processing-instruction"})


def to_relative(selector: str) -> str:
    """Rewrite a field selector so it is evaluated against the item."""
    expr = selector.strip()
    if expr.startswith("."):
        return expr
    if expr.startswith("/"):
        return "." + expr
    m = _FUNCTION_RE.match(expr)
    if m and m.group(0).rstrip("( \t") not in _NODE_TESTS:
        return expr
    return "./" + expr


def _evaluate(node: Any, expr: str) -> Any:
    try:
        return node.xpath(expr)
    except etree.XPathError as e:
        raise ExtractionError(f"invalid XPath {expr!r}: {e}") from e


class XPathSelector(BaseHtmlSelector):
    dialect = SelectorDialect.XPATH

    def _select(self, container_selector: str, document: Any) -> list[Any]:
        result = _evaluate(document, container_selector.strip())
        return list(result) if isinstance(result, list) else []

    def _extract(self, field_selector: str, item: Any, attr: str | None) -> str | None:
        result = _evaluate(item, to_relative(field_selector))
        if isinstance(result, list):
            if not result:
                return None
            result = result[0]
        return self._node_text(result, attr)

    def _extract_texts(self, selector: str, document: Any) -> list[str]:
        result = _evaluate(document, selector.strip())
        if not isinstance(result, list):
            result = [result]
        texts = (self._node_text(node) for node in result)
        return [t for t in texts if t is not None]

    def _node_text(self, node: Any, attr: str | None = None) -> str | None:
        if isinstance(node, etree._Element):
            if attr:
                value = node.get(attr)
                if value and value.strip():
                    return value
            return "".join(node.itertext())
        return self._stringify(node)
