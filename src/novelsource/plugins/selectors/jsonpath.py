"""
JSONPath dialect for sources that answer with JSON.

The document is the decoded JSON value. Container selectors are JSONPath
expressions (extended syntax, filters allowed); a single match holding an
array is unwrapped into its elements. Field selectors are plain keys of
each item, or JSONPath expressions when they start with ``$``.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from functools import lru_cache
from typing import Any

from jsonpath_ng import JSONPath
from jsonpath_ng.exceptions import JSONPathError
from jsonpath_ng.ext import parse as jsonpath_parse

from novelsource.plugins.base.errors import ExtractionError
from novelsource.plugins.base.selector import BaseSelector
from novelsource.schemas import SelectorDialect


@lru_cache(maxsize=256)
def _compile(expr: str) -> JSONPath:
    try:
        return jsonpath_parse(expr)
    except JSONPathError as e:
        raise ExtractionError(f"invalid JSONPath {expr!r}: {e}") from e


def _find(expr: str, data: Any) -> list[Any]:
    values = [m.value for m in _compile(expr.strip()).find(data)]
    if len(values) == 1 and isinstance(values[0], list):
        return list(values[0])
    return values


class JsonPathSelector(BaseSelector):
    dialect = SelectorDialect.JSONPATH
    PREPROCESS = False

    def _parse(self, text: str, diagnostics: list[str]) -> Any:
        text = text.lstrip("\ufeff")
        if not text.strip():
            diagnostics.append("empty document")
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            diagnostics.append(f"invalid JSON: {e}")
            return None

    def _select(self, container_selector: str, document: Any) -> list[Any]:
        return _find(container_selector, document)

    def _extract(self, field_selector: str, item: Any, attr: str | None) -> str | None:
        key = field_selector.strip()
        if key.startswith("$"):
            values = [m.value for m in _compile(key).find(item)]
            value = values[0] if values else None
        elif isinstance(item, Mapping):
            value = item.get(key)
        else:
            return None
        return self._stringify(value)

    def _extract_texts(self, selector: str, document: Any) -> list[str]:
        texts = (self._stringify(v) for v in _find(selector, document))
        return [t for t in texts if t is not None]
