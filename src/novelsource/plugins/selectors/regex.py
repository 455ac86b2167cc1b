"""
Regular-expression dialect for sites that defeat structured parsing.

The document is the preprocessed body. The container pattern splits it
into chunks (every match, case-insensitive); a field pattern is searched
inside a chunk and yields capture group 1 when it is non-empty, otherwise
the whole match.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from novelsource.plugins.base.errors import ExtractionError
from novelsource.plugins.base.selector import BaseSelector
from novelsource.schemas import SelectorDialect

FLAGS = re.IGNORECASE


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern, FLAGS)
    except re.error as e:
        raise ExtractionError(f"invalid pattern {pattern!r}: {e}") from e


class RegexSelector(BaseSelector):
    dialect = SelectorDialect.REGEX

    def _parse(self, text: str, diagnostics: list[str]) -> Any:
        return text

    def _select(self, container_selector: str, document: Any) -> list[Any]:
        return [
            m.group(0)
            for m in _compile(container_selector).finditer(document)
            if m.group(0)
        ]

    def _extract(self, field_selector: str, item: Any, attr: str | None) -> str | None:
        m = _compile(field_selector).search(item)
        return self._match_value(m) if m else None

    def _extract_texts(self, selector: str, document: Any) -> list[str]:
        return [self._match_value(m) for m in _compile(selector).finditer(document)]

    @staticmethod
    def _match_value(m: re.Match[str]) -> str:
        if m.re.groups and m.group(1):
            return m.group(1)
        return m.group(0)
