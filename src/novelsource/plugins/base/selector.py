"""
Abstract base class shared by the selector dialects.

Subclasses implement the raw operations (``_parse``, ``_select``,
``_extract`` and ``_extract_texts``); this class applies the common
contract around them: body preprocessing, the default-value policy and
turning any evaluation failure into an empty result.
"""

from __future__ import annotations

import abc
import logging
import re
from dataclasses import dataclass, field
from typing import Any, ClassVar

from lxml import html

from novelsource.schemas import SelectorDialect

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Outcome of parsing one response body.

    Attributes:
        document: Parsed document, or None when the body could not be parsed.
        diagnostics: Parser warnings and errors, in the order reported.
    """

    document: Any = None
    diagnostics: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.document is not None


class BaseSelector(abc.ABC):
    """Common behavior of every selector dialect."""

    dialect: ClassVar[SelectorDialect]

    # Entities replaced verbatim before parsing.
    _ENTITY_MAP: ClassVar[tuple[tuple[str, str], ...]] = (
        ("&nbsp;", " "),
        ("&copy;", "©"),
        ("&quot;", '"'),
        ("&apos;", "'"),
    )
    _DOCTYPE_RE = re.compile(r"<!DOCTYPE[^>]*>", re.IGNORECASE)
    _XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)

    #: Whether :meth:`preprocess` runs before :meth:`_parse`.
    PREPROCESS: ClassVar[bool] = True

    @classmethod
    def preprocess(cls, body: str) -> str:
        """Normalize markup before parsing.

        Replaces a few named entities, rewrites the first DOCTYPE to the
        HTML5 form and drops a leading XML declaration.
        """
        for entity, char in cls._ENTITY_MAP:
            body = body.replace(entity, char)
        body = cls._DOCTYPE_RE.sub("<!DOCTYPE html>", body, count=1)
        return cls._XML_DECL_RE.sub("", body, count=1)

    def parse(self, body: str) -> ParseResult:
        text = self.preprocess(body) if self.PREPROCESS else body
        result = ParseResult()
        try:
            result.document = self._parse(text, result.diagnostics)
        except Exception as e:
            result.document = None
            result.diagnostics.append(f"{type(e).__name__}: {e}")
            logger.warning("%s parser failed: %s", self.dialect, e)
        return result

    def select_items(self, container_selector: str, document: Any) -> list[Any]:
        if document is None or not container_selector:
            return []
        try:
            return self._select(container_selector, document)
        except Exception as e:
            logger.warning(
                "%s container selector %r failed: %s",
                self.dialect,
                container_selector,
                e,
            )
            return []

    def extract_field(
        self,
        field_selector: str | None,
        item: Any,
        default: str = "",
        attr: str | None = None,
    ) -> str:
        if not field_selector or item is None:
            return default
        try:
            value = self._extract(field_selector, item, attr)
        except Exception as e:
            logger.debug(
                "%s field selector %r failed: %s", self.dialect, field_selector, e
            )
            return default
        if value is None:
            logger.debug("%s no match for %r", self.dialect, field_selector)
            return default
        value = value.strip()
        return value or default

    def extract_all(self, selector: str, document: Any) -> list[str]:
        if not selector or document is None:
            return []
        try:
            texts = self._extract_texts(selector, document)
        except Exception as e:
            logger.debug("%s selector %r failed: %s", self.dialect, selector, e)
            return []
        return [t for t in (s.strip() for s in texts) if t]

    @abc.abstractmethod
    def _parse(self, text: str, diagnostics: list[str]) -> Any:
        """Build the document. May append to ``diagnostics`` or raise."""
        ...

    @abc.abstractmethod
    def _select(self, container_selector: str, document: Any) -> list[Any]:
        ...

    @abc.abstractmethod
    def _extract(self, field_selector: str, item: Any, attr: str | None) -> str | None:
        """Return the raw value of the first match, or None on no match."""
        ...

    @abc.abstractmethod
    def _extract_texts(self, selector: str, document: Any) -> list[str]:
        ...

    @staticmethod
    def _stringify(value: Any) -> str | None:
        """Render a scalar the way a browser's ``String()`` would.

        Returns None for values that cannot stand in for text.
        """
        match value:
            case None | dict() | list():
                return None
            case bool():
                return "true" if value else "false"
            case float() if value.is_integer():
                return str(int(value))
            case str():
                return str(value)
            case int() | float():
                return str(value)
            case _:
                return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} dialect={self.dialect}>"


class BaseHtmlSelector(BaseSelector):
    """Shared lxml HTML parsing for the markup dialects."""

    def _parse(self, text: str, diagnostics: list[str]) -> Any:
        if not text.strip():
            diagnostics.append("empty document")
            return None

        parser = html.HTMLParser(recover=True, collect_ids=False)
        try:
            document = html.document_fromstring(text, parser=parser)
        finally:
            diagnostics.extend(
                f"line {e.line}: {e.message}" for e in parser.error_log
            )
        return document
