"""
Protocol definition for the per-dialect extraction strategies.

A selector turns a response body into a document, splits the document into
result items and pulls field values out of each item. Every book source
uses exactly one dialect for all of its rules.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from novelsource.plugins.base.selector import ParseResult
    from novelsource.schemas import SelectorDialect


class SelectorProtocol(Protocol):
    """Extraction strategy for one selector dialect."""

    dialect: SelectorDialect

    def parse(self, body: str) -> ParseResult:
        """Parse a response body.

        Never raises: a body that cannot be parsed yields a result whose
        ``document`` is None, with the reason in ``diagnostics``.
        """
        ...

    def select_items(self, container_selector: str, document: Any) -> list[Any]:
        """Return the items matched by the container selector, in document
        order. Returns an empty list when nothing matches.
        """
        ...

    def extract_field(
        self,
        field_selector: str | None,
        item: Any,
        default: str = "",
        attr: str | None = None,
    ) -> str:
        """Extract one trimmed string value from an item.

        Args:
            field_selector: Dialect-specific expression. Empty means unset.
            item: One value returned by :meth:`select_items`.
            default: Returned when nothing usable is found.
            attr: Attribute to read from the matched element, when the
                dialect supports it.

        Returns:
            The extracted value, or ``default``.
        """
        ...

    def extract_all(self, selector: str, document: Any) -> list[str]:
        """Return every non-empty trimmed text value matched in a document."""
        ...
