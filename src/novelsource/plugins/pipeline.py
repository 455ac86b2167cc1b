"""
Per-source extraction pipeline.

A :class:`SourcePipeline` binds one book source to its selector dialect and
exposes the three reading stages as async generators:

* :meth:`SourcePipeline.search` yields raw search rows,
* :meth:`SourcePipeline.get_chapters` yields the chapter list,
* :meth:`SourcePipeline.get_content` yields chapter text.

A stage that cannot run (missing rules, network failure, unparsable page)
simply ends its sequence; only configuration errors escape.
"""

from __future__ import annotations

__all__ = ["SourcePipeline"]

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

from novelsource.infra.url_resolver import build_search_url, resolve_url
from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.plugins.protocols import SelectorProtocol
from novelsource.plugins.registry import build_selector
from novelsource.schemas import (
    BookSource,
    ChapterItem,
    RawSearchResult,
    RuleGroupKey,
)

logger = logging.getLogger(__name__)

_SEARCH = RuleGroupKey.SEARCH
_CATALOG = RuleGroupKey.CATALOG
_CONTENT = RuleGroupKey.CONTENT


class SourcePipeline:
    """Runs the reading stages of one book source.

    Args:
        source: The book source to run.
        fetcher: Fetcher used for every page of this source.
        default_title: Title used when a search row has none.
        default_author: Author used when a search row has none.

    Raises:
        ConfigurationError: If the source's rule type is not a supported
            selector dialect.
    """

    def __init__(
        self,
        source: BookSource,
        fetcher: SourceFetcher,
        *,
        default_title: str = "Unknown Title",
        default_author: str = "Unknown Author",
    ) -> None:
        self.source = source
        self._fetcher = fetcher
        self._selector: SelectorProtocol = build_selector(source.rule_type)
        self._default_title = default_title
        self._default_author = default_author

    @property
    def selector(self) -> SelectorProtocol:
        return self._selector

    async def search(
        self,
        keyword: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[RawSearchResult]:
        """Yield the search rows of ``keyword``, in page order.

        Requires the ``searchUrl`` and ``itemSelector`` search rules; without
        them nothing is yielded.
        """
        src = self.source
        template = src.rule_value(_SEARCH, "searchUrl")
        item_selector = src.rule_value(_SEARCH, "itemSelector")
        if not template or not item_selector:
            logger.debug("Source %s: search rules incomplete, skipping", src.name)
            return

        if cancel is not None and cancel.is_set():
            return
        url = build_search_url(template, keyword, src.base_url)
        document = await self._load(url, _SEARCH)
        items = self._selector.select_items(item_selector, document)
        logger.debug("Source %s: %d search items from %s", src.name, len(items), url)

        fields = {
            key: src.rule_value(_SEARCH, key)
            for key in (
                "titleSelector",
                "authorSelector",
                "coverSelector",
                "introSelector",
                "detailSelector",
            )
        }
        for item in items:
            row = self._search_row(item, fields)
            if cancel is not None and cancel.is_set():
                return
            yield row

    async def get_chapters(
        self,
        detail_url: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[ChapterItem]:
        """Yield the chapter list of a book, in document order.

        Requires the ``chapterList``, ``chapterTitle`` and ``chapterUrl``
        catalog rules. Chapter URLs are resolved against ``detail_url``.
        """
        src = self.source
        list_selector = src.rule_value(_CATALOG, "chapterList")
        title_selector = src.rule_value(_CATALOG, "chapterTitle")
        url_selector = src.rule_value(_CATALOG, "chapterUrl")
        if not (list_selector and title_selector and url_selector):
            logger.debug("Source %s: catalog rules incomplete, skipping", src.name)
            return
        time_selector = src.rule_value(_CATALOG, "updateTime")

        if cancel is not None and cancel.is_set():
            return
        document = await self._load(detail_url, _CATALOG)
        sel = self._selector
        for item in sel.select_items(list_selector, document):
            chapter = ChapterItem(
                title=sel.extract_field(title_selector, item),
                chapter_url=resolve_url(
                    sel.extract_field(url_selector, item, attr="href"), detail_url
                ),
            )
            if time_selector:
                update_time = sel.extract_field(time_selector, item)
                if update_time:
                    chapter["update_time"] = update_time
            if cancel is not None and cancel.is_set():
                return
            yield chapter

    async def get_content(
        self,
        chapter_url: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[str]:
        """Yield the text of a chapter.

        All paragraphs matched by the ``content`` rule are joined with a
        blank line into a single chunk. Nothing is yielded when the rule is
        unset or matches nothing.
        """
        src = self.source
        content_selector = src.rule_value(_CONTENT, "content")
        if not content_selector:
            logger.debug("Source %s: content rule unset, skipping", src.name)
            return

        if cancel is not None and cancel.is_set():
            return
        document = await self._load(chapter_url, _CONTENT)
        paragraphs = self._selector.extract_all(content_selector, document)
        if not paragraphs:
            logger.debug("Source %s: no content at %s", src.name, chapter_url)
            return
        if cancel is not None and cancel.is_set():
            return
        yield "\n\n".join(paragraphs)

    async def _load(self, url: str, group: RuleGroupKey) -> Any:
        """Fetch and parse one page; returns None on any failure."""
        try:
            body = await self._fetcher.fetch_text(url, self.source, group)
        except ConnectionError as e:
            logger.warning("Source %s: %s", self.source.name, e)
            return None
        except Exception:
            logger.exception(
                "Source %s: unexpected error fetching %s", self.source.name, url
            )
            return None

        result = self._selector.parse(body)
        if result.diagnostics:
            logger.debug(
                "Source %s: %d parser diagnostics for %s: %s",
                self.source.name,
                len(result.diagnostics),
                url,
                "; ".join(result.diagnostics[:5]),
            )
        if not result.ok:
            logger.warning(
                "Source %s: unparsable document at %s", self.source.name, url
            )
        return result.document

    def _search_row(self, item: Any, fields: dict[str, str]) -> RawSearchResult:
        sel = self._selector
        base_url = self.source.base_url
        return RawSearchResult(
            title=sel.extract_field(fields["titleSelector"], item, self._default_title),
            author=sel.extract_field(
                fields["authorSelector"], item, self._default_author
            ),
            cover_url=resolve_url(
                sel.extract_field(fields["coverSelector"], item, attr="src"), base_url
            ),
            intro=sel.extract_field(fields["introSelector"], item),
            detail_url=resolve_url(
                sel.extract_field(fields["detailSelector"], item, attr="href"),
                base_url,
            ),
        )

    def __repr__(self) -> str:
        return (
            f"<SourcePipeline source={self.source.name!r} "
            f"dialect={self._selector.dialect}>"
        )
