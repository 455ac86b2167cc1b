"""
Book source client: fans searches out to every enabled source, merges the
results and reads chapters through the content cache.

Each search owns one producer task per source feeding a shared queue. A
producer signals its end from a done callback, so the consumer also wakes
up for tasks cancelled before they ever ran.
"""

from __future__ import annotations

__all__ = ["BookSourceClient"]

import asyncio
import logging
import types
from collections.abc import AsyncIterator, Iterable
from pathlib import Path
from typing import Final, Self, final

from novelsource.infra.paths import CHAPTER_CACHE_FILENAME, USER_CACHE_DIR
from novelsource.infra.persistence import (
    ContentCache,
    KVStoreProtocol,
    MemoryKVStore,
    SqliteKVStore,
)
from novelsource.infra.sessions import BaseSession, create_session
from novelsource.plugins.aggregator import SearchAggregator
from novelsource.plugins.base.fetcher import SourceFetcher
from novelsource.plugins.pipeline import SourcePipeline
from novelsource.plugins.protocols import TransportProtocol
from novelsource.schemas import (
    BookSource,
    CacheConfig,
    CacheEntry,
    ChapterItem,
    ClientConfig,
    RawSearchResult,
    SearchResult,
)

logger = logging.getLogger(__name__)


@final
class StopToken:
    """Typed sentinel marking the end of one source's results."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "STOP"


STOP: Final[StopToken] = StopToken()

_QueueItem = tuple[BookSource, RawSearchResult] | StopToken


class BookSourceClient:
    """Facade that runs book sources for a reading UI.

    The client owns the HTTP session (unless one is injected), bounds the
    number of concurrent fetches across all sources, fans searches out to
    every enabled source and reads chapters through the content cache.
    """

    def __init__(
        self,
        sources: Iterable[BookSource],
        config: ClientConfig | None = None,
        *,
        session: TransportProtocol | None = None,
        cache: ContentCache | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            sources: Book sources available to the client.
            config: Client configuration. Defaults to :class:`ClientConfig`.
            session: Optional ready-to-use transport. When omitted, a session
                is created from ``config.fetcher_cfg`` and initialized on
                first use.
            cache: Optional content cache. When omitted, one is built from
                ``config.cache_cfg`` (or none at all when caching is off).
        """
        cfg = config or ClientConfig()
        self._config = cfg
        self._sources: list[BookSource] = list(sources)

        self._owns_session = session is None
        self._session_ready = session is not None
        self._session: TransportProtocol = session or create_session(
            cfg.fetcher_cfg.backend, cfg.fetcher_cfg.session_cfg
        )

        self._store: KVStoreProtocol | None = None
        if cache is None and cfg.cache_cfg.enabled:
            self._store = self._build_store(cfg.cache_cfg)
            cache = ContentCache(self._store, version=cfg.cache_cfg.version)
        self._cache = cache

        self._semaphore = asyncio.Semaphore(max(1, cfg.max_concurrency))
        self._fetcher = SourceFetcher(
            self._session,
            semaphore=self._semaphore,
            request_interval=cfg.fetcher_cfg.request_interval,
        )

        self._cancel: asyncio.Event | None = None
        self._search_tasks: set[asyncio.Task[None]] = set()

    @property
    def sources(self) -> list[BookSource]:
        return list(self._sources)

    @property
    def enabled_sources(self) -> list[BookSource]:
        return [s for s in self._sources if s.enabled]

    @property
    def cache(self) -> ContentCache | None:
        return self._cache

    def set_sources(self, sources: Iterable[BookSource]) -> None:
        """Replace the source list. Running searches keep their sources."""
        self._sources = list(sources)

    async def init(self) -> None:
        """Initialize the owned session. Called lazily by every stage."""
        if self._session_ready:
            return
        if isinstance(self._session, BaseSession):
            await self._session.init()
        self._session_ready = True

    async def close(self) -> None:
        """Cancel any running search and release owned resources."""
        self.cancel_search()
        if self._search_tasks:
            await asyncio.gather(*self._search_tasks, return_exceptions=True)
        if self._owns_session and isinstance(self._session, BaseSession):
            await self._session.close()
            self._session_ready = False
        if isinstance(self._store, SqliteKVStore):
            self._store.close()

    def pipeline(self, source: BookSource) -> SourcePipeline:
        """Build the pipeline of one source.

        Raises:
            ConfigurationError: If the source's rule type is unsupported.
        """
        return SourcePipeline(
            source,
            self._fetcher,
            default_title=self._config.default_title,
            default_author=self._config.default_author,
        )

    async def search(
        self,
        keyword: str,
        *,
        cancel: asyncio.Event | None = None,
    ) -> AsyncIterator[list[SearchResult]]:
        """Search every enabled source and stream aggregated snapshots.

        A snapshot is yielded each time an arriving row changes the merged
        result list. Starting another search cancels this one.

        Args:
            keyword: Search keyword.
            cancel: Optional event; setting it stops the search.

        Yields:
            The full aggregated result list after each change.

        Raises:
            ConfigurationError: If an enabled source has an unsupported rule
                type. Raised before any request is made.
        """
        self.cancel_search()
        cancel = cancel or asyncio.Event()
        self._cancel = cancel

        pipelines = [self.pipeline(s) for s in self.enabled_sources]
        keyword = keyword.strip()
        if not pipelines or not keyword:
            return

        await self.init()
        aggregator = SearchAggregator()
        queue: asyncio.Queue[_QueueItem] = asyncio.Queue()

        async def producer(p: SourcePipeline) -> None:
            try:
                async for raw in p.search(keyword, cancel=cancel):
                    queue.put_nowait((p.source, raw))
            except Exception:
                logger.exception("Search failed for source %s", p.source.name)

        def on_done(task: asyncio.Task[None]) -> None:
            self._search_tasks.discard(task)
            queue.put_nowait(STOP)

        tasks = [asyncio.create_task(producer(p)) for p in pipelines]
        self._search_tasks.update(tasks)
        for t in tasks:
            t.add_done_callback(on_done)

        remaining = len(tasks)
        try:
            while remaining:
                item = await queue.get()
                if isinstance(item, StopToken):
                    remaining -= 1
                    continue
                if cancel.is_set():
                    break
                source, raw = item
                if aggregator.add(raw, source):
                    yield aggregator.results
        finally:
            for t in tasks:
                t.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            if self._cancel is cancel:
                self._cancel = None

    async def search_all(self, keyword: str) -> list[SearchResult]:
        """Run :meth:`search` to completion and return the final list."""
        results: list[SearchResult] = []
        async for snapshot in self.search(keyword):
            results = snapshot
        return results

    def cancel_search(self) -> None:
        """Stop the running search, if any."""
        if self._cancel is not None:
            self._cancel.set()
            self._cancel = None
        for t in list(self._search_tasks):
            t.cancel()

    async def get_chapters(
        self,
        detail_url: str,
        source: BookSource,
    ) -> AsyncIterator[ChapterItem]:
        """Stream the chapter list of a book from ``source``."""
        pipeline = self.pipeline(source)
        await self.init()
        async for chapter in pipeline.get_chapters(detail_url):
            yield chapter

    async def get_content(
        self,
        chapter_url: str,
        source: BookSource,
    ) -> AsyncIterator[str]:
        """Stream the text of a chapter from ``source``."""
        pipeline = self.pipeline(source)
        await self.init()
        async for chunk in pipeline.get_content(chapter_url):
            yield chunk

    async def read_chapter(
        self,
        chapter: ChapterItem,
        source: BookSource,
        book: SearchResult | None = None,
    ) -> CacheEntry:
        """Read a chapter, going through the cache when possible.

        Without ``book`` (a preview read) the cache is bypassed.

        Args:
            chapter: Chapter to read.
            source: Source to read it from.
            book: Book the chapter belongs to.

        Returns:
            The chapter text and title. ``content`` is empty when nothing
            could be extracted.
        """
        key: str | None = None
        if book is not None and self._cache is not None:
            key = self._cache.key_for(book, chapter, source)
            cached = await self._cache.get(key)
            if cached is not None and cached["content"]:
                logger.debug("Cache hit for chapter %s", chapter["chapter_url"])
                return cached

        chunks = [c async for c in self.get_content(chapter["chapter_url"], source)]
        entry = CacheEntry(content="\n\n".join(chunks), chapter_title=chapter["title"])

        if key is not None and self._cache is not None and entry["content"]:
            await self._cache.set(key, entry)
        return entry

    @staticmethod
    def _build_store(cfg: CacheConfig) -> KVStoreProtocol:
        match cfg.backend:
            case "memory":
                return MemoryKVStore()
            case "sqlite":
                cache_dir = Path(cfg.cache_dir) if cfg.cache_dir else USER_CACHE_DIR
                return SqliteKVStore(cache_dir.expanduser() / CHAPTER_CACHE_FILENAME)
            case _:
                raise ValueError(f"Unsupported cache backend: {cfg.backend!r}")

    async def __aenter__(self) -> Self:
        await self.init()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        await self.close()
