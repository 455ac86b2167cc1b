"""
Content-addressed cache for chapter text.

A chapter is identified by the tuple (book title, book author, book detail
URL, chapter title, chapter URL, source id, source name). The key is a
SHA-256 digest of that tuple prefixed with a version tag, so bumping the
version invalidates every entry without touching the store.
"""

from __future__ import annotations

__all__ = ["CACHE_KEY_PREFIX", "ContentCache", "make_cache_key"]

import json
import logging
from collections.abc import Iterable

from novelsource.libs.crypto import hash_text
from novelsource.schemas import (
    BookSource,
    CacheEntry,
    ChapterItem,
    SearchResult,
)

from .kv_store import KVStoreProtocol

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "CACHE:"


def make_cache_key(parts: Iterable[str | None], version: str = "v1") -> str:
    """Build a cache key from identity parts.

    Args:
        parts: Identity values. ``None`` is treated as an empty string.
        version: Version tag mixed into the digest.

    Returns:
        ``"CACHE:"`` followed by the hex SHA-256 of the joined parts.
    """
    joined = "::".join([version, *("" if p is None else str(p) for p in parts)])
    return CACHE_KEY_PREFIX + hash_text(joined)


class ContentCache:
    """Chapter text cache over an injected key-value store.

    Store failures never propagate: a failed read is a miss and a failed
    write is logged and dropped.
    """

    def __init__(self, store: KVStoreProtocol, version: str = "v1") -> None:
        self._store = store
        self._version = version

    @property
    def version(self) -> str:
        return self._version

    def key_for(
        self,
        book: SearchResult,
        chapter: ChapterItem,
        source: BookSource,
    ) -> str:
        """Compute the key of a chapter read through ``source``."""
        return make_cache_key(
            [
                book.get("title"),
                book.get("author"),
                book.get("detail_url"),
                chapter.get("title"),
                chapter.get("chapter_url"),
                source.id,
                source.name,
            ],
            self._version,
        )

    async def get(self, key: str) -> CacheEntry | None:
        try:
            raw = await self._store.get(key)
        except Exception as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Corrupt cache entry for %s", key)
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected cache entry type for %s: %s", key, type(data))
            return None

        return CacheEntry(
            content=str(data.get("content") or ""),
            chapter_title=str(data.get("chapterTitle") or ""),
        )

    async def set(self, key: str, entry: CacheEntry) -> None:
        payload = json.dumps(
            {"content": entry["content"], "chapterTitle": entry["chapter_title"]},
            ensure_ascii=False,
        )
        try:
            await self._store.set(key, payload)
        except Exception as e:
            logger.warning("Cache write failed for %s: %s", key, e)
