"""
Merges search rows from many sources into one deduplicated result list.

Rows are the same logical book when their title and author match after
trimming and case folding. The first source to report a book owns the
result; later sources are appended to its ``merged_sources``.
"""

from __future__ import annotations

__all__ = ["SearchAggregator", "book_key"]

import copy
import uuid

from novelsource.schemas import (
    BookSource,
    MergedSource,
    RawSearchResult,
    SearchResult,
)


def book_key(title: str, author: str) -> tuple[str, str]:
    """Return the identity key of a book."""
    return title.strip().casefold(), author.strip().casefold()


class SearchAggregator:
    """Ordered, incrementally updated search result list for one query."""

    def __init__(self) -> None:
        self._results: list[SearchResult] = []
        self._index: dict[tuple[str, str], SearchResult] = {}

    def add(self, raw: RawSearchResult, source: BookSource) -> bool:
        """Merge one search row.

        Args:
            raw: Row produced by a source pipeline.
            source: Source that produced the row.

        Returns:
            True if the result list changed.
        """
        key = book_key(raw["title"], raw["author"])
        merged = MergedSource(
            source_id=source.id,
            source_name=source.name,
            detail_url=raw["detail_url"],
        )

        existing = self._index.get(key)
        if existing is None:
            result = SearchResult(
                title=raw["title"],
                author=raw["author"],
                cover_url=raw["cover_url"],
                intro=raw["intro"],
                detail_url=raw["detail_url"],
                id=uuid.uuid4().hex,
                source_id=source.id,
                source_name=source.name,
                merged_sources=[merged],
            )
            self._index[key] = result
            self._results.append(result)
            return True

        for entry in existing["merged_sources"]:
            if entry["detail_url"] == merged["detail_url"] or (
                entry["source_id"] == merged["source_id"]
                and entry["source_name"] == merged["source_name"]
            ):
                return False

        existing["merged_sources"].append(merged)
        return True

    @property
    def results(self) -> list[SearchResult]:
        """Snapshot of the current results, safe to hand to other tasks."""
        return copy.deepcopy(self._results)

    def clear(self) -> None:
        self._results.clear()
        self._index.clear()

    def __len__(self) -> int:
        return len(self._results)
