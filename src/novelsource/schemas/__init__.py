"""
Data contracts and type definitions.
"""

__all__ = [
    "BookSource",
    "Rule",
    "RuleGroupKey",
    "SelectorDialect",
    "CacheConfig",
    "ClientConfig",
    "FetcherConfig",
    "SessionConfig",
    "CacheEntry",
    "ChapterItem",
    "MergedSource",
    "RawSearchResult",
    "SearchResult",
]

from .book import CacheEntry, ChapterItem
from .config import (
    CacheConfig,
    ClientConfig,
    FetcherConfig,
    SessionConfig,
)
from .search import MergedSource, RawSearchResult, SearchResult
from .source import BookSource, Rule, RuleGroupKey, SelectorDialect
