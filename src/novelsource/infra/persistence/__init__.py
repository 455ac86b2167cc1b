"""
Persistence helpers: key-value stores and the chapter content cache.
"""

__all__ = [
    "CACHE_KEY_PREFIX",
    "ContentCache",
    "KVStoreProtocol",
    "MemoryKVStore",
    "SqliteKVStore",
    "make_cache_key",
]

from .content_cache import CACHE_KEY_PREFIX, ContentCache, make_cache_key
from .kv_store import KVStoreProtocol, MemoryKVStore, SqliteKVStore
