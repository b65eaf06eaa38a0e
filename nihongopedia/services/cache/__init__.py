"""Namespaced, versioned cache for downloaded content.

This module provides:
- KeyValueStorage protocol (interface for storage media)
- InMemoryStorage and SqliteStorage implementations
- CacheStore (namespacing, schema versioning, TTL freshness)
- Factory functions for creating cache instances

Example:
    >>> from nihongopedia.services.cache import create_cache_store
    >>> cache = create_cache_store()
    >>> cache.set("categories_meta", [{"slug": "greetings"}])
    True
    >>> cache.get("categories_meta")
    [{'slug': 'greetings'}]
"""

from .cache_store import CacheStore
from .config import CacheConfig
from .errors import StorageError
from .factory import create_cache_store, create_in_memory_storage, create_sqlite_storage
from .in_memory_storage import InMemoryStorage
from .models import CacheEntry
from .protocols import KeyValueStorage
from .sqlite_storage import SqliteStorage

__all__ = [
    "CacheStore",
    "CacheConfig",
    "CacheEntry",
    "KeyValueStorage",
    "InMemoryStorage",
    "SqliteStorage",
    "StorageError",
    "create_cache_store",
    "create_in_memory_storage",
    "create_sqlite_storage",
]
