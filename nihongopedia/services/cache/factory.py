"""Factory functions for creating cache instances with sensible defaults."""

from pathlib import Path
from typing import Optional

from .cache_store import CacheStore
from .config import CacheConfig
from .in_memory_storage import InMemoryStorage
from .protocols import KeyValueStorage
from .sqlite_storage import SqliteStorage


def create_in_memory_storage(quota_bytes: Optional[int] = None) -> InMemoryStorage:
    """Create a non-persistent storage medium (tests, throwaway runs)."""
    return InMemoryStorage(quota_bytes=quota_bytes)


def create_sqlite_storage(db_path: Path | str) -> SqliteStorage:
    """Create a durable storage medium backed by an SQLite file."""
    return SqliteStorage(db_path)


def create_cache_store(
    storage: Optional[KeyValueStorage] = None,
    config: Optional[CacheConfig] = None,
) -> CacheStore:
    """Create a CacheStore.

    Args:
        storage: Medium to use (defaults to a fresh InMemoryStorage)
        config: Cache configuration (defaults to CacheConfig())

    Returns:
        CacheStore instance

    Example:
        >>> cache = create_cache_store(create_sqlite_storage("data/cache.db"))
        >>> cache.set("category_greetings", {"items": []})
        True
    """
    return CacheStore(storage or create_in_memory_storage(), config or CacheConfig())
