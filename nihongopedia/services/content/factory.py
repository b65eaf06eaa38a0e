"""Factory functions for building a ContentLoader from configuration."""

import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from nihongopedia.lib.config_manager import ConfigManager, config as default_config
from nihongopedia.services.cache import (
    CacheConfig,
    CacheStore,
    StorageError,
    create_cache_store,
    create_in_memory_storage,
    create_sqlite_storage,
)

from .config import ContentConfig, TransportConfig
from .loader import ContentLoader
from .transport import ContentTransport, HttpxTransport

logger = logging.getLogger(__name__)


def create_cache_from_config(
    settings: Optional[ConfigManager] = None,
    db_path: Optional[Path | str] = None,
) -> CacheStore:
    """Build the CacheStore described by CACHE_* settings.

    CACHE_DB_PATH (or db_path) selects an SQLite file; empty means in-memory.
    A file that cannot be opened degrades to in-memory storage with a
    warning, so a broken cache never stops content from loading.
    """
    settings = settings or default_config
    cache_config = CacheConfig(
        namespace=settings.get("CACHE_NAMESPACE"),
        schema_version=settings.get("CACHE_SCHEMA_VERSION"),
        default_max_age=timedelta(days=settings.get("CACHE_TTL_DAYS")),
    )
    db_path = db_path or settings.get("CACHE_DB_PATH")
    storage = create_in_memory_storage()
    if db_path:
        try:
            storage = create_sqlite_storage(Path(db_path))
        except StorageError as e:
            logger.warning(f"Cache file unavailable, caching in memory only: {e}")
    return create_cache_store(storage, cache_config)


def create_content_loader(
    cache: Optional[CacheStore] = None,
    transport: Optional[ContentTransport] = None,
    settings: Optional[ConfigManager] = None,
) -> ContentLoader:
    """Create a ContentLoader wired from configuration.

    Args:
        cache: Cache to use (defaults to one built from CACHE_* settings)
        transport: Transport to use (defaults to HttpxTransport on CONTENT_ORIGIN)
        settings: Config source (defaults to the process-wide config)

    Returns:
        ContentLoader instance

    Example:
        >>> loader = create_content_loader()
        >>> categories = await loader.load_categories()
    """
    settings = settings or default_config

    if cache is None:
        cache = create_cache_from_config(settings)

    if transport is None:
        transport = HttpxTransport(
            TransportConfig(
                origin=settings.get("CONTENT_ORIGIN"),
                timeout=settings.get("HTTP_TIMEOUT"),
                max_retries=settings.get("HTTP_MAX_RETRIES"),
            )
        )

    content_config = ContentConfig(
        base_url=settings.get("CONTENT_BASE_PATH"),
        categories_url=settings.get("CATEGORIES_PATH"),
        cache_ttl=timedelta(days=settings.get("CACHE_TTL_DAYS")),
        coalesce_requests=settings.get("COALESCE_REQUESTS"),
    )
    return ContentLoader(cache, transport, content_config)
