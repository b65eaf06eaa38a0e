"""Namespaced, versioned, TTL-aware cache over a key-value medium.

Every logical key is stored under ``<namespace>_<schema version>_<key>``
wrapped in a CacheEntry envelope. Bumping the schema version orphans all
older entries: they are never read again and are purged on first access
or by ``clear_all()``.

None of the operations raise. A broken or full medium degrades the cache
to "operate without cache" and is reported through the log only.
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from pydantic import ValidationError

from .config import CacheConfig
from .errors import StorageError
from .models import CacheEntry
from .protocols import KeyValueStorage

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


def _to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


class CacheStore:
    """Cache wrapper adding namespacing, schema versioning and freshness.

    Example:
        >>> from nihongopedia.services.cache import create_cache_store
        >>> cache = create_cache_store()
        >>> cache.set("categories_meta", [{"slug": "greetings"}])
        True
        >>> cache.get("categories_meta")
        [{'slug': 'greetings'}]
        >>> cache.is_expired("categories_meta")
        False
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize cache store.

        Args:
            storage: Medium holding the serialized envelopes
            config: Namespace, schema version and default max age
            clock: Returns the current time (injectable for tests)
        """
        self.storage = storage
        self.config = config or CacheConfig()
        self.clock = clock

    def physical_key(self, key: str) -> str:
        """Map a logical key to its namespaced storage key."""
        return f"{self.config.key_prefix}{key}"

    def _read_entry(self, key: str) -> Optional[CacheEntry]:
        """Read and parse an envelope. Raises on storage or format errors."""
        raw = self.storage.get(self.physical_key(key))
        if raw is None:
            return None
        return CacheEntry.model_validate(json.loads(raw))

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Retrieve the full envelope for a key.

        Entries from another schema version are removed and reported absent.

        Args:
            key: Logical cache key

        Returns:
            CacheEntry, or None if absent, unreadable or from another version
        """
        try:
            entry = self._read_entry(key)
        except (StorageError, ValueError, ValidationError) as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

        if entry is None:
            return None

        if entry.schema_version != self.config.schema_version:
            logger.info(
                f"Purging {key}: schema {entry.schema_version} != {self.config.schema_version}"
            )
            self.remove(key)
            return None

        return entry

    def get(self, key: str) -> Any:
        """Retrieve a cached value.

        Args:
            key: Logical cache key

        Returns:
            The stored value, or None if absent
        """
        entry = self.get_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any) -> bool:
        """Store a value stamped with the current time and schema version.

        Args:
            key: Logical cache key
            value: JSON-serializable value

        Returns:
            True if written, False if the medium rejected the write
        """
        entry = CacheEntry(
            value=value,
            timestamp=_to_millis(self.clock()),
            schema_version=self.config.schema_version,
        )
        try:
            self.storage.set(self.physical_key(key), entry.to_json())
            return True
        except (StorageError, TypeError, ValueError) as e:
            logger.error(f"Cache write failed for {key}: {e}")
            return False

    def remove(self, key: str) -> bool:
        """Remove one logical key.

        Returns:
            True unless the medium failed
        """
        try:
            self.storage.remove(self.physical_key(key))
            return True
        except StorageError as e:
            logger.error(f"Cache remove failed for {key}: {e}")
            return False

    def clear_all(self) -> bool:
        """Remove every key under the product namespace, whatever its version.

        Returns:
            True unless the medium failed
        """
        prefix = self.config.namespace_prefix
        try:
            for physical in self.storage.keys():
                if physical.startswith(prefix):
                    self.storage.remove(physical)
            return True
        except StorageError as e:
            logger.error(f"Cache clear failed: {e}")
            return False

    def keys(self) -> list[str]:
        """List logical keys written under the running schema version."""
        prefix = self.config.key_prefix
        try:
            return sorted(k[len(prefix):] for k in self.storage.keys() if k.startswith(prefix))
        except StorageError as e:
            logger.warning(f"Cache key listing failed: {e}")
            return []

    def is_expired(self, key: str, max_age: Optional[timedelta] = None) -> bool:
        """Check whether an entry is stale.

        An entry written at T is fresh on [T, T + max_age).

        Args:
            key: Logical cache key
            max_age: Freshness window (defaults to config.default_max_age)

        Returns:
            True if absent, corrupt, or older than max_age
        """
        max_age = max_age if max_age is not None else self.config.default_max_age
        try:
            entry = self._read_entry(key)
        except (StorageError, ValueError, ValidationError):
            return True

        if entry is None:
            return True

        age_ms = _to_millis(self.clock()) - entry.timestamp
        return age_ms >= max_age / timedelta(milliseconds=1)
