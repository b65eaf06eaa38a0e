"""In-memory storage medium.

Stores raw strings in a Python dictionary (no persistence). Useful for unit
tests and for running the loader without a cache file.
"""

from typing import Optional

from .errors import StorageError


class InMemoryStorage:
    """Dictionary-backed KeyValueStorage.

    An optional byte quota mimics browser storage limits: a write that
    would push the total size of keys and values past ``quota_bytes``
    raises StorageError and leaves the previous value in place.

    Example:
        >>> storage = InMemoryStorage(quota_bytes=1024)
        >>> storage.set("k", "v")
        >>> storage.get("k")
        'v'
    """

    def __init__(self, quota_bytes: Optional[int] = None):
        """Initialize empty storage.

        Args:
            quota_bytes: Maximum total UTF-8 size of keys plus values
        """
        self._data: dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            current = self.size_bytes() - self._entry_size(key, self._data.get(key))
            if current + self._entry_size(key, value) > self.quota_bytes:
                raise StorageError(f"Quota of {self.quota_bytes} bytes exceeded", key=key)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> list[str]:
        return list(self._data)

    def size_bytes(self) -> int:
        """Total UTF-8 size of all stored keys and values."""
        return sum(self._entry_size(k, v) for k, v in self._data.items())

    @staticmethod
    def _entry_size(key: str, value: Optional[str]) -> int:
        if value is None:
            return 0
        return len(key.encode("utf-8")) + len(value.encode("utf-8"))
