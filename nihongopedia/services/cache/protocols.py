"""Protocol definitions for key-value storage media.

The cache logic never talks to a concrete storage technology. Anything that
provides these methods (an in-memory dict, an embedded SQLite file, a
platform key-value store) can back a CacheStore.
"""

from typing import Optional, Protocol


class KeyValueStorage(Protocol):
    """Flat string-to-string storage medium.

    Implementations raise StorageError on any failure of the underlying
    medium. They do not interpret keys or values.
    """

    def get(self, key: str) -> Optional[str]:
        """Return the raw stored string, or None if the key is absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store value under key, fully overwriting any previous value."""
        ...

    def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        ...

    def clear(self) -> None:
        """Remove every key held by this medium."""
        ...

    def keys(self) -> list[str]:
        """List every key currently stored."""
        ...
