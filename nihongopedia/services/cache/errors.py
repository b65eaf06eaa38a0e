"""Storage errors raised by key-value backends."""


class StorageError(Exception):
    """Persistent-store read/write failure (quota, unavailability, corruption).

    Backends raise this; CacheStore always catches it and degrades to a
    sentinel result, so callers of the cache never see it.
    """

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key
