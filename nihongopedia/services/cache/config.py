"""Configuration for the namespaced cache."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass
class CacheConfig:
    """Configuration for CacheStore.

    Attributes:
        namespace: Product namespace prefixed to every physical key
        schema_version: Running schema version; entries written under any
            other version are treated as absent and purged on read
        default_max_age: Age after which an entry is stale
    """

    namespace: str = "nihongopedia"
    schema_version: str = "v1"
    default_max_age: timedelta = timedelta(days=7)

    def __post_init__(self):
        """Validate configuration."""
        if not self.namespace:
            raise ValueError("namespace must not be empty")
        if not self.schema_version:
            raise ValueError("schema_version must not be empty")
        if self.default_max_age <= timedelta(0):
            raise ValueError(f"default_max_age must be positive, got {self.default_max_age}")

    @property
    def namespace_prefix(self) -> str:
        """Prefix shared by keys of every schema version."""
        return f"{self.namespace}_"

    @property
    def key_prefix(self) -> str:
        """Prefix of keys written under the running schema version."""
        return f"{self.namespace}_{self.schema_version}_"
