"""Data model for the envelope persisted around each cached value."""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """Envelope stored on the medium for every cache key.

    Serialized (by alias) as ``{"value": ..., "timestamp": <epoch ms>,
    "version": "<schema version>"}``. Owned by CacheStore; callers only
    ever see ``value``.
    """

    model_config = ConfigDict(populate_by_name=True)

    value: Any = Field(None, description="Cached JSON value")
    timestamp: int = Field(..., description="Write time in milliseconds since the epoch")
    schema_version: str = Field(..., alias="version", description="Schema version at write time")

    @property
    def cached_at(self) -> datetime:
        """Write time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    def to_json(self) -> str:
        """Serialize to the on-medium JSON envelope."""
        return self.model_dump_json(by_alias=True)
