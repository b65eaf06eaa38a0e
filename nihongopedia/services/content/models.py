"""Data models for category metadata and content bundles.

Field names follow Python conventions; the JSON served by the content
origin uses the aliases (``category``, ``content_version``, ``meaning_id``,
``itemCount``). Unknown keys are kept so that downstream renderers see the
full payload.

Bundle models only require the keys checked by
``validate_category_payload`` to be present. Their values, and every
optional field, are taken as served: a payload that passes validation
always parses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="allow")


class Example(BaseModel):
    """Example sentence attached to an item."""

    model_config = _MODEL_CONFIG

    japanese: Optional[str] = None
    romaji: Optional[str] = None
    translation: Optional[str] = None


# Objects become Example; anything else (plain strings, numbers) is kept raw
ExampleOrRaw = Annotated[Union[Example, Any], Field(union_mode="left_to_right")]


class Item(BaseModel):
    """A single vocabulary expression."""

    model_config = _MODEL_CONFIG

    # Required to be present; values are whatever the origin serves
    id: Any
    expression: Any
    reading: Any
    meaning: Any = Field(..., alias="meaning_id")

    examples: Union[list[ExampleOrRaw], Any] = Field(None, union_mode="left_to_right")
    audio: Any = None
    politeness: Any = None

    @property
    def example_list(self) -> list[Any]:
        """Examples as a list (empty when absent or not an array)."""
        return self.examples if isinstance(self.examples, list) else []


class ContentBundle(BaseModel):
    """All items of one category at one content version."""

    model_config = _MODEL_CONFIG

    category_slug: Any = Field(..., alias="category")
    content_version: Any = Field(...)
    items: list[Item] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Dump in wire format (aliases, extras included)."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class CategoryMeta(BaseModel):
    """Entry of the category listing shown on the landing page."""

    model_config = _MODEL_CONFIG

    slug: str
    title: str = ""
    description: str = ""
    item_count: Optional[int] = Field(None, alias="itemCount")
    level: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        """Dump in wire format (aliases, extras included)."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class LoadSource(str, Enum):
    """Where a load call got its data from."""

    CACHE = "cache"
    NETWORK = "network"
    STALE_CACHE = "stale_cache"
    DEFAULTS = "defaults"


T = TypeVar("T")


@dataclass
class LoadResult(Generic[T]):
    """Outcome of a load call.

    Attributes:
        data: The loaded value
        source: Which tier produced it
        error: Failure that forced a fallback (None for fresh results)
    """

    data: T
    source: LoadSource
    error: Optional[Exception] = None

    @property
    def degraded(self) -> bool:
        """True when the data did not come from a fresh cache hit or fetch."""
        return self.source in (LoadSource.STALE_CACHE, LoadSource.DEFAULTS)
