"""Schema checks and sanitization for payloads from the content origin.

Content is untrusted: every payload is validated before anything else
touches it, and every string is HTML-escaped before it is cached or
returned, so it renders as text and never as markup.
"""

import html
import logging
from typing import Any

from pydantic import ValidationError

from .errors import SchemaError
from .models import CategoryMeta, ContentBundle

logger = logging.getLogger(__name__)

REQUIRED_BUNDLE_FIELDS = ("category", "content_version", "items")
REQUIRED_ITEM_FIELDS = ("id", "expression", "reading", "meaning_id")


def validate_category_payload(data: Any) -> None:
    """Check the shape of a category bundle payload.

    Args:
        data: Decoded JSON body

    Raises:
        SchemaError: Naming the first missing field (and item index)
    """
    if not isinstance(data, dict):
        raise SchemaError("<root>", message="Invalid data format: expected an object")

    for field in REQUIRED_BUNDLE_FIELDS:
        if field not in data:
            raise SchemaError(field)

    if not isinstance(data["items"], list):
        raise SchemaError("items", message="Items must be an array")

    for index, item in enumerate(data["items"]):
        if not isinstance(item, dict):
            raise SchemaError("<item>", index=index, message="Item must be an object")
        for field in REQUIRED_ITEM_FIELDS:
            if field not in item:
                raise SchemaError(field, index=index)


def sanitize_value(value: Any) -> Any:
    """HTML-escape every string in a JSON value, recursively.

    Only ``&``, ``<`` and ``>`` are escaped, which is what setting the
    text of an element does; quotes stay readable ("Don't"). Dict keys
    and non-string scalars are left untouched.
    """
    if isinstance(value, str):
        return html.escape(value, quote=False)
    if isinstance(value, list):
        return [sanitize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_value(v) for k, v in value.items()}
    return value


def sanitize_payload(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a validated bundle with every item sanitized."""
    return {**data, "items": [sanitize_value(item) for item in data["items"]]}


def parse_bundle(data: Any) -> ContentBundle:
    """Build a ContentBundle from a payload.

    Only the required-field checks of ``validate_category_payload`` can
    reject it; field values are otherwise taken as served.

    Raises:
        SchemaError: Naming the first missing field (and item index)
    """
    validate_category_payload(data)
    return ContentBundle.model_validate(data)


def parse_categories(data: Any) -> list[CategoryMeta]:
    """Build the category listing from a payload.

    Entries that are not usable category objects are skipped with a
    warning; only a payload that is not an array is rejected.

    Raises:
        SchemaError: If the payload is not an array
    """
    if not isinstance(data, list):
        raise SchemaError("<root>", message="Invalid categories data format: expected an array")

    categories = []
    for index, entry in enumerate(data):
        try:
            categories.append(CategoryMeta.model_validate(entry))
        except ValidationError as e:
            logger.warning(f"Skipping category entry {index}: {e.error_count()} invalid field(s)")
    return categories
