"""Errors surfaced by the content loader."""

from typing import Optional


class ContentError(Exception):
    """Base class for content loading failures that reach the caller."""


class NetworkError(ContentError):
    """Transport/connection failure or non-success response."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class SchemaError(ContentError):
    """Payload is missing a required field or has the wrong shape.

    Attributes:
        field: Name of the offending field
        index: Index of the offending item, for item-level fields
    """

    def __init__(self, field: str, index: Optional[int] = None, message: Optional[str] = None):
        if message is None:
            message = f"Missing required field: {field}"
        if index is not None:
            message = f"Item {index}: {message}"
        super().__init__(message)
        self.field = field
        self.index = index
