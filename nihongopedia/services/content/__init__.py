"""Content loading with cache-aside retrieval, validation and fallback.

Example usage:
    >>> from nihongopedia.services.content import create_content_loader
    >>>
    >>> loader = create_content_loader()
    >>> categories = await loader.load_categories()       # never raises
    >>> bundle = await loader.load_category_data("greetings")
    >>>
    >>> # Custom wiring
    >>> from nihongopedia.services.cache import create_cache_store
    >>> from nihongopedia.services.content import ContentLoader, HttpxTransport, TransportConfig
    >>> loader = ContentLoader(create_cache_store(), HttpxTransport(TransportConfig(origin=url)))
"""

from .config import ContentConfig, TransportConfig
from .errors import ContentError, NetworkError, SchemaError
from .factory import create_cache_from_config, create_content_loader
from .loader import DEFAULT_CATEGORIES, ContentLoader
from .models import CategoryMeta, ContentBundle, Example, Item, LoadResult, LoadSource
from .transport import ContentTransport, HttpxTransport
from .validation import sanitize_payload, sanitize_value, validate_category_payload

__all__ = [
    # Models
    "CategoryMeta",
    "ContentBundle",
    "Example",
    "Item",
    "LoadResult",
    "LoadSource",
    # Errors
    "ContentError",
    "NetworkError",
    "SchemaError",
    # Configuration
    "ContentConfig",
    "TransportConfig",
    # Implementations
    "ContentLoader",
    "ContentTransport",
    "HttpxTransport",
    "DEFAULT_CATEGORIES",
    # Helpers
    "validate_category_payload",
    "sanitize_payload",
    "sanitize_value",
    # Factories
    "create_content_loader",
    "create_cache_from_config",
]
