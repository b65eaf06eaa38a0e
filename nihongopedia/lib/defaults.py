"""Default configuration values for the content layer.

All hardcoded defaults live here. The loader should be fully functional
with these defaults against a site served from CONTENT_ORIGIN.

Config hierarchy: .env → environment → these defaults
"""

from typing import Any

# =============================================================================
# Configuration Defaults
# =============================================================================

DEFAULTS: dict[str, Any] = {
    # -------------------------------------------------------------------------
    # Remote content origin
    # -------------------------------------------------------------------------
    "CONTENT_ORIGIN": "http://localhost:8080",
    "CONTENT_BASE_PATH": "/data/categories",
    "CATEGORIES_PATH": "/data/categories.json",

    # -------------------------------------------------------------------------
    # Cache
    # -------------------------------------------------------------------------
    "CACHE_NAMESPACE": "nihongopedia",
    "CACHE_SCHEMA_VERSION": "v1",
    "CACHE_TTL_DAYS": 7,
    "CACHE_DB_PATH": "",  # Empty = in-memory (nothing survives the process)

    # -------------------------------------------------------------------------
    # HTTP transport
    # -------------------------------------------------------------------------
    "HTTP_TIMEOUT": 10.0,
    "HTTP_MAX_RETRIES": 0,
    "COALESCE_REQUESTS": False,

    # -------------------------------------------------------------------------
    # Logging
    # -------------------------------------------------------------------------
    "LOG_LEVEL": "INFO",
    "LOG_FORMAT": "json",  # json | plain
}


# =============================================================================
# Config Categories (for display)
# =============================================================================

CONFIG_CATEGORIES = {
    "origin": [
        "CONTENT_ORIGIN",
        "CONTENT_BASE_PATH",
        "CATEGORIES_PATH",
    ],
    "cache": [
        "CACHE_NAMESPACE",
        "CACHE_SCHEMA_VERSION",
        "CACHE_TTL_DAYS",
        "CACHE_DB_PATH",
    ],
    "http": [
        "HTTP_TIMEOUT",
        "HTTP_MAX_RETRIES",
        "COALESCE_REQUESTS",
    ],
    "logging": [
        "LOG_LEVEL",
        "LOG_FORMAT",
    ],
}


def get_default(key: str) -> Any:
    """Get the default value for a config key.

    Args:
        key: Configuration key

    Returns:
        Default value, or None if key is unknown
    """
    return DEFAULTS.get(key)
