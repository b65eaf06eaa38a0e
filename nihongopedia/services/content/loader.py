"""Cache-aside loader for category listings and category bundles.

Load flow for one call::

    CacheCheck -> hit ------------------------------------> Done
               -> miss/stale -> Fetching -> Validating -> Sanitizing
                                                      -> Persisting -> Done
    any failure -> stale cache rescue -> Done (degraded) | raise

The category listing never fails: it falls back to stale cache and then
to a built-in default list. Category bundles fall back to stale cache
only, and otherwise raise, since fabricated vocabulary would be wrong.
"""

import asyncio
import logging
from typing import Any, Iterable, Mapping, Optional

from nihongopedia.lib.logging_config import log_with_context
from nihongopedia.services.cache import CacheStore

from .config import ContentConfig
from .errors import ContentError
from .models import CategoryMeta, ContentBundle, LoadResult, LoadSource
from .transport import ContentTransport
from .validation import parse_bundle, parse_categories, sanitize_payload, validate_category_payload

logger = logging.getLogger(__name__)

CATEGORIES_CACHE_KEY = "categories_meta"

DEFAULT_CATEGORIES: list[dict[str, Any]] = [
    {
        "slug": "greetings",
        "title": "Salam & Sapaan",
        "description": "Pelajari berbagai cara menyapa dalam bahasa Jepang",
        "itemCount": 20,
        "level": "beginner",
    },
    {
        "slug": "farewells",
        "title": "Perpisahan",
        "description": "Ungkapan perpisahan dalam berbagai situasi",
        "itemCount": 15,
        "level": "beginner",
    },
]

VERSION_HEADERS = ("last-modified", "etag")


def category_cache_key(slug: str) -> str:
    return f"category_{slug}"


def version_cache_key(slug: str) -> str:
    return f"version_{slug}"


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup that works for plain dicts too."""
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


class ContentLoader:
    """Single source of truth for category listings and bundles.

    Example:
        >>> loader = ContentLoader(cache, HttpxTransport(TransportConfig(origin=url)))
        >>> categories = await loader.load_categories()
        >>> bundle = await loader.load_category_data("greetings")
        >>> bundle.items[0].expression
        'こんにちは'
    """

    def __init__(
        self,
        cache: CacheStore,
        transport: ContentTransport,
        config: Optional[ContentConfig] = None,
    ):
        """Initialize loader.

        Args:
            cache: Store used for cache-aside reads and write-back
            transport: Access to the content origin
            config: URLs, freshness window and coalescing switch
        """
        self.cache = cache
        self.transport = transport
        self.config = config or ContentConfig()
        self._in_flight: dict[str, asyncio.Future] = {}

    def _is_fresh(self, key: str, cached: Any) -> bool:
        return cached is not None and not self.cache.is_expired(key, self.config.cache_ttl)

    # -------------------------------------------------------------------------
    # Category listing
    # -------------------------------------------------------------------------

    async def resolve_categories(self) -> LoadResult[list[CategoryMeta]]:
        """Load the category listing and report where it came from.

        Never raises.
        """
        cached = self.cache.get(CATEGORIES_CACHE_KEY)
        if self._is_fresh(CATEGORIES_CACHE_KEY, cached):
            try:
                logger.info("Loading categories from cache")
                return LoadResult(parse_categories(cached), LoadSource.CACHE)
            except ContentError as e:
                logger.warning(f"Ignoring unreadable cached categories: {e}")
                cached = None

        try:
            logger.info(f"Fetching categories from {self.config.categories_url}")
            data = await self.transport.get_json(self.config.categories_url)
            categories = parse_categories(data)
            self.cache.set(CATEGORIES_CACHE_KEY, data)
            return LoadResult(categories, LoadSource.NETWORK)
        except ContentError as e:
            log_with_context(
                logger, "error", f"Failed to load categories: {e}",
                error_type=type(e).__name__,
            )
            error = e

        if cached is not None:
            try:
                stale = parse_categories(cached)
                logger.warning("Using expired cache as fallback for categories")
                return LoadResult(stale, LoadSource.STALE_CACHE, error)
            except ContentError as e:
                logger.warning(f"Ignoring unreadable cached categories: {e}")

        logger.warning("Using built-in default categories")
        return LoadResult(self.default_categories(), LoadSource.DEFAULTS, error)

    async def load_categories(self) -> list[CategoryMeta]:
        """Load the category listing (cache, network, stale cache, defaults)."""
        return (await self.resolve_categories()).data

    @staticmethod
    def default_categories() -> list[CategoryMeta]:
        """Built-in listing used when nothing else is available."""
        return [CategoryMeta.model_validate(entry) for entry in DEFAULT_CATEGORIES]

    # -------------------------------------------------------------------------
    # Category bundles
    # -------------------------------------------------------------------------

    async def resolve_category_data(self, slug: str) -> LoadResult[ContentBundle]:
        """Load one category bundle and report where it came from.

        Raises:
            SchemaError: Payload invalid and nothing cached
            NetworkError: Origin unreachable/failing and nothing cached
        """
        if not self.config.coalesce_requests:
            return await self._resolve_category_data(slug)

        pending = self._in_flight.get(slug)
        if pending is not None:
            logger.debug(f"Joining in-flight load of {slug}")
            return await asyncio.shield(pending)

        task = asyncio.ensure_future(self._resolve_category_data(slug))
        self._in_flight[slug] = task
        task.add_done_callback(lambda done: self._forget_in_flight(slug, done))
        return await asyncio.shield(task)

    def _forget_in_flight(self, slug: str, task: asyncio.Future) -> None:
        """Drop a finished shared load and mark its outcome as retrieved.

        Every caller may have been cancelled, leaving nobody to read the
        exception; asyncio would then report it as never retrieved.
        """
        self._in_flight.pop(slug, None)
        if not task.cancelled():
            task.exception()

    async def _resolve_category_data(self, slug: str) -> LoadResult[ContentBundle]:
        key = category_cache_key(slug)

        cached = self.cache.get(key)
        if self._is_fresh(key, cached):
            try:
                bundle = parse_bundle(cached)
                log_with_context(logger, "info", f"Loading {slug} from cache", slug=slug)
                return LoadResult(bundle, LoadSource.CACHE)
            except ContentError as e:
                logger.warning(f"Ignoring unreadable cached bundle {slug}: {e}")
                cached = None

        try:
            bundle = await self._fetch_category(slug, key)
            return LoadResult(bundle, LoadSource.NETWORK)
        except ContentError as e:
            log_with_context(
                logger, "error", f"Failed to load category {slug}: {e}",
                slug=slug, error_type=type(e).__name__,
            )
            if cached is not None:
                try:
                    stale = parse_bundle(cached)
                except ContentError:
                    raise e
                logger.warning(f"Using expired cache as fallback for {slug}")
                return LoadResult(stale, LoadSource.STALE_CACHE, e)
            raise

    async def _fetch_category(self, slug: str, key: str) -> ContentBundle:
        """Fetch, validate, sanitize and persist one bundle."""
        url = self.config.category_url(slug)
        log_with_context(logger, "info", f"Fetching {slug} from {url}", slug=slug)
        data = await self.transport.get_json(url)

        validate_category_payload(data)
        sanitized = sanitize_payload(data)
        bundle = parse_bundle(sanitized)

        if not self.cache.set(key, sanitized):
            logger.warning(f"Could not persist {slug}; continuing without cache")
        return bundle

    async def load_category_data(self, slug: str) -> ContentBundle:
        """Load one category bundle (cache, network, stale cache).

        Raises:
            SchemaError: Payload invalid and nothing cached
            NetworkError: Origin unreachable/failing and nothing cached
        """
        return (await self.resolve_category_data(slug)).data

    # -------------------------------------------------------------------------
    # Auxiliary operations
    # -------------------------------------------------------------------------

    async def preload(self, slugs: Iterable[str]) -> dict[str, bool]:
        """Load several categories concurrently.

        Failures are logged and never abort the batch.

        Returns:
            Dict mapping each slug to whether it loaded
        """
        slugs = list(slugs)

        async def load_one(slug: str) -> bool:
            try:
                await self.load_category_data(slug)
                return True
            except Exception as e:
                logger.warning(f"Preload failed for {slug}: {e}")
                return False

        results = await asyncio.gather(*(load_one(slug) for slug in slugs))
        logger.info(f"Preloaded {sum(results)}/{len(slugs)} categories")
        return dict(zip(slugs, results))

    def clear_cache(self, slug: Optional[str] = None) -> bool:
        """Remove one category's cached bundle, or the whole cache."""
        if slug:
            return self.cache.remove(category_cache_key(slug))
        return self.cache.clear_all()

    async def check_version(self, slug: str) -> bool:
        """Probe the origin for a newer version of a category.

        Compares the Last-Modified (or ETag) marker with the one seen last
        time and remembers the new marker. Does not invalidate anything.

        Returns:
            True if the marker changed, False if unchanged or the probe failed
        """
        try:
            headers = await self.transport.head(self.config.category_url(slug))
        except ContentError as e:
            logger.error(f"Version check failed for {slug}: {e}")
            return False

        marker = None
        for name in VERSION_HEADERS:
            marker = _header(headers, name)
            if marker is not None:
                break

        key = version_cache_key(slug)
        if marker != self.cache.get(key):
            self.cache.set(key, marker)
            log_with_context(logger, "info", f"New version marker for {slug}", slug=slug, marker=marker)
            return True
        return False
