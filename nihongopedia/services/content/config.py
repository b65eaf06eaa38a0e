"""Configuration for the content loader and its HTTP transport."""

from dataclasses import dataclass
from datetime import timedelta


@dataclass
class ContentConfig:
    """Configuration for ContentLoader.

    Attributes:
        base_url: Path (or URL) of the per-category bundle directory
        categories_url: Path (or URL) of the category listing
        cache_ttl: Freshness window for cached listing and bundles
        coalesce_requests: Share one in-flight fetch between concurrent
            loads of the same category instead of fetching once per caller
    """

    base_url: str = "/data/categories"
    categories_url: str = "/data/categories.json"
    cache_ttl: timedelta = timedelta(days=7)
    coalesce_requests: bool = False

    def category_url(self, slug: str) -> str:
        """URL of one category bundle."""
        return f"{self.base_url.rstrip('/')}/{slug}.json"


@dataclass
class TransportConfig:
    """Configuration for HttpxTransport.

    Attributes:
        origin: Scheme and host serving the static site
        timeout: Request timeout in seconds
        max_retries: Retries on connection errors/timeouts (0 = no retry)
        user_agent: User-Agent header sent with every request
    """

    origin: str = "http://localhost:8080"
    timeout: float = 10.0
    max_retries: int = 0
    user_agent: str = "nihongopedia-content/0.1"

    def __post_init__(self):
        """Validate configuration."""
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
