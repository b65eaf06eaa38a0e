"""Network transport for the content origin."""

import json
import logging
from typing import Any, Mapping, Optional, Protocol

import httpx

from nihongopedia.lib.retry import retry_on_failure_async

from .config import TransportConfig
from .errors import NetworkError, SchemaError

logger = logging.getLogger(__name__)


class ContentTransport(Protocol):
    """Read-only access to the static content origin."""

    async def get_json(self, url: str) -> Any:
        """GET a resource and decode its JSON body.

        Raises:
            NetworkError: On connection failure or non-success status
            SchemaError: If the body is not valid JSON
        """
        ...

    async def head(self, url: str) -> Mapping[str, str]:
        """Issue a metadata-only probe and return the response headers.

        Raises:
            NetworkError: On connection failure or non-success status
        """
        ...


class HttpxTransport:
    """ContentTransport over httpx.

    A short-lived AsyncClient is opened per request. Timeouts are the
    only deadline applied to a fetch.

    Example:
        >>> transport = HttpxTransport(TransportConfig(origin="https://nihongopedia.example"))
        >>> data = await transport.get_json("/data/categories.json")
    """

    def __init__(
        self,
        config: Optional[TransportConfig] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize transport.

        Args:
            config: Origin, timeout and retry settings
            http_transport: Lower-level httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.config = config or TransportConfig()
        self._http_transport = http_transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.origin,
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            transport=self._http_transport,
        )

    async def _request(self, method: str, url: str) -> httpx.Response:
        """Send a request, retrying transient transport errors."""

        @retry_on_failure_async(max_retries=self.config.max_retries, base_delay=0.5)
        async def send() -> httpx.Response:
            async with self._client() as client:
                response = await client.request(method, url)
                await response.aread()
                return response

        try:
            response = await send()
        except httpx.HTTPError as e:
            raise NetworkError(f"{method} {url} failed: {e}", url=url) from e

        if not response.is_success:
            raise NetworkError(
                f"HTTP error! status: {response.status_code}",
                url=url,
                status_code=response.status_code,
            )
        return response

    async def get_json(self, url: str) -> Any:
        response = await self._request("GET", url)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise SchemaError("<body>", message=f"Response from {url} is not valid JSON: {e}") from e

    async def head(self, url: str) -> Mapping[str, str]:
        response = await self._request("HEAD", url)
        return response.headers
