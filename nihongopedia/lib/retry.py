"""Retrying of transient failures when talking to the content origin.

Only connection-level problems are worth another attempt: a 404 or 500
from a static file host will not change a second later, and the loader
already has stale cache to fall back on. The transport therefore wraps
its send step only, and non-success statuses are never retried.

Example:
    @retry_on_failure_async(max_retries=2, base_delay=0.5)
    async def send():
        async with httpx.AsyncClient(base_url=origin) as client:
            return await client.get("/data/categories.json")
"""

import asyncio
import logging
import random
from functools import wraps
from typing import Awaitable, Callable, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS = (
    httpx.TransportError,
    ConnectionError,
    TimeoutError,
)


def backoff_delay(attempt: int, base_delay: float, max_delay: float, jitter: bool = True) -> float:
    """Seconds to wait after failed attempt number ``attempt`` (0-based).

    Doubles from ``base_delay`` and is capped at ``max_delay``; jitter adds
    up to a quarter on top.
    """
    delay = min(base_delay * 2**attempt, max_delay)
    if jitter:
        delay += random.uniform(0, delay / 4)
    return delay


def retry_on_failure_async(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exceptions: tuple = TRANSIENT_ERRORS,
    jitter: bool = True,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry a coroutine function on transient errors.

    Args:
        max_retries: Extra attempts after the first; 0 calls exactly once
        base_delay: Wait before the first retry, in seconds
        max_delay: Upper bound for any single wait
        exceptions: Exception types that trigger a retry; anything else
            propagates immediately
        jitter: Randomize waits so concurrent preloads do not retry in step

    The last exception is re-raised once attempts run out.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    if attempt == max_retries:
                        if max_retries:
                            logger.warning(f"{func.__name__}: giving up after {attempt + 1} attempts ({e})")
                        raise
                    delay = backoff_delay(attempt, base_delay, max_delay, jitter)
                    logger.info(f"{func.__name__}: {e}; retry {attempt + 1}/{max_retries} in {delay:.1f}s")
                    await asyncio.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator
