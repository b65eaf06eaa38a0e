"""Shared pytest fixtures for cache and content tests."""

import tempfile
from pathlib import Path

import pytest

from nihongopedia.services.cache import CacheConfig, CacheStore, InMemoryStorage
from nihongopedia.services.content import ContentConfig, ContentLoader
from nihongopedia.services.tests.fakes import (
    CATEGORIES_URL,
    GREETINGS_URL,
    FakeClock,
    FakeTransport,
    make_categories_payload,
    make_greetings_payload,
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for file-backed storage."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def cache(storage, clock) -> CacheStore:
    """CacheStore on in-memory storage with a controllable clock."""
    return CacheStore(storage, CacheConfig(), clock=clock)


@pytest.fixture
def transport() -> FakeTransport:
    """Transport serving a listing and the greetings bundle."""
    return FakeTransport(
        responses={
            CATEGORIES_URL: make_categories_payload(),
            GREETINGS_URL: make_greetings_payload(),
        },
        headers={GREETINGS_URL: {"Last-Modified": "Mon, 01 Jan 2024 00:00:00 GMT"}},
    )


@pytest.fixture
def loader(cache, transport) -> ContentLoader:
    return ContentLoader(cache, transport, ContentConfig())
