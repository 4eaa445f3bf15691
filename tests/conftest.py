"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable, Generator

import httpx
import pytest

from curl_mcp.config import Settings, get_settings
from curl_mcp.tools.curl import HttpClient

Handler = Callable[[httpx.Request], httpx.Response]
ClientFactory = Callable[..., HttpClient]


@pytest.fixture  # type: ignore[misc]
def test_settings() -> Settings:
    """Create test settings."""
    return Settings(log_level="DEBUG", max_redirects=5)


@pytest.fixture(autouse=True)  # type: ignore[misc]
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def make_client() -> ClientFactory:
    """Build an HttpClient whose requests are answered by a handler function."""

    def factory(handler: Handler, max_redirects: int = 5) -> HttpClient:
        return HttpClient(
            max_redirects=max_redirects,
            transport=httpx.MockTransport(handler),
        )

    return factory
