"""
Pytest configuration and fixtures.

The OpenPhone API is mocked with respx; the application is exercised through
httpx's ASGI transport so no socket is opened.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Generator

import httpx
import pytest
import pytest_asyncio
import respx
from fastapi import FastAPI
from httpx import ASGITransport

from openphone_mcp.config import OPENPHONE_API_BASE, Settings, get_settings
from openphone_mcp.main import create_app
from openphone_mcp.openphone.client import OpenPhoneClient


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings independent of the developer's environment."""
    return Settings(
        _env_file=None,
        openphone_api_key="test-api-key",
        openphone_timeout_seconds=5.0,
        port=3001,
        cors_origins="*",
    )


@pytest.fixture
def upstream() -> Generator[respx.MockRouter, None, None]:
    """Mocked OpenPhone API. Unmatched requests fail the test."""
    with respx.mock(base_url=OPENPHONE_API_BASE, assert_all_called=False) as mock:
        yield mock


@pytest_asyncio.fixture
async def openphone_client(
    test_settings: Settings,
    upstream: respx.MockRouter,
) -> AsyncGenerator[OpenPhoneClient, None]:
    client = OpenPhoneClient(test_settings)
    yield client
    await client.close()


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest_asyncio.fixture
async def async_client(
    app: FastAPI,
    upstream: respx.MockRouter,
) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await app.state.openphone.close()


@pytest.fixture
def clean_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def restore_root_logger() -> Generator[None, None, None]:
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers = handlers
    root_logger.setLevel(level)
