"""Pytest configuration and shared fixtures.

This module provides reusable fixtures for testing across the entire test suite.
Fixtures are organized by category to make them easy to discover and extend.

Organization:
    - Store Fixtures: in-memory key-value store and services bound to it
    - Application Fixtures: FastAPI app and HTTP client

Every test runs against InMemoryKVStore; no etcd cluster is needed.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Iterator

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure tests run without external infrastructure
os.environ.setdefault("ETCD_ENABLED", "false")
os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("APP_ROOT_PATH", "")
os.environ.setdefault("LOG_CONSOLE_ENABLED", "false")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from smartdns_web.core.settings import clear_all_settings_caches  # noqa: E402
from smartdns_web.infra.kv import InMemoryKVStore  # noqa: E402


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    """Reload settings for every test so monkeypatched env vars apply."""
    clear_all_settings_caches()
    yield
    clear_all_settings_caches()


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def kv_store() -> InMemoryKVStore:
    """Create an empty in-memory store.

    Example:
        async def test_put(kv_store):
            await kv_store.put("/acl/ip/pool/10.0.0.1", "{}")
            assert kv_store.data
    """
    return InMemoryKVStore()


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest.fixture
async def app(kv_store: InMemoryKVStore):
    """Create FastAPI application for testing.

    The store dependency is overridden with the ``kv_store`` fixture, so
    tests can seed and inspect the store directly.

    Returns:
        FastAPI application instance.
    """
    from smartdns_web.app.main import create_app
    from smartdns_web.core.dependencies import get_kv_store_dep

    application = create_app()
    application.dependency_overrides[get_kv_store_dep] = lambda: kv_store
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for testing.

    Args:
        app: FastAPI application fixture.

    Yields:
        Async HTTP client for making test requests.

    Example:
        async def test_ping(client):
            response = await client.get("/v1/ping")
            assert response.text == "pong"
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
