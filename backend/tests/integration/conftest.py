"""
Pytest configuration for integration tests.

Runs the FastAPI application against a temporary sqlite database with an
in-memory translation provider.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from cms_translate.api.deps import get_cache_store, get_translator
from cms_translate.main import app
from cms_translate.services.batch_translator import BatchTranslator
from cms_translate.services.translation_cache_service import SQLCacheStore
from tests.fakes import FakeProvider


# =============================================================================
# Translation Layer Fixtures
# =============================================================================

@pytest.fixture
def api_provider() -> FakeProvider:
    return FakeProvider(max_batch_size=3)


@pytest.fixture
def api_translator(api_provider: FakeProvider, sql_store: SQLCacheStore) -> BatchTranslator:
    return BatchTranslator(api_provider, sql_store, source_locale="ro")


# =============================================================================
# FastAPI Client Fixtures
# =============================================================================

@pytest.fixture
def client(api_translator: BatchTranslator, sql_store: SQLCacheStore) -> Generator[TestClient, None, None]:
    """FastAPI test client wired to the test translator and cache."""
    app.dependency_overrides[get_translator] = lambda: api_translator
    app.dependency_overrides[get_cache_store] = lambda: sql_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def drain(client: TestClient, api_translator: BatchTranslator):
    """Wait for cache writes scheduled on the application's event loop."""

    def _drain() -> None:
        client.portal.call(api_translator.drain)

    return _drain
