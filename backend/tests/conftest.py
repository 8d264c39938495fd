"""
Shared pytest configuration and fixtures.

Environment variables are set before any cms_translate module is imported,
since settings and the database engine are created at import time.
"""

import os
import tempfile
from pathlib import Path

_TEST_DIR = Path(tempfile.mkdtemp(prefix="cms_translate_tests_"))

os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR / 'app.db'}"
os.environ["AUTO_MIGRATE"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["SOURCE_LOCALE"] = "ro"
os.environ["SUPPORTED_LOCALES"] = "ro,hu,en"
os.environ["TRANSLATION_PROVIDER"] = "google"
os.environ.pop("GOOGLE_TRANSLATE_API_KEY", None)
os.environ.pop("DEEPL_API_KEY", None)
os.environ.pop("TRANSLATION_BATCH_SIZE", None)

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from cms_translate.core.db import Base, create_db_engine  # noqa: E402
from cms_translate.services.translation_cache_service import SQLCacheStore  # noqa: E402
from tests.fakes import FakeCacheStore, FakeProvider  # noqa: E402


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def cache_store() -> FakeCacheStore:
    return FakeCacheStore()


@pytest.fixture
def sql_engine(tmp_path):
    """Fresh sqlite database with the cache table."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'cache.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sql_engine) -> SQLCacheStore:
    session_factory = sessionmaker(bind=sql_engine, expire_on_commit=False)
    return SQLCacheStore(session_factory)
