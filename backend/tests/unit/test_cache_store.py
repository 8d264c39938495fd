"""
Unit tests for the SQL-backed translation cache.
"""

import asyncio
import logging

import pytest
import sqlalchemy as sa
from sqlalchemy.orm import sessionmaker

from cms_translate.models.translation_cache import TranslationCache
from cms_translate.services.batch_translator import BatchTranslator
from cms_translate.services.exceptions import CacheStoreError
from cms_translate.services.hasher import content_hash
from cms_translate.services.translation_cache_service import (
    CacheEntry,
    CacheKey,
    SQLCacheStore,
)
from tests.fakes import BarrierProvider, fake_translation


def make_entry(text: str, target: str, translated: str | None = None) -> CacheEntry:
    return CacheEntry(
        content_hash=content_hash(text),
        target_locale=target,
        source_text_excerpt=text,
        translated_text=translated or fake_translation(text, target),
        source_locale="ro",
    )


def count_rows(engine) -> int:
    with engine.connect() as conn:
        return conn.execute(sa.select(sa.func.count()).select_from(TranslationCache)).scalar()


# =============================================================================
# get_many / upsert_many
# =============================================================================

class TestSQLCacheStore:
    """Lookups and idempotent writes."""

    @pytest.mark.asyncio
    async def test_get_many_on_empty_cache(self, sql_store):
        keys = [CacheKey(content_hash("Anunț"), "hu")]

        assert await sql_store.get_many(keys) == []

    @pytest.mark.asyncio
    async def test_get_many_without_keys(self, sql_store):
        assert await sql_store.get_many([]) == []

    @pytest.mark.asyncio
    async def test_upsert_then_get(self, sql_store):
        entries = [make_entry("Anunț", "hu"), make_entry("Program", "hu")]

        await sql_store.upsert_many(entries)
        found = await sql_store.get_many([entry.key for entry in entries])

        assert sorted(found, key=lambda e: e.content_hash) == sorted(
            entries, key=lambda e: e.content_hash
        )

    @pytest.mark.asyncio
    async def test_lookup_is_per_target_locale(self, sql_store):
        hu_entry = make_entry("Anunț", "hu")
        en_entry = make_entry("Program", "en")

        await sql_store.upsert_many([hu_entry, en_entry])
        found = await sql_store.get_many([
            hu_entry.key,
            en_entry.key,
            # Same hash as the hungarian entry, different locale
            CacheKey(hu_entry.content_hash, "en"),
        ])

        assert {entry.key for entry in found} == {hu_entry.key, en_entry.key}

    @pytest.mark.asyncio
    async def test_upsert_overwrites_existing_entry(self, sql_store, sql_engine):
        await sql_store.upsert_many([make_entry("Anunț", "hu", "Hirdetmény")])
        await sql_store.upsert_many([make_entry("Anunț", "hu", "Közlemény")])

        (entry,) = await sql_store.get_many([CacheKey(content_hash("Anunț"), "hu")])

        assert entry.translated_text == "Közlemény"
        assert count_rows(sql_engine) == 1

    @pytest.mark.asyncio
    async def test_duplicate_keys_in_one_batch(self, sql_store, sql_engine):
        entries = [make_entry("Anunț", "hu", "Hirdetmény"), make_entry("Anunț", "hu", "Közlemény")]

        await sql_store.upsert_many(entries)

        assert count_rows(sql_engine) == 1

    @pytest.mark.asyncio
    async def test_upsert_without_entries(self, sql_store, sql_engine):
        await sql_store.upsert_many([])

        assert count_rows(sql_engine) == 0

    @pytest.mark.asyncio
    async def test_missing_table_raises_cache_store_error(self, tmp_path):
        from cms_translate.core.db import create_db_engine

        engine = create_db_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        store = SQLCacheStore(sessionmaker(bind=engine))

        with pytest.raises(CacheStoreError):
            await store.get_many([CacheKey(content_hash("Anunț"), "hu")])
        with pytest.raises(CacheStoreError):
            await store.upsert_many([make_entry("Anunț", "hu")])
        with pytest.raises(CacheStoreError):
            await store.get_cache_stats()
        with pytest.raises(CacheStoreError):
            await store.get_entries()

        engine.dispose()


# =============================================================================
# Concurrent writers
# =============================================================================

class TestConcurrentWrites:
    """Two requests translating the same text at the same time."""

    @pytest.mark.asyncio
    async def test_racing_translators_leave_one_row(self, sql_store, sql_engine, caplog):
        provider = BarrierProvider(parties=2)
        first = BatchTranslator(provider, sql_store, source_locale="ro")
        second = BatchTranslator(provider, sql_store, source_locale="ro")
        text = "Primăria anunță lucrări de modernizare"

        with caplog.at_level(logging.WARNING):
            results = await asyncio.gather(
                first.translate_many([text], "hu"),
                second.translate_many([text], "hu"),
            )
            await asyncio.gather(first.drain(), second.drain())

        assert results == [[fake_translation(text, "hu")]] * 2
        # Both requests missed the cache and reached the provider
        assert len(provider.calls) == 2
        assert count_rows(sql_engine) == 1
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


# =============================================================================
# Maintenance views
# =============================================================================

class TestCacheViews:
    """Statistics and paginated listing."""

    @pytest.mark.asyncio
    async def test_stats(self, sql_store):
        await sql_store.upsert_many([
            make_entry("Anunț", "hu"),
            make_entry("Program", "hu"),
            make_entry("Anunț", "en"),
        ])

        stats = await sql_store.get_cache_stats()

        assert stats["total_entries"] == 3
        assert stats["entries_by_locale"] == {"hu": 2, "en": 1}
        assert stats["last_updated_at"] is not None

    @pytest.mark.asyncio
    async def test_stats_on_empty_cache(self, sql_store):
        stats = await sql_store.get_cache_stats()

        assert stats == {"total_entries": 0, "entries_by_locale": {}, "last_updated_at": None}

    @pytest.mark.asyncio
    async def test_entries_pagination_and_filters(self, sql_store):
        texts = [f"Anunț {i}" for i in range(5)]

        await sql_store.upsert_many([make_entry(text, "hu") for text in texts])
        await sql_store.upsert_many([make_entry("Program", "en")])

        page = await sql_store.get_entries(limit=2, offset=0, target_locale="hu")
        last_page = await sql_store.get_entries(limit=2, offset=4, target_locale="hu")
        searched = await sql_store.get_entries(search="program")

        assert page["total"] == 5
        assert len(page["entries"]) == 2
        assert page["has_more"] is True
        assert len(last_page["entries"]) == 1
        assert last_page["has_more"] is False
        assert searched["total"] == 1
        assert searched["entries"][0]["target_locale"] == "en"
