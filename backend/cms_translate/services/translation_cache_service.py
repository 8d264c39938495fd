"""
Translation Cache Service

Persists (content_hash, target_locale) -> translated text entries so that
database-authored content is sent to the translation provider only once.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from cms_translate.core.db import SessionLocal, session_scope
from cms_translate.core.logging import get_logger
from cms_translate.models.translation_cache import TranslationCache
from cms_translate.services.exceptions import CacheStoreError

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheKey:
    """Lookup key of a cached translation."""

    content_hash: str
    target_locale: str


@dataclass(frozen=True)
class CacheEntry:
    """A cached translation as seen by the translation layer."""

    content_hash: str
    target_locale: str
    source_text_excerpt: str
    translated_text: str
    source_locale: str | None = None

    @property
    def key(self) -> CacheKey:
        return CacheKey(self.content_hash, self.target_locale)


class BaseCacheStore(ABC):
    """
    Abstract translation cache.

    Implementations must make upsert_many idempotent: writing the same key
    twice, including from concurrent requests, is never an error.
    """

    @abstractmethod
    async def get_many(self, keys: Sequence[CacheKey]) -> list[CacheEntry]:
        """
        Fetch every cached entry matching the given keys in one round trip.

        Raises:
            CacheStoreError: If the lookup fails
        """

    @abstractmethod
    async def upsert_many(self, entries: Sequence[CacheEntry]) -> None:
        """
        Insert entries, overwriting existing ones with the same key.

        Raises:
            CacheStoreError: If the write fails
        """


class SQLCacheStore(BaseCacheStore):
    """
    Translation cache backed by the relational database.

    Session work is synchronous and is moved off the event loop with
    asyncio.to_thread().
    """

    def __init__(self, session_factory: sessionmaker | None = None):
        self.session_factory = session_factory or SessionLocal

    # =========================================================================
    # Lookups
    # =========================================================================

    async def get_many(self, keys: Sequence[CacheKey]) -> list[CacheEntry]:
        if not keys:
            return []
        return await asyncio.to_thread(self._get_many_sync, list(keys))

    def _get_many_sync(self, keys: list[CacheKey]) -> list[CacheEntry]:
        hashes_by_locale: dict[str, set[str]] = defaultdict(set)
        for key in keys:
            hashes_by_locale[key.target_locale].add(key.content_hash)

        conditions = [
            sa.and_(
                TranslationCache.target_locale == locale,
                TranslationCache.content_hash.in_(sorted(hashes)),
            )
            for locale, hashes in hashes_by_locale.items()
        ]
        stmt = sa.select(TranslationCache).where(sa.or_(*conditions))

        try:
            with session_scope(self.session_factory) as session:
                rows = session.execute(stmt).scalars().all()
                entries = [self._to_entry(row) for row in rows]
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache lookup failed for {len(keys)} keys: {e}") from e

        logger.debug(f"Cache lookup: {len(entries)}/{len(keys)} keys found")
        return entries

    # =========================================================================
    # Writes
    # =========================================================================

    async def upsert_many(self, entries: Sequence[CacheEntry]) -> None:
        if not entries:
            return
        await asyncio.to_thread(self._upsert_many_sync, list(entries))

    def _upsert_many_sync(self, entries: list[CacheEntry]) -> None:
        now = datetime.now(timezone.utc)

        # One row per key: ON CONFLICT cannot touch the same row twice in one statement
        rows: dict[CacheKey, dict] = {}
        for entry in entries:
            rows[entry.key] = {
                "content_hash": entry.content_hash,
                "target_locale": entry.target_locale,
                "source_locale": entry.source_locale,
                "source_text": entry.source_text_excerpt,
                "translated_text": entry.translated_text,
                "created_at": now,
                "updated_at": now,
            }
        values = list(rows.values())

        try:
            with session_scope(self.session_factory) as session:
                stmt = self._build_upsert(session.get_bind().dialect.name, values)
                if stmt is not None:
                    session.execute(stmt)
                else:
                    self._merge_rows(session, values)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache write failed for {len(values)} entries: {e}") from e

        logger.info(f"Saved {len(values)} translations to cache")

    @staticmethod
    def _build_upsert(dialect_name: str, values: list[dict]):
        """Dialect-native insert-or-overwrite statement, or None if unsupported."""
        if dialect_name in ("postgresql", "sqlite"):
            insert = postgresql.insert if dialect_name == "postgresql" else sqlite.insert
            stmt = insert(TranslationCache).values(values)
            return stmt.on_conflict_do_update(
                index_elements=["content_hash", "target_locale"],
                set_={
                    "translated_text": stmt.excluded.translated_text,
                    "source_text": stmt.excluded.source_text,
                    "source_locale": stmt.excluded.source_locale,
                    "updated_at": stmt.excluded.updated_at,
                },
            )

        if dialect_name in ("mysql", "mariadb"):
            stmt = mysql.insert(TranslationCache).values(values)
            return stmt.on_duplicate_key_update(
                translated_text=stmt.inserted.translated_text,
                source_text=stmt.inserted.source_text,
                source_locale=stmt.inserted.source_locale,
                updated_at=stmt.inserted.updated_at,
            )

        return None

    @staticmethod
    def _merge_rows(session: Session, values: Iterable[dict]) -> None:
        """Portable fallback: merge row by row, tolerating concurrent inserts."""
        for row in values:
            try:
                with session.begin_nested():
                    session.merge(TranslationCache(**row))
            except IntegrityError:
                logger.debug(
                    f"Translation already cached: {row['content_hash']}:{row['target_locale']}"
                )

    # =========================================================================
    # Maintenance views
    # =========================================================================

    async def get_cache_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Dictionary with total_entries, entries_by_locale and last_updated_at
        """
        try:
            return await asyncio.to_thread(self._get_cache_stats_sync)
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache statistics query failed: {e}") from e

    def _get_cache_stats_sync(self) -> dict:
        with session_scope(self.session_factory) as session:
            total_entries = session.scalar(
                sa.select(sa.func.count()).select_from(TranslationCache)
            ) or 0
            by_locale = session.execute(
                sa.select(TranslationCache.target_locale, sa.func.count())
                .group_by(TranslationCache.target_locale)
            ).all()
            last_updated = session.scalar(sa.select(sa.func.max(TranslationCache.updated_at)))

        return {
            "total_entries": total_entries,
            "entries_by_locale": {locale: count for locale, count in by_locale},
            "last_updated_at": last_updated.isoformat() if last_updated else None,
        }

    async def get_entries(
        self,
        limit: int = 50,
        offset: int = 0,
        target_locale: str | None = None,
        search: str | None = None,
    ) -> dict:
        """
        Get paginated cache entries, newest first.

        Args:
            limit: Maximum number of entries to return
            offset: Number of entries to skip
            target_locale: Filter by target locale
            search: Search text in source_text or translated_text

        Returns:
            Dictionary with entries and pagination info
        """
        try:
            return await asyncio.to_thread(
                self._get_entries_sync, limit, offset, target_locale, search
            )
        except SQLAlchemyError as e:
            raise CacheStoreError(f"Cache listing query failed: {e}") from e

    def _get_entries_sync(
        self,
        limit: int,
        offset: int,
        target_locale: str | None,
        search: str | None,
    ) -> dict:
        stmt = sa.select(TranslationCache)
        if target_locale:
            stmt = stmt.where(TranslationCache.target_locale == target_locale)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                sa.or_(
                    TranslationCache.source_text.ilike(pattern),
                    TranslationCache.translated_text.ilike(pattern),
                )
            )

        with session_scope(self.session_factory) as session:
            total = session.scalar(
                sa.select(sa.func.count()).select_from(stmt.subquery())
            ) or 0
            rows = session.execute(
                stmt.order_by(TranslationCache.updated_at.desc(), TranslationCache.content_hash)
                .limit(limit)
                .offset(offset)
            ).scalars().all()

            entries_data = [
                {
                    "content_hash": row.content_hash,
                    "target_locale": row.target_locale,
                    "source_locale": row.source_locale,
                    "source_text": row.source_text,
                    "translated_text": row.translated_text,
                    "created_at": row.created_at.isoformat(),
                    "updated_at": row.updated_at.isoformat(),
                }
                for row in rows
            ]

        return {
            "entries": entries_data,
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + len(entries_data) < total,
        }

    @staticmethod
    def _to_entry(row: TranslationCache) -> CacheEntry:
        return CacheEntry(
            content_hash=row.content_hash,
            target_locale=row.target_locale,
            source_text_excerpt=row.source_text,
            translated_text=row.translated_text,
            source_locale=row.source_locale,
        )
