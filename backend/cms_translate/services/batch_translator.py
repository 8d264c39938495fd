"""
Batch Translator

Cache-aside translation of many texts at once:

1. blank texts and translations into the source locale short-circuit
2. one multi-get against the cache for every distinct content hash
3. cache misses are split into provider-sized chunks sent concurrently
4. fresh translations are written back to the cache in background tasks

Output order always matches input order. Failures never propagate: a failed
chunk, a failed cache read or a missing credential leave the affected texts
untranslated.
"""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from cms_translate.core.config import settings
from cms_translate.core.locales import is_supported_locale, normalize_locale
from cms_translate.core.logging import get_logger, log_with_context
from cms_translate.services.hasher import content_hash, is_blank
from cms_translate.services.providers.base import BaseTranslationProvider
from cms_translate.services.translation_cache_service import (
    BaseCacheStore,
    CacheEntry,
    CacheKey,
)

logger = get_logger(__name__)


@dataclass
class TranslationUnit:
    """A non-blank input text and where it came from."""

    text: str
    original_index: int
    content_hash: str


class BatchTranslator:
    """
    Translate lists of texts through the cache and the provider.

    Args:
        provider: Translation provider client
        cache_store: Translation cache
        source_locale: Locale content is authored in (defaults to settings)
        batch_size: Max texts per provider call, capped by the provider limit
        chunk_timeout: Seconds before a provider chunk is abandoned (0: no limit)
        dedupe_texts: Send identical texts to the provider once per call
        excerpt_length: Source characters stored with each cache entry
    """

    def __init__(
        self,
        provider: BaseTranslationProvider,
        cache_store: BaseCacheStore,
        source_locale: str | None = None,
        batch_size: int | None = None,
        chunk_timeout: float | None = None,
        dedupe_texts: bool | None = None,
        excerpt_length: int | None = None,
    ):
        self.provider = provider
        self.cache_store = cache_store
        self.source_locale = normalize_locale(source_locale or settings.source_locale)

        batch_size = batch_size or settings.translation_batch_size
        limit = provider.max_batch_size
        self.batch_size = min(batch_size, limit) if batch_size else limit

        # 0 disables the timeout
        self.chunk_timeout = (
            settings.translation_chunk_timeout if chunk_timeout is None else chunk_timeout
        ) or None
        self.dedupe_texts = (
            settings.translation_dedupe_texts if dedupe_texts is None else dedupe_texts
        )
        self.excerpt_length = (
            settings.translation_excerpt_length if excerpt_length is None else excerpt_length
        )

        self._pending_writes: set[asyncio.Task] = set()

    # =========================================================================
    # Public API
    # =========================================================================

    async def translate_many(
        self,
        texts: Sequence[str],
        target_locale: str,
        source_locale: str | None = None,
    ) -> list[str]:
        """
        Translate texts into target_locale, preserving order and length.

        Args:
            texts: Texts to translate; blank entries are returned as-is
            target_locale: Locale to translate into
            source_locale: Locale of the texts (defaults to the site source locale)

        Returns:
            list[str]: Translated texts, untranslated where translation was not possible
        """
        texts = list(texts)
        explicit_source = normalize_locale(source_locale) or None
        source = explicit_source or self.source_locale
        target = normalize_locale(target_locale)

        if not texts or target == source:
            return texts

        if not is_supported_locale(target):
            logger.warning(
                f"Unsupported target locale {target_locale!r}; "
                f"returning {len(texts)} texts untranslated"
            )
            return texts

        units = [
            TranslationUnit(text=text, original_index=index, content_hash=content_hash(text))
            for index, text in enumerate(texts)
            if not is_blank(text)
        ]
        if not units:
            return texts

        if not self.provider.is_available:
            logger.warning(
                f"Translation provider '{self.provider.provider_name}' has no API key; "
                f"returning {len(texts)} texts untranslated"
            )
            return texts

        cached = await self._lookup_cached(units, target)
        misses = [unit for unit in units if unit.content_hash not in cached]

        fresh: dict[int, str] = {}
        if misses:
            fresh = await self._translate_misses(misses, target, explicit_source)

        results = list(texts)
        for unit in units:
            if unit.content_hash in cached:
                results[unit.original_index] = cached[unit.content_hash]
            elif unit.original_index in fresh:
                results[unit.original_index] = fresh[unit.original_index]

        logger.info(
            f"Translated {len(units)} texts to {target}: "
            f"{len(units) - len(misses)} from cache, {len(fresh)}/{len(misses)} from provider"
        )
        return results

    async def translate_one(
        self,
        text: str,
        target_locale: str,
        source_locale: str | None = None,
    ) -> str:
        """Translate a single text through the same cache and provider path."""
        translations = await self.translate_many([text], target_locale, source_locale)
        return translations[0]

    @property
    def pending_writes(self) -> int:
        """Number of cache writes still in flight."""
        return len(self._pending_writes)

    async def drain(self) -> None:
        """Wait until every scheduled cache write has finished."""
        while self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)

    # =========================================================================
    # Cache lookup
    # =========================================================================

    async def _lookup_cached(self, units: list[TranslationUnit], target: str) -> dict[str, str]:
        """Map content_hash -> cached translation; a failed lookup finds nothing."""
        keys = list(dict.fromkeys(CacheKey(unit.content_hash, target) for unit in units))

        try:
            entries = await self.cache_store.get_many(keys)
        except Exception as e:
            log_with_context(
                logger,
                logging.WARNING,
                f"Cache lookup failed, translating all texts: {e}",
                target_locale=target,
                keys=len(keys),
            )
            return {}

        return {
            entry.content_hash: entry.translated_text
            for entry in entries
            if entry.target_locale == target
        }

    # =========================================================================
    # Provider calls
    # =========================================================================

    async def _translate_misses(
        self,
        misses: list[TranslationUnit],
        target: str,
        source: str | None,
    ) -> dict[int, str]:
        """Translate cache misses chunk by chunk; returns original_index -> translation."""
        pending = misses
        if self.dedupe_texts:
            first_by_hash: dict[str, TranslationUnit] = {}
            for unit in misses:
                first_by_hash.setdefault(unit.content_hash, unit)
            pending = list(first_by_hash.values())

        chunks = [
            pending[start:start + self.batch_size]
            for start in range(0, len(pending), self.batch_size)
        ]
        chunk_results = await asyncio.gather(
            *(self._translate_chunk(chunk, target, source) for chunk in chunks)
        )

        fresh: dict[int, str] = {}
        by_hash: dict[str, str] = {}
        for chunk, translations in zip(chunks, chunk_results):
            if translations is None:
                continue
            for unit, translated in zip(chunk, translations):
                fresh[unit.original_index] = translated
                by_hash[unit.content_hash] = translated

        # Fan deduplicated translations out to repeated texts
        for unit in misses:
            if unit.original_index not in fresh and unit.content_hash in by_hash:
                fresh[unit.original_index] = by_hash[unit.content_hash]

        return fresh

    async def _translate_chunk(
        self,
        chunk: list[TranslationUnit],
        target: str,
        source: str | None,
    ) -> list[str] | None:
        """Send one chunk to the provider; None means the chunk stays untranslated."""
        texts = [unit.text for unit in chunk]

        try:
            translations = await asyncio.wait_for(
                self.provider.translate_batch(texts, target, source),
                timeout=self.chunk_timeout,
            )
        except asyncio.TimeoutError:
            log_with_context(
                logger,
                logging.WARNING,
                f"Translation chunk timed out after {self.chunk_timeout}s",
                provider=self.provider.provider_name,
                target_locale=target,
                chunk_size=len(chunk),
            )
            return None
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"Translation chunk raised unexpectedly: {e}",
                exc_info=True,
                provider=self.provider.provider_name,
                target_locale=target,
                chunk_size=len(chunk),
            )
            return None

        if translations is None:
            log_with_context(
                logger,
                logging.WARNING,
                "Translation chunk failed, returning source texts",
                provider=self.provider.provider_name,
                target_locale=target,
                chunk_size=len(chunk),
            )
            return None

        entries = [
            CacheEntry(
                content_hash=unit.content_hash,
                target_locale=target,
                source_text_excerpt=unit.text[:self.excerpt_length],
                translated_text=translation.translated_text,
                source_locale=source or normalize_locale(translation.detected_source_locale) or None,
            )
            for unit, translation in zip(chunk, translations)
        ]
        self._schedule_write(entries, target)

        return [translation.translated_text for translation in translations]

    # =========================================================================
    # Background cache writes
    # =========================================================================

    def _schedule_write(self, entries: list[CacheEntry], target: str) -> None:
        """Start the cache write without waiting for it."""
        task = asyncio.create_task(self._write_entries(entries, target))
        self._pending_writes.add(task)
        task.add_done_callback(self._pending_writes.discard)

    async def _write_entries(self, entries: list[CacheEntry], target: str) -> None:
        try:
            await self.cache_store.upsert_many(entries)
        except Exception as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"Failed to cache translations: {e}",
                target_locale=target,
                entries=len(entries),
            )
