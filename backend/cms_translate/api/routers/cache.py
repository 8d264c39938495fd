"""
Read-only views of the translation cache.

Entries are never edited or deleted through the API; a changed source text
simply produces a new content hash.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from cms_translate.api.deps import get_cache_store
from cms_translate.core.locales import normalize_locale
from cms_translate.core.logging import get_logger
from cms_translate.schemas.cache import CacheListResponse, CacheStatsResponse
from cms_translate.services.exceptions import CacheStoreError
from cms_translate.services.translation_cache_service import SQLCacheStore

logger = get_logger(__name__)

router = APIRouter(prefix="/api/cache", tags=["Cache"])


def _store_unavailable(e: CacheStoreError) -> HTTPException:
    logger.error(f"Translation cache unavailable: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Translation cache unavailable",
    )


@router.get("/stats", response_model=CacheStatsResponse, summary="Cache size per locale")
async def get_cache_stats(store: SQLCacheStore = Depends(get_cache_store)):
    try:
        stats = await store.get_cache_stats()
    except CacheStoreError as e:
        raise _store_unavailable(e)
    return CacheStatsResponse(**stats)


@router.get("/entries", response_model=CacheListResponse, summary="Browse cached translations")
async def get_cache_entries(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    target_locale: str | None = Query(default=None, description="Only entries for this locale"),
    search: str | None = Query(default=None, description="Substring of source or translated text"),
    store: SQLCacheStore = Depends(get_cache_store),
):
    """Cached translations, most recently written first."""
    try:
        page = await store.get_entries(
            limit=limit,
            offset=offset,
            target_locale=normalize_locale(target_locale) or None,
            search=search,
        )
    except CacheStoreError as e:
        raise _store_unavailable(e)
    return CacheListResponse(**page)
