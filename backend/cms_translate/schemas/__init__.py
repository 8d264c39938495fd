"""
Pydantic schemas for API request/response validation.
"""

from cms_translate.schemas.cache import (
    CacheEntryResponse,
    CacheListResponse,
    CacheStatsResponse,
)
from cms_translate.schemas.health import HealthResponse
from cms_translate.schemas.translate import (
    TranslateContentRequest,
    TranslateContentResponse,
    TranslateRequest,
    TranslateTextResponse,
    TranslateTextsResponse,
)

__all__ = [
    "CacheEntryResponse",
    "CacheListResponse",
    "CacheStatsResponse",
    "HealthResponse",
    "TranslateContentRequest",
    "TranslateContentResponse",
    "TranslateRequest",
    "TranslateTextResponse",
    "TranslateTextsResponse",
]
