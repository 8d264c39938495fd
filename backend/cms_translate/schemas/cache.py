"""
Pydantic schemas for translation cache inspection.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class CacheEntryResponse(BaseModel):
    """Single cache entry response."""

    content_hash: str = Field(..., description="Digest of the source text")
    target_locale: str = Field(..., description="Target locale code")
    source_locale: Optional[str] = Field(None, description="Source locale code")
    source_text: str = Field(..., description="Source text excerpt")
    translated_text: str = Field(..., description="Translated text")
    created_at: str = Field(..., description="When the entry was created")
    updated_at: str = Field(..., description="When the entry was last written")


class CacheListResponse(BaseModel):
    """Paginated list of cache entries."""

    entries: List[CacheEntryResponse] = Field(..., description="List of cache entries")
    total: int = Field(..., description="Total number of entries matching filters")
    limit: int = Field(..., description="Page size limit")
    offset: int = Field(..., description="Number of entries skipped")
    has_more: bool = Field(..., description="Whether there are more entries")


class CacheStatsResponse(BaseModel):
    """Cache statistics."""

    total_entries: int = Field(..., description="Total number of cache entries")
    entries_by_locale: dict[str, int] = Field(..., description="Entry count per target locale")
    last_updated_at: Optional[str] = Field(None, description="Most recent write")
