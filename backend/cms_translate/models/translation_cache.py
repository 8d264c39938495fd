"""
Translation cache model.

One row per (content_hash, target_locale). Rows are created by idempotent
upserts and never deleted by the application.
"""

from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from cms_translate.core.db import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TranslationCache(Base):
    """Machine translation of a piece of database-authored text."""

    __tablename__ = "translation_cache"

    content_hash: Mapped[str] = mapped_column(
        sa.String(64), primary_key=True, comment="Digest of the exact source text"
    )
    target_locale: Mapped[str] = mapped_column(
        sa.String(10), primary_key=True, comment="Locale the text was translated into"
    )
    source_locale: Mapped[str | None] = mapped_column(
        sa.String(10), nullable=True, comment="Locale the text was authored in"
    )
    source_text: Mapped[str] = mapped_column(
        sa.Text, nullable=False, comment="Truncated source text, for auditing only"
    )
    translated_text: Mapped[str] = mapped_column(sa.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )

    __table_args__ = (
        sa.Index("ix_translation_cache_target_locale", "target_locale"),
    )

    def __repr__(self) -> str:
        return f"<TranslationCache {self.content_hash}:{self.target_locale}>"
