"""Database models for the content translation service."""

from .translation_cache import TranslationCache

__all__ = ["TranslationCache"]
