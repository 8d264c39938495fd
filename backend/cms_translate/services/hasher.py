"""
Content addressing for cached translations.
"""

import hashlib

HASH_LENGTH = 32


def content_hash(text: str) -> str:
    """
    Deterministic digest of the exact source text, used as a cache key.

    Stable across processes (no seeding). Blank text must be filtered out
    by the caller before hashing.
    """
    if not text or not text.strip():
        raise ValueError("Blank text is never hashed")
    # Lone surrogates are hashed as-is rather than rejected
    return hashlib.sha256(text.encode("utf-8", "surrogatepass")).hexdigest()[:HASH_LENGTH]


def is_blank(text: object) -> bool:
    """True for anything that should pass through translation untouched."""
    return not isinstance(text, str) or not text.strip()
