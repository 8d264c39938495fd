"""
Exceptions raised inside the translation layer.

Provider and store adapters raise these; the batch translator catches them
and degrades to returning untranslated text.
"""


class TranslationError(Exception):
    """Base class for translation layer errors."""


class ProviderError(TranslationError):
    """A provider request failed (transport, non-success status or malformed body)."""

    def __init__(self, provider: str, message: str, status_code: int | None = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.status_code = status_code


class ProviderUnavailableError(ProviderError):
    """No credential is configured for the provider."""

    def __init__(self, provider: str):
        super().__init__(provider, "no API credential configured")


class CacheStoreError(TranslationError):
    """Reading from or writing to the translation cache failed."""

