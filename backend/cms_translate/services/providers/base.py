"""
Base Translation Provider Interface.

Defines the abstract interface that all machine translation providers must implement.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from cms_translate.core.logging import get_logger, log_with_context
from cms_translate.services.exceptions import ProviderError, ProviderUnavailableError

logger = get_logger(__name__)


@dataclass
class ProviderTranslation:
    """One translated text returned by a provider."""

    translated_text: str
    detected_source_locale: str | None = None


class BaseTranslationProvider(ABC):
    """
    Abstract base class for translation providers.

    translate_batch() never raises: a failed request is reported as None so
    the caller can fall back to the untranslated texts for that batch.
    """

    # Hard per-request item limit imposed by the provider
    max_batch_size: int = 100

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 10.0,
        **kwargs,
    ):
        """
        Initialize translation provider.

        Args:
            api_key: API key for authentication
            base_url: Base URL for the API (if customizable)
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific configuration
                (``transport`` is passed to httpx.AsyncClient)
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.transport: httpx.AsyncBaseTransport | None = kwargs.pop("transport", None)
        self.extra_config = kwargs

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Get the provider name (e.g., 'google', 'deepl')."""

    @property
    def is_available(self) -> bool:
        """Whether a credential is configured."""
        return bool(self.api_key and self.api_key.strip())

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self.transport)

    async def translate_batch(
        self,
        texts: Sequence[str],
        target_locale: str,
        source_locale: str | None = None,
    ) -> list[ProviderTranslation] | None:
        """
        Translate up to max_batch_size texts in one request.

        Args:
            texts: Texts to translate, in order
            target_locale: Locale to translate into
            source_locale: Locale of the texts (detected by the provider if omitted)

        Returns:
            Translations in the same order as ``texts``, or None if the batch failed
        """
        if not texts:
            return []
        if len(texts) > self.max_batch_size:
            raise ValueError(
                f"{self.provider_name} accepts at most {self.max_batch_size} texts per call, "
                f"got {len(texts)}"
            )

        try:
            if not self.is_available:
                raise ProviderUnavailableError(self.provider_name)

            translations = await self._request_batch(list(texts), target_locale, source_locale)

            if len(translations) != len(texts):
                raise ProviderError(
                    self.provider_name,
                    f"expected {len(texts)} translations, got {len(translations)}",
                )
            return translations

        except ProviderError as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"Translation batch failed: {e}",
                provider=self.provider_name,
                target_locale=target_locale,
                chunk_size=len(texts),
                status_code=e.status_code,
            )
        except httpx.HTTPError as e:
            log_with_context(
                logger,
                logging.ERROR,
                f"Translation batch failed: {type(e).__name__}: {e}",
                provider=self.provider_name,
                target_locale=target_locale,
                chunk_size=len(texts),
            )
        return None

    @abstractmethod
    async def _request_batch(
        self,
        texts: list[str],
        target_locale: str,
        source_locale: str | None,
    ) -> list[ProviderTranslation]:
        """
        Perform the provider request.

        Raises:
            ProviderError: On non-success status or malformed response
            httpx.HTTPError: On transport failure
        """

    def _raise_for_status(self, response: httpx.Response) -> None:
        """Turn a non-success response into a ProviderError carrying the body."""
        if response.is_success:
            return
        raise ProviderError(
            self.provider_name,
            f"HTTP {response.status_code}: {response.text[:500]}",
            status_code=response.status_code,
        )

