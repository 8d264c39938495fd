"""
Translation Provider Factory.

Handles creation of translation providers from a name or from settings.
"""

from cms_translate.core.config import settings
from cms_translate.core.logging import get_logger
from cms_translate.services.providers.base import BaseTranslationProvider
from cms_translate.services.providers.deepl_provider import DeepLProvider
from cms_translate.services.providers.google_provider import GoogleTranslateProvider

logger = get_logger(__name__)


class TranslationProviderFactory:
    """
    Factory for creating translation providers.

    Manages registration and instantiation of different providers.
    """

    _providers: dict[str, type[BaseTranslationProvider]] = {
        "google": GoogleTranslateProvider,
        "deepl": DeepLProvider,
    }

    @classmethod
    def register_provider(cls, name: str, provider_class: type[BaseTranslationProvider]):
        """
        Register a new translation provider.

        Args:
            name: Provider name
            provider_class: Class that extends BaseTranslationProvider
        """
        cls._providers[name.lower()] = provider_class
        logger.info(f"Registered translation provider: {name}")

    @classmethod
    def get_available_providers(cls) -> list[str]:
        """Get list of available provider names."""
        return list(cls._providers.keys())

    @classmethod
    def create_provider(
        cls,
        provider_name: str,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 10.0,
        **kwargs,
    ) -> BaseTranslationProvider:
        """
        Create a translation provider instance.

        Args:
            provider_name: Name of the provider (e.g., 'google', 'deepl')
            api_key: API key for authentication
            base_url: Base URL for the API
            timeout: Request timeout in seconds
            **kwargs: Additional provider-specific configuration

        Returns:
            BaseTranslationProvider: Provider instance

        Raises:
            ValueError: If provider is not supported
        """
        provider_class = cls._providers.get(provider_name.lower())
        if not provider_class:
            raise ValueError(
                f"Unsupported translation provider: {provider_name}. "
                f"Available: {', '.join(cls._providers)}"
            )

        return provider_class(api_key=api_key, base_url=base_url, timeout=timeout, **kwargs)


def create_provider_from_settings(**kwargs) -> BaseTranslationProvider:
    """Build the provider selected by TRANSLATION_PROVIDER with its credential."""
    base_url = settings.deepl_api_url if settings.translation_provider == "deepl" else None
    provider = TranslationProviderFactory.create_provider(
        settings.translation_provider,
        api_key=settings.translation_api_key,
        base_url=base_url,
        timeout=settings.translation_timeout,
        **kwargs,
    )

    if not provider.is_available:
        logger.warning(
            f"No API key configured for translation provider '{provider.provider_name}'; "
            "content will be served untranslated"
        )
    return provider
