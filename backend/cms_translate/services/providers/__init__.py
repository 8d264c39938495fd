"""Machine translation provider adapters."""

from cms_translate.services.providers.base import BaseTranslationProvider, ProviderTranslation
from cms_translate.services.providers.factory import (
    TranslationProviderFactory,
    create_provider_from_settings,
)

__all__ = [
    "BaseTranslationProvider",
    "ProviderTranslation",
    "TranslationProviderFactory",
    "create_provider_from_settings",
]
