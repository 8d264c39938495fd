"""
Locale helpers.

Content is authored in a single source locale and translated on demand
into the other supported locales.
"""

from cms_translate.core.config import settings


def get_source_locale() -> str:
    """Locale the content is authored in."""
    return normalize_locale(settings.source_locale)


def get_supported_locales() -> list[str]:
    """All locales the site can be rendered in, source locale included."""
    return list(settings.supported_locales)


def normalize_locale(value: str | None) -> str:
    """
    Reduce a language tag to its lowercase primary subtag.

    Examples:
        "HU" -> "hu", "en-US" -> "en", "en_GB" -> "en"
    """
    if not value:
        return ""
    return value.strip().replace("_", "-").split("-")[0].lower()


def is_supported_locale(value: str | None) -> bool:
    """Check whether the locale is one the site is rendered in."""
    return normalize_locale(value) in get_supported_locales()
