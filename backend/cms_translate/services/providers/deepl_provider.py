"""
DeepL Provider Implementation.

Supports both the free (api-free.deepl.com) and pro (api.deepl.com) endpoints.
"""

from cms_translate.services.exceptions import ProviderError
from cms_translate.services.providers.base import (
    BaseTranslationProvider,
    ProviderTranslation,
)


class DeepLProvider(BaseTranslationProvider):
    """DeepL /v2/translate provider."""

    DEFAULT_BASE_URL = "https://api-free.deepl.com"

    max_batch_size = 50

    # DeepL wants a regional variant for some target languages
    TARGET_VARIANTS = {
        "EN": "EN-US",
        "PT": "PT-PT",
    }

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 10.0,
        **kwargs,
    ):
        super().__init__(
            api_key=api_key,
            base_url=(base_url or self.DEFAULT_BASE_URL).rstrip("/"),
            timeout=timeout,
            **kwargs,
        )

    @property
    def provider_name(self) -> str:
        return "deepl"

    def _get_headers(self) -> dict:
        return {
            "Authorization": f"DeepL-Auth-Key {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request_batch(
        self,
        texts: list[str],
        target_locale: str,
        source_locale: str | None,
    ) -> list[ProviderTranslation]:
        target = target_locale.upper()
        payload = {
            "text": texts,
            "target_lang": self.TARGET_VARIANTS.get(target, target),
        }
        if source_locale:
            payload["source_lang"] = source_locale.upper()

        async with self._client() as client:
            response = await client.post(
                f"{self.base_url}/v2/translate",
                headers=self._get_headers(),
                json=payload,
            )

        self._raise_for_status(response)

        try:
            data = response.json()
            translations = []
            for item in data["translations"]:
                detected = item.get("detected_source_language")
                translations.append(
                    ProviderTranslation(
                        translated_text=item["text"],
                        detected_source_locale=detected.lower() if detected else None,
                    )
                )
            return translations
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ProviderError(self.provider_name, f"malformed response: {e}") from e
