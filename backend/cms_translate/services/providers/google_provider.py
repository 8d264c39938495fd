"""
Google Cloud Translation (v2) Provider Implementation.
"""

from cms_translate.services.exceptions import ProviderError
from cms_translate.services.providers.base import (
    BaseTranslationProvider,
    ProviderTranslation,
)


class GoogleTranslateProvider(BaseTranslationProvider):
    """
    Google Cloud Translation API v2 provider.

    Texts are sent as repeated ``q`` form fields in a single POST.
    """

    DEFAULT_BASE_URL = "https://translation.googleapis.com/language/translate/v2"

    # Google rejects requests with more than 128 text segments
    max_batch_size = 128

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float = 10.0,
        **kwargs,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url or self.DEFAULT_BASE_URL,
            timeout=timeout,
            **kwargs,
        )

    @property
    def provider_name(self) -> str:
        return "google"

    async def _request_batch(
        self,
        texts: list[str],
        target_locale: str,
        source_locale: str | None,
    ) -> list[ProviderTranslation]:
        data: dict[str, str | list[str]] = {
            "q": texts,
            "target": target_locale,
            "format": "text",
        }
        if source_locale:
            data["source"] = source_locale

        async with self._client() as client:
            response = await client.post(
                self.base_url,
                params={"key": self.api_key},
                data=data,
            )

        self._raise_for_status(response)

        try:
            payload = response.json()
            return [
                ProviderTranslation(
                    translated_text=item["translatedText"],
                    detected_source_locale=item.get("detectedSourceLanguage"),
                )
                for item in payload["data"]["translations"]
            ]
        except (ValueError, KeyError, TypeError) as e:
            raise ProviderError(self.provider_name, f"malformed response: {e}") from e
