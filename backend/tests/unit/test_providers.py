"""
Unit tests for translation providers.

HTTP traffic is served by httpx.MockTransport; nothing leaves the process.
"""

import json
import logging
from urllib.parse import parse_qs

import httpx
import pytest

from cms_translate.core.config import settings
from cms_translate.services.providers import (
    TranslationProviderFactory,
    create_provider_from_settings,
)
from cms_translate.services.providers.deepl_provider import DeepLProvider
from cms_translate.services.providers.google_provider import GoogleTranslateProvider


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)


def google_ok(request: httpx.Request) -> httpx.Response:
    form = parse_qs(request.content.decode())
    return httpx.Response(
        200,
        json={
            "data": {
                "translations": [
                    {"translatedText": f"{form['target'][0]}:{text}", "detectedSourceLanguage": "ro"}
                    for text in form["q"]
                ]
            }
        },
    )


def deepl_ok(request: httpx.Request) -> httpx.Response:
    payload = json.loads(request.content)
    return httpx.Response(
        200,
        json={
            "translations": [
                {"text": f"{payload['target_lang']}:{text}", "detected_source_language": "RO"}
                for text in payload["text"]
            ]
        },
    )


# =============================================================================
# Google
# =============================================================================

class TestGoogleTranslateProvider:
    """Google Cloud Translation v2."""

    @pytest.mark.asyncio
    async def test_request_format(self):
        transport = RecordingTransport(google_ok)
        provider = GoogleTranslateProvider(api_key="g-key", transport=transport)

        result = await provider.translate_batch(["Anunț", "Program"], "hu")

        (request,) = transport.requests
        assert request.method == "POST"
        assert request.url.params["key"] == "g-key"
        assert str(request.url).startswith(GoogleTranslateProvider.DEFAULT_BASE_URL)
        form = parse_qs(request.content.decode())
        assert form["q"] == ["Anunț", "Program"]
        assert form["target"] == ["hu"]
        assert form["format"] == ["text"]
        assert "source" not in form
        assert [t.translated_text for t in result] == ["hu:Anunț", "hu:Program"]
        assert result[0].detected_source_locale == "ro"

    @pytest.mark.asyncio
    async def test_explicit_source_locale(self):
        transport = RecordingTransport(google_ok)
        provider = GoogleTranslateProvider(api_key="g-key", transport=transport)

        await provider.translate_batch(["Jó napot"], "en", source_locale="hu")

        form = parse_qs(transport.requests[0].content.decode())
        assert form["source"] == ["hu"]

    @pytest.mark.asyncio
    async def test_error_status_fails_batch(self, caplog):
        transport = RecordingTransport(
            lambda request: httpx.Response(403, json={"error": {"message": "API key not valid"}})
        )
        provider = GoogleTranslateProvider(api_key="bad-key", transport=transport)

        with caplog.at_level(logging.ERROR):
            result = await provider.translate_batch(["Anunț"], "hu")

        assert result is None
        assert "HTTP 403" in caplog.text

    @pytest.mark.asyncio
    async def test_malformed_body_fails_batch(self):
        transport = RecordingTransport(lambda request: httpx.Response(200, json={"data": {}}))
        provider = GoogleTranslateProvider(api_key="g-key", transport=transport)

        assert await provider.translate_batch(["Anunț"], "hu") is None

    @pytest.mark.asyncio
    async def test_count_mismatch_fails_batch(self):
        transport = RecordingTransport(
            lambda request: httpx.Response(
                200, json={"data": {"translations": [{"translatedText": "Hirdetmény"}]}}
            )
        )
        provider = GoogleTranslateProvider(api_key="g-key", transport=transport)

        assert await provider.translate_batch(["Anunț", "Program"], "hu") is None

    @pytest.mark.asyncio
    async def test_transport_error_fails_batch(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider = GoogleTranslateProvider(api_key="g-key", transport=httpx.MockTransport(refuse))

        assert await provider.translate_batch(["Anunț"], "hu") is None

    @pytest.mark.asyncio
    async def test_missing_key_fails_without_request(self):
        transport = RecordingTransport(google_ok)
        provider = GoogleTranslateProvider(api_key=None, transport=transport)

        assert provider.is_available is False
        assert await provider.translate_batch(["Anunț"], "hu") is None
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        transport = RecordingTransport(google_ok)
        provider = GoogleTranslateProvider(api_key="g-key", transport=transport)

        assert await provider.translate_batch([], "hu") == []
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_batch_over_limit_is_rejected(self):
        provider = GoogleTranslateProvider(api_key="g-key")

        with pytest.raises(ValueError):
            await provider.translate_batch(["x"] * 129, "hu")


# =============================================================================
# DeepL
# =============================================================================

class TestDeepLProvider:
    """DeepL /v2/translate."""

    @pytest.mark.asyncio
    async def test_request_format(self):
        transport = RecordingTransport(deepl_ok)
        provider = DeepLProvider(
            api_key="d-key", base_url="https://api.deepl.com/", transport=transport
        )

        result = await provider.translate_batch(["Anunț", "Program"], "hu", source_locale="ro")

        (request,) = transport.requests
        assert str(request.url) == "https://api.deepl.com/v2/translate"
        assert request.headers["Authorization"] == "DeepL-Auth-Key d-key"
        payload = json.loads(request.content)
        assert payload == {"text": ["Anunț", "Program"], "target_lang": "HU", "source_lang": "RO"}
        assert [t.translated_text for t in result] == ["HU:Anunț", "HU:Program"]
        assert result[0].detected_source_locale == "ro"

    @pytest.mark.asyncio
    async def test_english_target_uses_regional_variant(self):
        transport = RecordingTransport(deepl_ok)
        provider = DeepLProvider(api_key="d-key", transport=transport)

        await provider.translate_batch(["Anunț"], "en")

        payload = json.loads(transport.requests[0].content)
        assert payload["target_lang"] == "EN-US"
        assert "source_lang" not in payload

    @pytest.mark.asyncio
    async def test_quota_exceeded_fails_batch(self):
        transport = RecordingTransport(lambda request: httpx.Response(456, text="Quota exceeded"))
        provider = DeepLProvider(api_key="d-key", transport=transport)

        assert await provider.translate_batch(["Anunț"], "hu") is None

    @pytest.mark.asyncio
    async def test_batch_limit(self):
        assert DeepLProvider.max_batch_size == 50
        with pytest.raises(ValueError):
            await DeepLProvider(api_key="d-key").translate_batch(["x"] * 51, "hu")


# =============================================================================
# Factory
# =============================================================================

class TestProviderFactory:
    """Provider construction by name and from settings."""

    def test_create_known_providers(self):
        assert isinstance(
            TranslationProviderFactory.create_provider("google", api_key="k"),
            GoogleTranslateProvider,
        )
        assert isinstance(
            TranslationProviderFactory.create_provider("DeepL", api_key="k"),
            DeepLProvider,
        )

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unsupported translation provider"):
            TranslationProviderFactory.create_provider("babelfish")

    def test_available_providers(self):
        assert {"google", "deepl"} <= set(TranslationProviderFactory.get_available_providers())

    def test_from_settings_without_key_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            provider = create_provider_from_settings()

        assert provider.provider_name == settings.translation_provider
        assert provider.is_available is False
        assert "No API key configured" in caplog.text

    def test_from_settings_deepl(self, monkeypatch):
        monkeypatch.setattr(settings, "translation_provider", "deepl")
        monkeypatch.setattr(settings, "deepl_api_key", "d-key")
        monkeypatch.setattr(settings, "deepl_api_url", "https://api.deepl.com")

        provider = create_provider_from_settings()

        assert isinstance(provider, DeepLProvider)
        assert provider.api_key == "d-key"
        assert provider.base_url == "https://api.deepl.com"
