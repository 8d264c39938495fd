"""
On-demand translation endpoints.

Used by client components that translate database content after render.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from cms_translate.api.deps import get_field_mapper, get_translator
from cms_translate.core.locales import is_supported_locale, normalize_locale
from cms_translate.core.logging import get_logger, set_target_locale
from cms_translate.schemas.translate import (
    TranslateContentRequest,
    TranslateContentResponse,
    TranslateRequest,
    TranslateTextResponse,
    TranslateTextsResponse,
)
from cms_translate.services.batch_translator import BatchTranslator
from cms_translate.services.field_mapper import FieldMapper

logger = get_logger(__name__)

router = APIRouter(prefix="/api/translate", tags=["Translation"])


def _require_locale(value: str | None, name: str) -> str | None:
    """Normalize a locale from the request body, rejecting unsupported ones."""
    if value is None:
        return None
    if not is_supported_locale(value):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported {name}: {value}",
        )
    return normalize_locale(value)


@router.post(
    "",
    response_model=TranslateTextResponse | TranslateTextsResponse,
    summary="Translate text",
)
async def translate(
    request: TranslateRequest,
    translator: BatchTranslator = Depends(get_translator),
):
    """
    Translate a single text (``text``) or a list of texts (``texts``).

    Translations are served from the cache where possible. Texts that cannot
    be translated are returned unchanged.
    """
    target = _require_locale(request.target_language, "targetLanguage")
    source = _require_locale(request.source_language, "sourceLanguage")
    set_target_locale(target)

    try:
        if request.text is not None:
            translated = await translator.translate_one(request.text, target, source)
            return TranslateTextResponse(translated=translated)

        if request.texts is not None:
            translated = await translator.translate_many(request.texts, target, source)
            return TranslateTextsResponse(translated=translated)

    except Exception as e:
        logger.error(f"Translation request failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Translation failed",
        )

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Either text or texts is required",
    )


@router.post(
    "/content",
    response_model=TranslateContentResponse,
    summary="Translate record fields",
)
async def translate_content(
    request: TranslateContentRequest,
    mapper: FieldMapper = Depends(get_field_mapper),
):
    """
    Translate the named fields of every record in one batch.

    Fields that are missing, empty or not strings are returned unchanged.
    """
    target = _require_locale(request.target_language, "targetLanguage")
    source = _require_locale(request.source_language, "sourceLanguage")
    set_target_locale(target)

    try:
        items = await mapper.translate_array(request.items, request.fields, target, source)
    except Exception as e:
        logger.error(f"Content translation request failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Translation failed",
        )

    return TranslateContentResponse(items=items)
