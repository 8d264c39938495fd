"""
Pydantic schemas for on-demand translation endpoints.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TranslateRequest(BaseModel):
    """Translate one text or a list of texts."""

    model_config = ConfigDict(populate_by_name=True)

    text: str | None = Field(default=None, description="Single text to translate")
    texts: list[str] | None = Field(default=None, description="Texts to translate, in order")
    target_language: str = Field(..., alias="targetLanguage", description="Target locale code")
    source_language: str | None = Field(
        default=None, alias="sourceLanguage", description="Source locale code (defaults to site locale)"
    )


class TranslateTextResponse(BaseModel):
    """Translation of a single text."""

    translated: str


class TranslateTextsResponse(BaseModel):
    """Translations of a list of texts, in request order."""

    translated: list[str]


class TranslateContentRequest(BaseModel):
    """Translate named fields of a list of records."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[dict[str, Any]] = Field(..., description="Records to translate")
    fields: list[str] = Field(..., description="Names of the fields to translate")
    target_language: str = Field(..., alias="targetLanguage", description="Target locale code")
    source_language: str | None = Field(default=None, alias="sourceLanguage")


class TranslateContentResponse(BaseModel):
    """Records with the requested fields translated."""

    items: list[dict[str, Any]]
