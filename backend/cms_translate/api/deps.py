"""
FastAPI dependencies for the translation layer.

The translator, field mapper and cache store are built once in the
application lifespan and kept on ``app.state``.
"""

from fastapi import Depends, Request

from cms_translate.services.batch_translator import BatchTranslator
from cms_translate.services.field_mapper import FieldMapper
from cms_translate.services.translation_cache_service import SQLCacheStore


def get_translator(request: Request) -> BatchTranslator:
    return request.app.state.translator


def get_field_mapper(translator: BatchTranslator = Depends(get_translator)) -> FieldMapper:
    return FieldMapper(translator)


def get_cache_store(request: Request) -> SQLCacheStore:
    return request.app.state.cache_store
