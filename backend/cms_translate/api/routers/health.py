"""
Health check endpoint.
"""

import asyncio
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status

from cms_translate import __version__
from cms_translate.api.deps import get_translator
from cms_translate.core.db import check_db_health
from cms_translate.core.logging import get_logger
from cms_translate.schemas.health import HealthResponse
from cms_translate.services.batch_translator import BatchTranslator

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
)
async def health_check(translator: BatchTranslator = Depends(get_translator)) -> HealthResponse:
    """
    Report database reachability and whether a translation credential is set.

    A missing credential is "degraded", not "down": pages are still served,
    just untranslated.
    """
    database_ok = await asyncio.to_thread(check_db_health)
    provider_ok = translator.provider.is_available

    services = {
        "database": "healthy" if database_ok else "unhealthy",
        "translation_provider": (
            f"{translator.provider.provider_name}: configured"
            if provider_ok
            else f"{translator.provider.provider_name}: not configured"
        ),
    }

    if not database_ok:
        overall = "down"
    elif not provider_ok:
        overall = "degraded"
    else:
        overall = "ok"

    return HealthResponse(
        status=overall,
        timestamp=datetime.now(timezone.utc).isoformat(),
        services=services,
        version=__version__,
    )
