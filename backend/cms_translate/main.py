"""
Content translation FastAPI application.

Main application entry point with route registration and lifecycle management.
"""

import uuid
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cms_translate import __version__
from cms_translate.api.routers import cache, health, translate
from cms_translate.core.config import settings
from cms_translate.core.db import close_db, init_db
from cms_translate.core.logging import clear_context, get_logger, set_request_id
from cms_translate.services.batch_translator import BatchTranslator
from cms_translate.services.providers import create_provider_from_settings
from cms_translate.services.translation_cache_service import SQLCacheStore

logger = get_logger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent


def run_migrations() -> None:
    """Upgrade the database schema to the latest alembic revision."""
    from alembic import command
    from alembic.config import Config

    alembic_cfg = Config(str(BACKEND_DIR / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(BACKEND_DIR / "migrations"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    command.upgrade(alembic_cfg, "head")


# =============================================================================
# Application Lifecycle
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Prepares the database, builds the translation layer and, on shutdown,
    waits for in-flight cache writes before closing connections.
    """
    logger.info("Starting content translation service...")

    if settings.auto_migrate:
        try:
            logger.info("Running database migrations...")
            run_migrations()
            logger.info("Database migrations completed")
        except Exception as e:
            logger.warning(f"Database migration failed: {e}", exc_info=True)

    try:
        # No-op for tables the migrations already created
        init_db(create_tables=True)
    except Exception as e:
        # Pages can still be served untranslated without the cache
        logger.error(f"Failed to initialize database: {e}", exc_info=True)

    provider = create_provider_from_settings()
    cache_store = SQLCacheStore()
    app.state.cache_store = cache_store
    app.state.translator = BatchTranslator(provider, cache_store)
    logger.info(
        f"Translation layer ready (provider={provider.provider_name}, "
        f"batch_size={app.state.translator.batch_size})"
    )

    yield

    logger.info("Shutting down content translation service...")
    pending = app.state.translator.pending_writes
    if pending:
        logger.info(f"Waiting for {pending} pending cache writes...")
    await app.state.translator.drain()
    close_db()
    logger.info("Application shutdown complete")


# =============================================================================
# Application Instance
# =============================================================================

app = FastAPI(
    title="Content Translation API",
    description="On-demand machine translation of database-authored site content",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    """Tag every log record of a request with its request ID."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    set_request_id(request_id)
    try:
        response = await call_next(request)
    finally:
        clear_context()
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler.

    Catches all unhandled exceptions and returns a proper error response.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc}",
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": type(exc).__name__,
            "message": str(exc) if settings.debug else "An error occurred",
        },
    )


# =============================================================================
# Route Registration
# =============================================================================

# Health check endpoints
app.include_router(health.router)

# On-demand translation endpoints
app.include_router(translate.router)

# Cache inspection endpoints
app.include_router(cache.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cms_translate.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
