"""
Database configuration and session management.

Uses synchronous SQLAlchemy with session_scope pattern for transaction management.
Async callers reach the database through asyncio.to_thread().
"""

from collections.abc import Generator
from contextlib import contextmanager

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import NullPool

from cms_translate.core.config import settings
from cms_translate.core.logging import get_logger

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


# =============================================================================
# Database Engine Configuration
# =============================================================================


def get_engine_args(database_url: str | None = None) -> dict:
    """
    Get database engine arguments based on configuration.

    Args:
        database_url: URL the engine is built for (defaults to settings)

    Returns:
        dict: Engine configuration arguments
    """
    url = database_url or settings.database_url
    args = {
        "pool_pre_ping": settings.db_pool_pre_ping,
        "echo": settings.debug,
    }

    # SQLite doesn't support connection pools in the same way
    if url.startswith("sqlite"):
        args["connect_args"] = {"check_same_thread": False}
        args["poolclass"] = NullPool
    else:
        args["pool_size"] = settings.db_pool_size
        args["max_overflow"] = settings.db_max_overflow
        args["pool_recycle"] = 3600  # Recycle connections after 1 hour

    return args


def create_db_engine(database_url: str | None = None) -> sa.Engine:
    """Create an engine for the given URL (or the configured one)."""
    url = database_url or settings.database_url
    return sa.create_engine(url, **get_engine_args(url))


engine = create_db_engine()

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# =============================================================================
# Session Management
# =============================================================================


@contextmanager
def session_scope(session_factory: sessionmaker | None = None) -> Generator[Session, None, None]:
    """
    Provide a transactional scope for database operations.

    This context manager handles session lifecycle:
    - Creates a new session
    - Commits on successful completion
    - Rolls back on exception
    - Closes the session in all cases

    Args:
        session_factory: Factory to open the session from (defaults to SessionLocal)

    Yields:
        Session: SQLAlchemy database session
    """
    session = (session_factory or SessionLocal)()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database transaction failed, rolling back: {e}")
        raise
    finally:
        session.close()


# =============================================================================
# Database Initialization and Health Check
# =============================================================================


def init_db(create_tables: bool = False) -> None:
    """
    Initialize the database.

    Verifies connectivity and, when requested, creates missing tables
    straight from the ORM metadata (used when migrations are disabled).

    Args:
        create_tables: Create tables from ORM metadata
    """
    # Register models on the metadata
    import cms_translate.models  # noqa: F401

    try:
        with engine.connect() as conn:
            conn.execute(sa.text("SELECT 1"))
        if create_tables:
            Base.metadata.create_all(bind=engine)
        logger.info(f"Database connection established: {settings.db_vendor}")
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}", exc_info=True)
        raise


def check_db_health() -> bool:
    """
    Check if the database is accessible and healthy.

    Returns:
        bool: True if database is healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(sa.text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


def close_db() -> None:
    """
    Close all database connections.

    This function should be called at application shutdown.
    """
    try:
        engine.dispose()
        logger.info("Database connections closed")
    except Exception as e:
        logger.error(f"Error closing database connections: {e}", exc_info=True)
