"""Alembic migration environment."""

from alembic import context
from sqlalchemy import create_engine, pool

from cms_translate.core.config import settings
from cms_translate.core.db import Base
import cms_translate.models  # noqa: F401

config = context.config

target_metadata = Base.metadata


def get_url() -> str:
    """Database URL: explicit alembic option first, then settings."""
    url = config.get_main_option("sqlalchemy.url") or settings.database_url
    # Some hosts still hand out postgres:// URLs
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    connectable = create_engine(get_url(), poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
