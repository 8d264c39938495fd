#!/usr/bin/env python3
"""
Database migration script.

Runs Alembic migrations programmatically without requiring the alembic command.
"""

import sys
from pathlib import Path

from alembic import command
from alembic.config import Config

from cms_translate.core.config import settings

backend_dir = Path(__file__).resolve().parent.parent


def run_migrations():
    """Run database migrations to latest version."""

    print("=" * 80)
    print("Content Translation Database Migration")
    print("=" * 80)

    alembic_cfg_path = backend_dir / "alembic.ini"

    if not alembic_cfg_path.exists():
        print(f"Error: alembic.ini not found at {alembic_cfg_path}")
        sys.exit(1)

    print(f"\nUsing config: {alembic_cfg_path}")

    alembic_cfg = Config(str(alembic_cfg_path))

    migrations_dir = backend_dir / "migrations"
    alembic_cfg.set_main_option("script_location", str(migrations_dir))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))

    print(f"Migrations directory: {migrations_dir}")

    try:
        print("\n" + "=" * 80)
        print("Current Database Version")
        print("=" * 80)
        command.current(alembic_cfg, verbose=True)

        print("\n" + "=" * 80)
        print("Running Migrations")
        print("=" * 80)
        print("\nUpgrading to latest version...")

        command.upgrade(alembic_cfg, "head")

        print("\nMigration completed successfully!")

        print("\n" + "=" * 80)
        print("New Database Version")
        print("=" * 80)
        command.current(alembic_cfg, verbose=True)

    except Exception as e:
        print(f"\nMigration failed: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    run_migrations()
