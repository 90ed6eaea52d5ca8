"""Reusable migration runner for both production and tests."""

import asyncio
from pathlib import Path

from alembic import command
from alembic.config import Config

# Repository root holds alembic.ini; script_location is resolved from here.
_PROJECT_ROOT = Path(__file__).resolve().parents[4]


def get_alembic_config(database_url: str | None = None) -> Config:
    """Build the Alembic config, optionally pointing at another database."""
    alembic_cfg = Config(str(_PROJECT_ROOT / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(_PROJECT_ROOT / "src" / "alembic"))
    if database_url:
        alembic_cfg.attributes["database_url"] = database_url
    return alembic_cfg


def run_migrations_sync(database_url: str | None = None) -> None:
    """Run Alembic migrations synchronously up to head."""
    command.upgrade(get_alembic_config(database_url), "head")


async def run_migrations_async(database_url: str | None = None) -> None:
    """Run Alembic migrations from async context without blocking the loop."""
    await asyncio.to_thread(run_migrations_sync, database_url)
