"""Database utilities - engine, session, migrations."""

from src.portal.core.db.engine import (
    create_engine_for_url,
    dispose_engine,
    get_engine,
)
from src.portal.core.db.migrations import (
    get_alembic_config,
    run_migrations_async,
    run_migrations_sync,
)
from src.portal.core.db.session import get_session, get_session_factory

__all__ = [
    # Engine
    "create_engine_for_url",
    "dispose_engine",
    "get_engine",
    # Session
    "get_session",
    "get_session_factory",
    # Migrations
    "get_alembic_config",
    "run_migrations_async",
    "run_migrations_sync",
]
