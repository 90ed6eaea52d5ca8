"""Alembic migrations build the same schema the models describe."""

from pathlib import Path

import pytest
from alembic import command
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError

from src.portal.core.db import get_alembic_config, run_migrations_async, run_migrations_sync

pytestmark = pytest.mark.integration

EXPECTED_TABLES = {"users", "events", "event_registrations", "audit_logs", "alembic_version"}


def _urls(tmp_path: Path) -> tuple[str, str]:
    path = tmp_path / "migrated.db"
    return f"sqlite+aiosqlite:///{path}", f"sqlite:///{path}"


def test_upgrade_creates_tables(tmp_path: Path):
    async_url, sync_url = _urls(tmp_path)

    run_migrations_sync(async_url)

    engine = create_engine(sync_url)
    try:
        inspector = inspect(engine)
        assert set(inspector.get_table_names()) == EXPECTED_TABLES
        registration_indexes = {
            index["name"] for index in inspector.get_indexes("event_registrations")
        }
        assert "uq_event_registrations_active" in registration_indexes
        user_columns = {column["name"] for column in inspector.get_columns("users")}
        assert {"email", "hashed_password", "approved_by", "approved_at"} <= user_columns
    finally:
        engine.dispose()


def test_active_registration_index_is_partial(tmp_path: Path):
    async_url, sync_url = _urls(tmp_path)
    run_migrations_sync(async_url)

    engine = create_engine(sync_url)
    try:
        with engine.connect() as conn:
            sql = conn.execute(
                text("SELECT sql FROM sqlite_master WHERE name = 'uq_event_registrations_active'")
            ).scalar_one()
        assert "UNIQUE" in sql.upper()
        assert "WHERE" in sql.upper()
    finally:
        engine.dispose()


def test_downgrade_to_base(tmp_path: Path):
    async_url, sync_url = _urls(tmp_path)
    run_migrations_sync(async_url)

    command.downgrade(get_alembic_config(async_url), "base")

    engine = create_engine(sync_url)
    try:
        assert set(inspect(engine).get_table_names()) == {"alembic_version"}
    finally:
        engine.dispose()


async def test_async_runner(tmp_path: Path):
    async_url, sync_url = _urls(tmp_path)

    await run_migrations_async(async_url)

    engine = create_engine(sync_url)
    try:
        with engine.connect() as conn:
            version = conn.execute(text("SELECT version_num FROM alembic_version")).scalar_one()
        assert version == "001"
    finally:
        engine.dispose()


def test_users_email_is_unique(tmp_path: Path):
    async_url, sync_url = _urls(tmp_path)
    run_migrations_sync(async_url)

    engine = create_engine(sync_url)
    insert = text(
        "INSERT INTO users (id, name, email, hashed_password, role, status, created_at, updated_at) "
        "VALUES (:id, 'A', 'a@example.com', 'x', 'OWNER', 'PENDING', "
        "'2026-03-01 12:00:00', '2026-03-01 12:00:00')"
    )
    try:
        with engine.begin() as conn:
            conn.execute(insert, {"id": "0" * 32})
        with pytest.raises(IntegrityError), engine.begin() as conn:
            conn.execute(insert, {"id": "1" * 32})
    finally:
        engine.dispose()
