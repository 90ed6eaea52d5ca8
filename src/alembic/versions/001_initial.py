"""Initial schema: users, events, registrations, audit log

Revision ID: 001
Revises:
Create Date: 2026-01-01 00:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel
from sqlalchemy.dialects.postgresql import JSONB

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

AutoString = sqlmodel.sql.sqltypes.AutoString
JSONVariant = sa.JSON().with_variant(JSONB(), "postgresql")
ACTIVE_REGISTRATION = sa.text("registration_status = 'REGISTERED'")


def upgrade() -> None:
    # 1. Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", AutoString(length=100), nullable=False),
        sa.Column("email", AutoString(length=255), nullable=False),
        sa.Column("phone_number", AutoString(length=20), nullable=True),
        sa.Column("hashed_password", AutoString(length=255), nullable=False),
        sa.Column("role", AutoString(length=20), nullable=False, server_default="PUBLIC"),
        sa.Column("status", AutoString(length=20), nullable=False, server_default="PENDING"),
        sa.Column("user_type", AutoString(length=20), nullable=True),
        sa.Column("building_name", AutoString(length=100), nullable=True),
        sa.Column("flat_number", AutoString(length=20), nullable=True),
        sa.Column("floor_number", sa.Integer(), nullable=True),
        sa.Column("approved_by", sa.Uuid(), nullable=True),
        sa.Column("approved_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_role", "users", ["role"], unique=False)
    op.create_index("ix_users_status", "users", ["status"], unique=False)
    op.create_index("ix_users_created_at", "users", ["created_at"], unique=False)

    # 2. Events
    op.create_table(
        "events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", AutoString(length=200), nullable=False),
        sa.Column("description", AutoString(), nullable=True),
        sa.Column("event_type", AutoString(length=20), nullable=False, server_default="OTHER"),
        sa.Column("start_date", sa.DateTime(), nullable=False),
        sa.Column("end_date", sa.DateTime(), nullable=False),
        sa.Column("venue", AutoString(length=200), nullable=True),
        sa.Column(
            "registration_required", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("registration_start_date", sa.DateTime(), nullable=True),
        sa.Column("registration_end_date", sa.DateTime(), nullable=True),
        sa.Column("participation_type", AutoString(length=20), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(), nullable=True),
        sa.Column("created_by", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_events_created_by", "events", ["created_by"], unique=False)
    op.create_index("ix_events_published_start", "events", ["published", "start_date"])

    # 3. Registrations
    op.create_table(
        "event_registrations",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("event_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("team_members", JSONVariant, nullable=False),
        sa.Column("additional_notes", AutoString(length=1000), nullable=True),
        sa.Column(
            "registration_status",
            AutoString(length=20),
            nullable=False,
            server_default="REGISTERED",
        ),
        sa.Column("registered_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_event_registrations_user_id", "event_registrations", ["user_id"], unique=False
    )
    op.create_index(
        "ix_event_registrations_event_status",
        "event_registrations",
        ["event_id", "registration_status"],
    )
    # At most one active registration per (event, user)
    op.create_index(
        "uq_event_registrations_active",
        "event_registrations",
        ["event_id", "user_id"],
        unique=True,
        postgresql_where=ACTIVE_REGISTRATION,
        sqlite_where=ACTIVE_REGISTRATION,
    )

    # 4. Audit log (append-only; actor_id deliberately has no foreign key)
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("details", JSONVariant, nullable=False),
        sa.Column("ip_address", sa.String(length=45), nullable=True),
        sa.Column("request_id", sa.String(length=36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_actor_created", "audit_logs", ["actor_id", "created_at"])
    op.create_index(
        "ix_audit_logs_entity", "audit_logs", ["entity_type", "entity_id", "created_at"]
    )
    op.create_index("ix_audit_logs_action_created", "audit_logs", ["action", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_action_created", table_name="audit_logs")
    op.drop_index("ix_audit_logs_entity", table_name="audit_logs")
    op.drop_index("ix_audit_logs_actor_created", table_name="audit_logs")
    op.drop_table("audit_logs")

    op.drop_index("uq_event_registrations_active", table_name="event_registrations")
    op.drop_index("ix_event_registrations_event_status", table_name="event_registrations")
    op.drop_index("ix_event_registrations_user_id", table_name="event_registrations")
    op.drop_table("event_registrations")

    op.drop_index("ix_events_published_start", table_name="events")
    op.drop_index("ix_events_created_by", table_name="events")
    op.drop_table("events")

    op.drop_index("ix_users_created_at", table_name="users")
    op.drop_index("ix_users_status", table_name="users")
    op.drop_index("ix_users_role", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
