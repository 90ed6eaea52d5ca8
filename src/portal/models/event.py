"""Event and registration models."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, Index, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import EventType, RegistrationStatus

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests).
JSONVariant = JSON().with_variant(JSONB(), "postgresql")


class Event(SQLModel, table=True):
    """Community event, optionally with a capacity-limited registration window.

    Registration status is never stored; it is derived from the window dates,
    capacity and the live registration count on every read.
    """

    __tablename__ = "events"
    __table_args__ = (Index("ix_events_published_start", "published", "start_date"),)

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str = Field(max_length=200)
    description: str | None = Field(default=None)
    event_type: str = Field(default=EventType.OTHER.value, max_length=20)  # EventType value
    start_date: datetime
    end_date: datetime
    venue: str | None = Field(default=None, max_length=200)

    # Registration window
    registration_required: bool = Field(default=False)
    registration_start_date: datetime | None = Field(default=None)
    registration_end_date: datetime | None = Field(default=None)
    participation_type: str | None = Field(default=None, max_length=20)  # ParticipationType value
    max_participants: int | None = Field(default=None)

    # Publication
    published: bool = Field(default=False)
    published_at: datetime | None = Field(default=None)
    created_by: UUID = Field(index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Registration(SQLModel, table=True):
    """A user's registration for an event.

    At most one REGISTERED row exists per (event, user); the partial unique
    index backs the check made inside the registering transaction.
    """

    __tablename__ = "event_registrations"
    __table_args__ = (
        Index(
            "uq_event_registrations_active",
            "event_id",
            "user_id",
            unique=True,
            postgresql_where=text("registration_status = 'REGISTERED'"),
            sqlite_where=text("registration_status = 'REGISTERED'"),
        ),
        Index("ix_event_registrations_event_status", "event_id", "registration_status"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    event_id: UUID = Field(foreign_key="events.id", ondelete="CASCADE")
    user_id: UUID = Field(foreign_key="users.id", index=True)

    # Ordered list of {name, email, phone}; validated by schemas.TeamMember
    team_members: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSONVariant, nullable=False),
    )
    additional_notes: str | None = Field(default=None, max_length=1000)
    registration_status: str = Field(
        default=RegistrationStatus.REGISTERED.value, max_length=20
    )  # RegistrationStatus value
    registered_at: datetime = Field(default_factory=utc_now)
