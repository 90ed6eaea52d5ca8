"""Event schemas for API request/response."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from src.portal.models.base import as_naive_utc
from src.portal.models.enums import (
    EventType,
    ParticipationType,
    RegistrationStatus,
    RegistrationWindowStatus,
)

_DATE_FIELDS = (
    "start_date",
    "end_date",
    "registration_start_date",
    "registration_end_date",
)


def _strip_optional(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            return None
    return v


class EventCreate(BaseModel):
    """Schema for creating an event.

    Date ordering is checked by the event service so that it reports a
    ``validation_error`` result rather than raising.
    """

    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    event_type: EventType = EventType.OTHER
    start_date: datetime
    end_date: datetime
    venue: str | None = Field(default=None, max_length=200)
    registration_required: bool = False
    registration_start_date: datetime | None = None
    registration_end_date: datetime | None = None
    participation_type: ParticipationType | None = None
    max_participants: int | None = Field(default=None, gt=0)
    published: bool = False

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Event title cannot be empty or whitespace only")
        return v

    @field_validator("description", "venue")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)

    @field_validator(*_DATE_FIELDS)
    @classmethod
    def normalize_dates(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v) if v is not None else None


class EventUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    event_type: EventType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    venue: str | None = Field(default=None, max_length=200)
    registration_required: bool | None = None
    registration_start_date: datetime | None = None
    registration_end_date: datetime | None = None
    participation_type: ParticipationType | None = None
    max_participants: int | None = Field(default=None, gt=0)
    published: bool | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                raise ValueError("Event title cannot be empty or whitespace only")
        return v

    @field_validator("description", "venue")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        return _strip_optional(v)

    @field_validator(*_DATE_FIELDS)
    @classmethod
    def normalize_dates(cls, v: datetime | None) -> datetime | None:
        return as_naive_utc(v) if v is not None else None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "EventUpdate":
        for name in (
            "title",
            "event_type",
            "start_date",
            "end_date",
            "registration_required",
            "published",
        ):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class EventRead(BaseModel):
    """Event with its derived registration status and live count."""

    id: UUID
    title: str
    description: str | None
    event_type: EventType
    start_date: datetime
    end_date: datetime
    venue: str | None
    registration_required: bool
    registration_start_date: datetime | None
    registration_end_date: datetime | None
    participation_type: ParticipationType | None
    max_participants: int | None
    published: bool
    published_at: datetime | None
    created_by: UUID
    created_at: datetime
    updated_at: datetime

    registration_status: RegistrationWindowStatus
    registration_count: int

    model_config = {"from_attributes": True}


class EventSummary(BaseModel):
    """Compact event reference embedded in registration listings."""

    id: UUID
    title: str
    event_type: EventType
    start_date: datetime
    end_date: datetime
    venue: str | None

    model_config = {"from_attributes": True}


class EventListState(str, Enum):
    PUBLISHED = "PUBLISHED"
    DRAFT = "DRAFT"
    UPCOMING = "UPCOMING"
    PAST = "PAST"


class EventFilters(BaseModel):
    """Admin event listing filters."""

    search: str | None = Field(default=None, max_length=200)
    event_type: EventType | None = None
    state: EventListState | None = None


class EventCancelRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v: str | None) -> str | None:
        return _strip_optional(v)


class NotificationRecipient(BaseModel):
    """Someone who must be told about a change to an event they registered for."""

    user_id: UUID
    name: str
    email: str
    phone_number: str | None


class EventCancellation(BaseModel):
    event_id: UUID
    affected_count: int
    recipients: list[NotificationRecipient]


class EventBrowseScope(str, Enum):
    """Which published events a resident is browsing."""

    ALL = "ALL"
    UPCOMING = "UPCOMING"
    PAST = "PAST"
    REGISTERED = "REGISTERED"


class EventBrowseFilters(BaseModel):
    scope: EventBrowseScope = EventBrowseScope.UPCOMING
    event_type: EventType | None = None
    search: str | None = Field(default=None, max_length=200)


class UserRegistrationRef(BaseModel):
    id: UUID
    registration_status: RegistrationStatus

    model_config = {"from_attributes": True}


class BrowsedEventRead(EventRead):
    """Event as seen by one resident, flagged with their own registration."""

    is_user_registered: bool
    user_registration: UserRegistrationRef | None


class EventAnalytics(BaseModel):
    """Registration figures for one event.

    ``capacity_utilization`` is participants as a whole percentage of
    ``max_participants``; null when the event has no cap.
    """

    event_id: UUID
    total_registrations: int
    active_registrations: int
    cancelled_registrations: int
    total_participants: int
    recent_registrations: int
    capacity_utilization: int | None
    max_participants: int | None
