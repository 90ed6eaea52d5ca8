"""Registration schemas for API request/response."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.portal.core.config import get_settings
from src.portal.models.enums import RegistrationStatus, RegistrationWindowStatus
from src.portal.schemas.event import EventRead, EventSummary


class TeamMember(BaseModel):
    """One member of a team registration. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="", max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=20)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("email", "phone", mode="before")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class RegistrationCreate(BaseModel):
    team_members: list[TeamMember] = Field(default_factory=list)
    additional_notes: str | None = Field(default=None, max_length=1000)

    @field_validator("team_members")
    @classmethod
    def validate_team_size(cls, v: list[TeamMember]) -> list[TeamMember]:
        limit = get_settings().max_team_members
        if len(v) > limit:
            raise ValueError(f"A team can have at most {limit} members")
        return v

    @field_validator("additional_notes")
    @classmethod
    def validate_notes(cls, v: str | None) -> str | None:
        if v is not None:
            v = v.strip()
            if not v:
                return None
        return v


class RegistrationRead(BaseModel):
    id: UUID
    event_id: UUID
    user_id: UUID
    team_members: list[TeamMember]
    additional_notes: str | None
    registration_status: RegistrationStatus
    registered_at: datetime

    model_config = {"from_attributes": True}


class MyRegistrationRead(RegistrationRead):
    """A resident's own registration with the event it belongs to."""

    event: EventSummary


class MyRegistrationFilter(str, Enum):
    UPCOMING = "UPCOMING"
    PAST = "PAST"
    ALL = "ALL"


class RegistrantRead(RegistrationRead):
    """Registration joined with the registrant's contact details (admin view)."""

    name: str
    email: str
    phone_number: str | None
    building_name: str | None
    flat_number: str | None


class TimeRemaining(BaseModel):
    days: int
    hours: int


class RegistrationSummary(BaseModel):
    total_registrations: int
    total_participants: int
    status: RegistrationWindowStatus
    time_remaining: TimeRemaining | None = Field(
        default=None,
        description="Time until registration closes; only set while registration is OPEN.",
    )


class EventRegistrationsRead(BaseModel):
    event: EventRead
    registrations: list[RegistrantRead]
    summary: RegistrationSummary
