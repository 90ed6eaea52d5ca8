"""Audit log schemas.

Each audit action has exactly one details record; the ``kind`` tag equals the
action value so stored JSON can be validated back into the right shape.
"""

from datetime import datetime
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from src.portal.models.enums import UserRole, UserStatus


class _Details(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class UserStatusChangeDetails(_Details):
    kind: Literal["user.status_change"] = "user.status_change"
    previous_status: UserStatus
    new_status: UserStatus
    reason: str | None = None
    forced: bool = False


class UserRoleChangeDetails(_Details):
    kind: Literal["user.role_change"] = "user.role_change"
    previous_role: UserRole
    new_role: UserRole


class UserPasswordResetDetails(_Details):
    kind: Literal["user.password_reset"] = "user.password_reset"
    email: str


class UserDeleteDetails(_Details):
    kind: Literal["user.delete"] = "user.delete"
    email: str
    name: str


class EventCreateDetails(_Details):
    kind: Literal["event.create"] = "event.create"
    title: str
    published: bool


class EventUpdateDetails(_Details):
    kind: Literal["event.update"] = "event.update"
    changed_fields: list[str]


class EventDeleteDetails(_Details):
    kind: Literal["event.delete"] = "event.delete"
    title: str


class EventRegistrationCloseDetails(_Details):
    kind: Literal["event.registration_close"] = "event.registration_close"
    previous_end: datetime | None
    new_end: datetime | None
    already_closed: bool


class EventCancelDetails(_Details):
    kind: Literal["event.cancel"] = "event.cancel"
    reason: str | None
    affected_count: int


AuditDetails = Annotated[
    UserStatusChangeDetails
    | UserRoleChangeDetails
    | UserPasswordResetDetails
    | UserDeleteDetails
    | EventCreateDetails
    | EventUpdateDetails
    | EventDeleteDetails
    | EventRegistrationCloseDetails
    | EventCancelDetails,
    Field(discriminator="kind"),
]

audit_details_adapter: TypeAdapter[AuditDetails] = TypeAdapter(AuditDetails)


class AuditLogRead(BaseModel):
    """Audit log entry for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    actor_id: UUID
    action: str
    entity_type: str
    entity_id: UUID
    details: AuditDetails
    ip_address: str | None
    request_id: str | None
    created_at: datetime


class AuditLogListResponse(BaseModel):
    """Paginated audit log response."""

    items: list[AuditLogRead]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for fetching the next page. None if no more pages.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether there are more items after this page.",
    )
