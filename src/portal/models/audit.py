"""Append-only audit log of administrative mutations."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import Column, Index, event
from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.event import JSONVariant


class AuditAction(str, Enum):
    """Audit action types for type-safe logging."""

    # User accounts
    USER_STATUS_CHANGE = "user.status_change"
    USER_ROLE_CHANGE = "user.role_change"
    USER_PASSWORD_RESET = "user.password_reset"
    USER_DELETE = "user.delete"

    # Events
    EVENT_CREATE = "event.create"
    EVENT_UPDATE = "event.update"
    EVENT_DELETE = "event.delete"
    EVENT_REGISTRATION_CLOSE = "event.registration_close"
    EVENT_CANCEL = "event.cancel"


class AuditEntityType(str, Enum):
    USER = "user"
    EVENT = "event"


class AuditLogImmutableError(RuntimeError):
    """Raised when code tries to modify or remove a persisted audit entry."""


class AuditLog(SQLModel, table=True):
    """One administrative mutation.

    ``details`` holds one of the closed per-action records from
    ``schemas.audit``, dumped to JSON. Entries are never updated or deleted.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_actor_created", "actor_id", "created_at"),
        Index("ix_audit_logs_entity", "entity_type", "entity_id", "created_at"),
        Index("ix_audit_logs_action_created", "action", "created_at"),
    )

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    # Not a foreign key: entries outlive the users they mention.
    actor_id: UUID

    action: str = Field(max_length=50)  # AuditAction value
    entity_type: str = Field(max_length=50)  # AuditEntityType value
    entity_id: UUID

    details: dict[str, Any] = Field(sa_column=Column(JSONVariant, nullable=False))

    # Request metadata
    ip_address: str | None = Field(max_length=45, default=None)  # IPv4/IPv6
    request_id: str | None = Field(max_length=36, default=None)  # Correlation ID

    created_at: datetime = Field(default_factory=utc_now)


@event.listens_for(AuditLog, "before_update")
def _refuse_update(mapper: Any, connection: Any, target: AuditLog) -> None:
    raise AuditLogImmutableError(f"Audit log entry {target.id} cannot be updated")


@event.listens_for(AuditLog, "before_delete")
def _refuse_delete(mapper: Any, connection: Any, target: AuditLog) -> None:
    raise AuditLogImmutableError(f"Audit log entry {target.id} cannot be deleted")
