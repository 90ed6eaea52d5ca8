"""Model exports.

Import from here: `from src.portal.models import Event, User`
"""

# Enums
from src.portal.models.enums import (
    EventType,
    ParticipationType,
    RegistrationStatus,
    RegistrationWindowStatus,
    UserRole,
    UserStatus,
    UserType,
)

# Tables
from src.portal.models.audit import (
    AuditAction,
    AuditEntityType,
    AuditLog,
    AuditLogImmutableError,
)
from src.portal.models.event import Event, Registration
from src.portal.models.user import User

__all__ = [
    # Enums
    "AuditAction",
    "AuditEntityType",
    "EventType",
    "ParticipationType",
    "RegistrationStatus",
    "RegistrationWindowStatus",
    "UserRole",
    "UserStatus",
    "UserType",
    # Errors
    "AuditLogImmutableError",
    # Models
    "AuditLog",
    "Event",
    "Registration",
    "User",
]
