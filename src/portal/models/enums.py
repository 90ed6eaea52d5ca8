"""Shared enums for models."""

from enum import Enum


class EventType(str, Enum):
    """Kind of community event."""

    FESTIVAL = "FESTIVAL"
    SPORTS = "SPORTS"
    CULTURAL = "CULTURAL"
    MEETING = "MEETING"
    SOCIAL = "SOCIAL"
    OTHER = "OTHER"


class ParticipationType(str, Enum):
    """Whether a registration covers one person or a team."""

    INDIVIDUAL = "INDIVIDUAL"
    TEAM = "TEAM"


class RegistrationStatus(str, Enum):
    """Stored state of a registration row."""

    REGISTERED = "REGISTERED"
    CANCELLED = "CANCELLED"


class RegistrationWindowStatus(str, Enum):
    """Derived registration status of an event. Never persisted."""

    NO_REGISTRATION = "NO_REGISTRATION"
    NOT_STARTED = "NOT_STARTED"
    CLOSED = "CLOSED"
    FULL = "FULL"
    OPEN = "OPEN"


class UserRole(str, Enum):
    """Portal role of an account."""

    PUBLIC = "PUBLIC"
    OWNER = "OWNER"
    TENANT = "TENANT"
    ADMIN = "ADMIN"


class UserStatus(str, Enum):
    """Account lifecycle state."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    SUSPENDED = "SUSPENDED"
    REJECTED = "REJECTED"


class UserType(str, Enum):
    """Residency type requested at sign-up."""

    OWNER = "OWNER"
    TENANT = "TENANT"
