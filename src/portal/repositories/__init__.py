"""Repository layer - data access abstraction."""

from src.portal.repositories.audit import AuditLogRepository
from src.portal.repositories.base import BaseRepository
from src.portal.repositories.event import EventRepository
from src.portal.repositories.registration import RegistrationRepository
from src.portal.repositories.user import UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "EventRepository",
    "RegistrationRepository",
    "UserRepository",
]
