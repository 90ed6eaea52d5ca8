"""FastAPI dependency injection definitions."""

# Actor
from src.portal.api.dependencies.auth import CurrentActor, get_current_actor

# Database
from src.portal.api.dependencies.db import DBSession, get_db_session

# Services
from src.portal.api.dependencies.services import (
    AccountServiceDep,
    AuditServiceDep,
    ClockDep,
    EventServiceDep,
    ExportServiceDep,
    RegistrationServiceDep,
    get_account_service,
    get_audit_service,
    get_clock,
    get_event_service,
    get_export_service,
    get_registration_service,
)

__all__ = [
    # Actor
    "CurrentActor",
    "get_current_actor",
    # Database
    "DBSession",
    "get_db_session",
    # Services
    "AccountServiceDep",
    "AuditServiceDep",
    "ClockDep",
    "EventServiceDep",
    "ExportServiceDep",
    "RegistrationServiceDep",
    "get_account_service",
    "get_audit_service",
    "get_clock",
    "get_event_service",
    "get_export_service",
    "get_registration_service",
]
