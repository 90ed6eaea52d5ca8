"""Service layer dependencies."""

from typing import Annotated

from fastapi import Depends

from src.portal.api.dependencies.db import DBSession
from src.portal.models.base import utc_now
from src.portal.services import (
    AccountService,
    AuditService,
    EventService,
    ExportService,
    RegistrationService,
)
from src.portal.services.base import Clock


def get_clock() -> Clock:
    """Wall clock for services. Tests override this to freeze time."""
    return utc_now


ClockDep = Annotated[Clock, Depends(get_clock)]


def get_account_service(session: DBSession, clock: ClockDep) -> AccountService:
    return AccountService(session, clock)


def get_audit_service(session: DBSession, clock: ClockDep) -> AuditService:
    return AuditService(session, clock)


def get_event_service(session: DBSession, clock: ClockDep) -> EventService:
    return EventService(session, clock)


def get_export_service(session: DBSession, clock: ClockDep) -> ExportService:
    return ExportService(session, clock)


def get_registration_service(session: DBSession, clock: ClockDep) -> RegistrationService:
    return RegistrationService(session, clock)


AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
AuditServiceDep = Annotated[AuditService, Depends(get_audit_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
ExportServiceDep = Annotated[ExportService, Depends(get_export_service)]
RegistrationServiceDep = Annotated[RegistrationService, Depends(get_registration_service)]
