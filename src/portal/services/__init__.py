from src.portal.services.account_service import AccountService
from src.portal.services.audit_service import AuditService
from src.portal.services.event_service import EventService
from src.portal.services.export_service import ExportService
from src.portal.services.registration_service import RegistrationService
from src.portal.services.registration_status import compute_status

__all__ = [
    "AccountService",
    "AuditService",
    "EventService",
    "ExportService",
    "RegistrationService",
    "compute_status",
]
