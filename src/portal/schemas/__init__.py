from src.portal.schemas.audit import AuditDetails, AuditLogListResponse, AuditLogRead
from src.portal.schemas.event import (
    BrowsedEventRead,
    EventAnalytics,
    EventBrowseFilters,
    EventBrowseScope,
    EventCancellation,
    EventCancelRequest,
    EventCreate,
    EventFilters,
    EventListState,
    EventRead,
    EventSummary,
    EventUpdate,
    NotificationRecipient,
)
from src.portal.schemas.export import CsvExport
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.schemas.registration import (
    EventRegistrationsRead,
    MyRegistrationFilter,
    MyRegistrationRead,
    RegistrantRead,
    RegistrationCreate,
    RegistrationRead,
    RegistrationSummary,
    TeamMember,
    TimeRemaining,
)
from src.portal.schemas.user import (
    PasswordResetRead,
    RoleChangeRequest,
    SignUpRequest,
    StatusChangeRequest,
    UserFilters,
    UserRead,
    UserStats,
)

__all__ = [
    # Audit
    "AuditDetails",
    "AuditLogListResponse",
    "AuditLogRead",
    # Event
    "BrowsedEventRead",
    "EventAnalytics",
    "EventBrowseFilters",
    "EventBrowseScope",
    "EventCancellation",
    "EventCancelRequest",
    "EventCreate",
    "EventFilters",
    "EventListState",
    "EventRead",
    "EventSummary",
    "EventUpdate",
    "NotificationRecipient",
    # Export
    "CsvExport",
    # Pagination
    "PaginatedResponse",
    # Registration
    "EventRegistrationsRead",
    "MyRegistrationFilter",
    "MyRegistrationRead",
    "RegistrantRead",
    "RegistrationCreate",
    "RegistrationRead",
    "RegistrationSummary",
    "TeamMember",
    "TimeRemaining",
    # User
    "PasswordResetRead",
    "RoleChangeRequest",
    "SignUpRequest",
    "StatusChangeRequest",
    "UserFilters",
    "UserRead",
    "UserStats",
]
