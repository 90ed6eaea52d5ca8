"""Registration window status.

The one place status is derived. Nothing stores it: every read and every
eligibility check recomputes it from the event's dates, capacity and the
current registration count.
"""

from datetime import datetime

from src.portal.models import Event, RegistrationWindowStatus
from src.portal.schemas.event import EventRead


def compute_status(
    now: datetime,
    registration_required: bool,
    registration_start: datetime | None,
    registration_end: datetime | None,
    max_participants: int | None,
    current_count: int,
) -> RegistrationWindowStatus:
    """Derive the registration status of an event at ``now``.

    The checks run in a fixed order. CLOSED is tested before FULL so that an
    administratively closed event reads as closed even when it is also full.
    """
    if not registration_required:
        return RegistrationWindowStatus.NO_REGISTRATION
    if registration_start is not None and now < registration_start:
        return RegistrationWindowStatus.NOT_STARTED
    if registration_end is not None and now > registration_end:
        return RegistrationWindowStatus.CLOSED
    if max_participants is not None and current_count >= max_participants:
        return RegistrationWindowStatus.FULL
    return RegistrationWindowStatus.OPEN


def status_for_event(event: Event, current_count: int, now: datetime) -> RegistrationWindowStatus:
    """Read the window fields off ``event`` and compute its status."""
    return compute_status(
        now=now,
        registration_required=event.registration_required,
        registration_start=event.registration_start_date,
        registration_end=event.registration_end_date,
        max_participants=event.max_participants,
        current_count=current_count,
    )


def event_read(event: Event, current_count: int, now: datetime) -> EventRead:
    """Serialize ``event`` together with its status at ``now``."""
    return EventRead.model_validate(
        {
            **event.model_dump(),
            "registration_status": status_for_event(event, current_count, now),
            "registration_count": current_count,
        }
    )
