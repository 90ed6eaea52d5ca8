"""Notification planning.

The core decides who has to be told about a change; delivery belongs to an
external channel. Planned notices are logged so operators can see what
would have been sent.
"""

from src.portal.core.logging import get_logger
from src.portal.models import Event, Registration, User
from src.portal.schemas.event import NotificationRecipient

logger = get_logger(__name__)


def cancellation_recipients(
    registrants: list[tuple[Registration, User]],
) -> list[NotificationRecipient]:
    """One recipient per registering user, in registration order."""
    recipients: list[NotificationRecipient] = []
    seen = set()
    for _registration, user in registrants:
        if user.id in seen:
            continue
        seen.add(user.id)
        recipients.append(
            NotificationRecipient(
                user_id=user.id,
                name=user.name,
                email=user.email,
                phone_number=user.phone_number,
            )
        )
    return recipients


def announce_event_cancelled(
    event: Event,
    reason: str | None,
    recipients: list[NotificationRecipient],
) -> None:
    """Record the cancellation notices that the delivery channel must send."""
    if not recipients:
        return
    logger.info(
        "Event cancellation notices pending delivery",
        event_id=str(event.id),
        event_title=event.title,
        reason=reason,
        recipient_count=len(recipients),
        notification_type="event_cancelled",
    )
