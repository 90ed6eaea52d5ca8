"""Event lifecycle - create, edit, close, cancel and delete community events.

Every mutation is admin-only and stages exactly one audit entry in the same
transaction. Changes that depend on the registration count take the event
row lock first, the same lock the registration ledger uses.
"""

import math
from datetime import datetime, timedelta
from enum import Enum
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.actor import Actor
from src.portal.core.config import get_settings
from src.portal.core.logging import get_logger
from src.portal.core.result import Ok, Result, not_found, state_conflict, validation_error
from src.portal.models import AuditAction, AuditEntityType, Event, RegistrationStatus
from src.portal.models.base import utc_now
from src.portal.repositories import EventRepository, RegistrationRepository
from src.portal.schemas.audit import (
    EventCancelDetails,
    EventCreateDetails,
    EventDeleteDetails,
    EventRegistrationCloseDetails,
    EventUpdateDetails,
)
from src.portal.schemas.event import (
    BrowsedEventRead,
    EventAnalytics,
    EventBrowseFilters,
    EventCancellation,
    EventCreate,
    EventFilters,
    EventRead,
    EventUpdate,
    UserRegistrationRef,
)
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.services.audit_service import AuditService
from src.portal.services.base import BaseService, Clock, require_admin, unit_of_work
from src.portal.services.notification_service import (
    announce_event_cancelled,
    cancellation_recipients,
)
from src.portal.services.registration_status import event_read

logger = get_logger(__name__)

CANCELLED_MARKER = "[CANCELLED"

# Status reads CLOSED only once now > end, so a close ends the window one
# stored tick (a microsecond) before now.
CLOSE_TICK = timedelta(microseconds=1)

RECENT_REGISTRATION_WINDOW = timedelta(days=7)


def _check_dates(
    start_date: datetime,
    end_date: datetime,
    registration_start_date: datetime | None,
    registration_end_date: datetime | None,
) -> str | None:
    if end_date < start_date:
        return "End date must be on or after the start date"
    if (
        registration_start_date is not None
        and registration_end_date is not None
        and registration_end_date < registration_start_date
    ):
        return "Registration end date must be on or after the registration start date"
    return None


def _column_values(values: dict[str, Any]) -> dict[str, Any]:
    """Enum members are stored by value."""
    return {key: v.value if isinstance(v, Enum) else v for key, v in values.items()}


def cancellation_description(reason: str | None, description: str | None) -> str:
    """Prefix ``description`` with the cancellation marker."""
    marker = f"{CANCELLED_MARKER}: {reason}]" if reason else f"{CANCELLED_MARKER}]"
    return f"{marker}\n\n{description}" if description else marker


class EventService(BaseService):
    """Admin event management and resident event views."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(session, clock)
        self.event_repo = EventRepository(session)
        self.registration_repo = RegistrationRepository(session)
        self.audit = AuditService(session, clock)

    @unit_of_work
    async def create(self, actor: Actor, data: EventCreate) -> Result[EventRead]:
        if err := require_admin(actor):
            return err
        if message := _check_dates(
            data.start_date,
            data.end_date,
            data.registration_start_date,
            data.registration_end_date,
        ):
            return validation_error(message)

        now = self.clock()
        event = Event(
            **_column_values(data.model_dump()),
            created_by=actor.id,
            published_at=now if data.published else None,
            created_at=now,
            updated_at=now,
        )
        self.event_repo.add(event)
        self.audit.append(
            actor.id,
            AuditAction.EVENT_CREATE,
            AuditEntityType.EVENT,
            event.id,
            EventCreateDetails(title=event.title, published=event.published),
        )
        await self.session.flush()

        logger.info("Event created", event_id=str(event.id), published=event.published)
        return Ok(event_read(event, 0, now))

    @unit_of_work
    async def update(self, actor: Actor, event_id: UUID, data: EventUpdate) -> Result[EventRead]:
        """Apply a partial update.

        Registration settings cannot be changed in ways that would strand
        existing registrants: registration stays required while anyone is
        registered, and capacity cannot drop below the current count.
        """
        if err := require_admin(actor):
            return err

        event = await self.event_repo.get_for_update(event_id)
        if event is None:
            return not_found("Event")

        changes = _column_values(data.model_dump(exclude_unset=True))
        merged = {**event.model_dump(), **changes}
        if message := _check_dates(
            merged["start_date"],
            merged["end_date"],
            merged["registration_start_date"],
            merged["registration_end_date"],
        ):
            return validation_error(message)

        count = await self.event_repo.count_registered(event.id)
        if changes.get("registration_required") is False and count > 0:
            return state_conflict(
                "Cannot disable registration while the event has registrations"
            )
        max_participants = changes.get("max_participants")
        if max_participants is not None and max_participants < count:
            return state_conflict(
                f"Cannot lower capacity to {max_participants}: "
                f"{count} participants are already registered"
            )

        now = self.clock()
        if changes.get("published") and event.published_at is None:
            event.published_at = now

        changed_fields = []
        for field, value in changes.items():
            if getattr(event, field) != value:
                setattr(event, field, value)
                changed_fields.append(field)
        event.updated_at = now

        self.audit.append(
            actor.id,
            AuditAction.EVENT_UPDATE,
            AuditEntityType.EVENT,
            event.id,
            EventUpdateDetails(changed_fields=sorted(changed_fields)),
        )
        await self.session.flush()

        logger.info("Event updated", event_id=str(event.id), changed_fields=changed_fields)
        return Ok(event_read(event, count, now))

    @unit_of_work
    async def delete(self, actor: Actor, event_id: UUID) -> Result[None]:
        if err := require_admin(actor):
            return err

        event = await self.event_repo.get_for_update(event_id)
        if event is None:
            return not_found("Event")
        count = await self.event_repo.count_registered(event.id)
        if count > 0:
            return state_conflict(
                f"Cannot delete an event with {count} registrations; cancel the event instead"
            )

        self.audit.append(
            actor.id,
            AuditAction.EVENT_DELETE,
            AuditEntityType.EVENT,
            event.id,
            EventDeleteDetails(title=event.title),
        )
        await self.event_repo.delete(event)
        await self.session.flush()

        logger.info("Event deleted", event_id=str(event_id))
        return Ok(None)

    @unit_of_work
    async def close_registration(self, actor: Actor, event_id: UUID) -> Result[EventRead]:
        """Close registration now. Closing an already-closed window changes nothing.

        The stored end lands just before ``now`` so the returned view already
        reads CLOSED. A registration start later than that end is pulled back
        to it, keeping the window well-formed and CLOSED rather than NOT_STARTED.
        """
        if err := require_admin(actor):
            return err

        event = await self.event_repo.get_for_update(event_id)
        if event is None:
            return not_found("Event")

        now = self.clock()
        previous_end = event.registration_end_date
        already_closed = previous_end is not None and previous_end < now
        if not already_closed:
            closed_at = now - CLOSE_TICK
            event.registration_end_date = closed_at
            if (
                event.registration_start_date is not None
                and event.registration_start_date > closed_at
            ):
                event.registration_start_date = closed_at
            event.updated_at = now

        self.audit.append(
            actor.id,
            AuditAction.EVENT_REGISTRATION_CLOSE,
            AuditEntityType.EVENT,
            event.id,
            EventRegistrationCloseDetails(
                previous_end=previous_end,
                new_end=event.registration_end_date,
                already_closed=already_closed,
            ),
        )
        await self.session.flush()

        count = await self.event_repo.count_registered(event.id)
        logger.info("Event registration closed", event_id=str(event.id), already_closed=already_closed)
        return Ok(event_read(event, count, now))

    @unit_of_work
    async def cancel_event(
        self, actor: Actor, event_id: UUID, reason: str | None = None
    ) -> Result[EventCancellation]:
        """Unpublish the event and mark it cancelled.

        Registrations are kept so the registrants can be notified; the
        returned recipients are who the delivery channel must reach.
        """
        if err := require_admin(actor):
            return err

        event = await self.event_repo.get_for_update(event_id)
        if event is None:
            return not_found("Event")
        if (event.description or "").startswith(CANCELLED_MARKER):
            return state_conflict("Event is already cancelled")

        registrants = await self.registration_repo.list_for_event_with_users(event.id)
        recipients = cancellation_recipients(registrants)

        now = self.clock()
        event.published = False
        event.description = cancellation_description(reason, event.description)
        event.updated_at = now

        self.audit.append(
            actor.id,
            AuditAction.EVENT_CANCEL,
            AuditEntityType.EVENT,
            event.id,
            EventCancelDetails(reason=reason, affected_count=len(registrants)),
        )
        await self.session.flush()

        logger.info("Event cancelled", event_id=str(event.id), affected_count=len(registrants))
        announce_event_cancelled(event, reason, recipients)
        return Ok(
            EventCancellation(
                event_id=event.id,
                affected_count=len(registrants),
                recipients=recipients,
            )
        )

    @unit_of_work
    async def get_event(self, actor: Actor, event_id: UUID) -> Result[EventRead]:
        """Any event, published or not. Admin only."""
        if err := require_admin(actor):
            return err
        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            return not_found("Event")
        count = await self.event_repo.count_registered(event.id)
        return Ok(event_read(event, count, self.clock()))

    @unit_of_work
    async def get_published_event(self, event_id: UUID) -> Result[EventRead]:
        event = await self.event_repo.get_published(event_id)
        if event is None:
            return not_found("Event")
        count = await self.event_repo.count_registered(event.id)
        return Ok(event_read(event, count, self.clock()))

    @unit_of_work
    async def list_events(
        self,
        actor: Actor,
        filters: EventFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Result[PaginatedResponse[EventRead]]:
        if err := require_admin(actor):
            return err
        now = self.clock()
        events, next_cursor, has_more = await self.event_repo.list_filtered(
            filters, now, cursor, limit or get_settings().default_page_size
        )
        counts = await self.event_repo.count_registered_many([event.id for event in events])
        return Ok(
            PaginatedResponse[EventRead](
                items=[event_read(event, counts[event.id], now) for event in events],
                next_cursor=next_cursor,
                has_more=has_more,
            )
        )

    @unit_of_work
    async def list_upcoming_events(self, limit: int | None = None) -> Result[list[EventRead]]:
        """Published events that have not ended, soonest first."""
        now = self.clock()
        events = await self.event_repo.list_upcoming(
            now, limit or get_settings().upcoming_events_limit
        )
        counts = await self.event_repo.count_registered_many([event.id for event in events])
        return Ok([event_read(event, counts[event.id], now) for event in events])

    @unit_of_work
    async def browse_events(
        self,
        actor: Actor,
        filters: EventBrowseFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Result[PaginatedResponse[BrowsedEventRead]]:
        """Published events as one resident sees them, flagged with their own place."""
        now = self.clock()
        events, next_cursor, has_more = await self.event_repo.list_for_resident(
            filters, actor.id, now, cursor, limit or get_settings().default_page_size
        )
        event_ids = [event.id for event in events]
        counts = await self.event_repo.count_registered_many(event_ids)
        held = await self.registration_repo.active_by_event(actor.id, event_ids)
        items = []
        for event in events:
            registration = held.get(event.id)
            items.append(
                BrowsedEventRead(
                    **event_read(event, counts[event.id], now).model_dump(),
                    is_user_registered=registration is not None,
                    user_registration=(
                        UserRegistrationRef.model_validate(registration)
                        if registration is not None
                        else None
                    ),
                )
            )
        return Ok(
            PaginatedResponse[BrowsedEventRead](
                items=items, next_cursor=next_cursor, has_more=has_more
            )
        )

    @unit_of_work
    async def event_analytics(self, actor: Actor, event_id: UUID) -> Result[EventAnalytics]:
        """Registration figures for one event. Admin only.

        Participants count each active registrant plus their team members.
        Recent registrations cover the last seven days, whatever their status.
        Utilization is participants over capacity as a rounded percentage,
        null for uncapped events.
        """
        if err := require_admin(actor):
            return err
        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            return not_found("Event")
        registrations = await self.registration_repo.list_for_event(event_id)
        active = [
            r for r in registrations
            if r.registration_status == RegistrationStatus.REGISTERED.value
        ]
        cancelled = sum(
            1 for r in registrations
            if r.registration_status == RegistrationStatus.CANCELLED.value
        )
        participants = sum(1 + len(r.team_members or []) for r in active)
        since = self.clock() - RECENT_REGISTRATION_WINDOW
        recent = sum(1 for r in registrations if r.registered_at >= since)
        utilization = (
            math.floor(participants * 100 / event.max_participants + 0.5)
            if event.max_participants
            else None
        )
        return Ok(
            EventAnalytics(
                event_id=event.id,
                total_registrations=len(registrations),
                active_registrations=len(active),
                cancelled_registrations=cancelled,
                total_participants=participants,
                recent_registrations=recent,
                capacity_utilization=utilization,
                max_participants=event.max_participants,
            )
        )
