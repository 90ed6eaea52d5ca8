"""Registration ledger - signs residents up for events and cancels them.

Capacity is enforced inside one transaction: the event row is locked, the
live count is taken under that lock and the insert happens before the lock
is released. The partial unique index on (event, user) catches any
duplicate that slips past the in-transaction check.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.actor import Actor
from src.portal.core.logging import get_logger
from src.portal.core.result import Err, ErrorKind, Ok, Result, not_found, validation_error
from src.portal.models import (
    ParticipationType,
    Registration,
    RegistrationWindowStatus,
    User,
)
from src.portal.models.base import utc_now
from src.portal.repositories import EventRepository, RegistrationRepository
from src.portal.schemas.event import EventSummary
from src.portal.schemas.registration import (
    EventRegistrationsRead,
    MyRegistrationFilter,
    MyRegistrationRead,
    RegistrantRead,
    RegistrationCreate,
    RegistrationRead,
    RegistrationSummary,
    TimeRemaining,
)
from src.portal.services.base import BaseService, Clock, require_admin, unit_of_work
from src.portal.services.registration_status import event_read, status_for_event

logger = get_logger(__name__)

_NOT_OPEN_MESSAGES = {
    RegistrationWindowStatus.NO_REGISTRATION: "This event does not take registrations",
    RegistrationWindowStatus.NOT_STARTED: "Registration has not started yet",
    RegistrationWindowStatus.CLOSED: "Registration is closed",
}


class RegistrationService(BaseService):
    """Creates and cancels registrations; serves resident and admin views."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(session, clock)
        self.event_repo = EventRepository(session)
        self.registration_repo = RegistrationRepository(session)

    @unit_of_work
    async def register(
        self, actor: Actor, event_id: UUID, data: RegistrationCreate
    ) -> Result[RegistrationRead]:
        """Register the actor for a published event.

        Checks, in order: event exists and is published, the window is open,
        team details are present for team events, the actor is not already
        registered, and capacity remains.
        """
        if await self.session.get(User, actor.id) is None:
            return not_found("User")

        event = await self.event_repo.get_for_update(event_id)
        if event is None or not event.published:
            return not_found("Event")

        count = await self.event_repo.count_registered(event.id)
        now = self.clock()
        status = status_for_event(event, count, now)
        if status in _NOT_OPEN_MESSAGES:
            return Err(ErrorKind.NOT_OPEN, _NOT_OPEN_MESSAGES[status])

        team_members = []
        if event.participation_type == ParticipationType.TEAM.value:
            team_members = [member for member in data.team_members if member.name]
            if not team_members:
                return validation_error("At least one team member with a name is required")

        if await self.registration_repo.get_active(event.id, actor.id) is not None:
            return Err(ErrorKind.ALREADY_REGISTERED, "You are already registered for this event")

        if status == RegistrationWindowStatus.FULL:
            return Err(ErrorKind.CAPACITY_EXCEEDED, "Event has reached maximum capacity")

        registration = Registration(
            event_id=event.id,
            user_id=actor.id,
            team_members=[member.model_dump() for member in team_members],
            additional_notes=data.additional_notes,
            registered_at=now,
        )
        self.registration_repo.add(registration)
        try:
            await self.session.flush()
        except IntegrityError:
            return Err(ErrorKind.ALREADY_REGISTERED, "You are already registered for this event")

        logger.info(
            "Registration created",
            event_id=str(event.id),
            user_id=str(actor.id),
            registration_id=str(registration.id),
            team_size=len(team_members),
        )
        return Ok(RegistrationRead.model_validate(registration))

    @unit_of_work
    async def cancel(self, actor: Actor, registration_id: UUID) -> Result[None]:
        """Withdraw the actor's own registration before the event starts."""
        registration = await self.registration_repo.get_by_id(registration_id)
        if registration is None or registration.user_id != actor.id:
            return not_found("Registration")

        event = await self.event_repo.get_for_update(registration.event_id)
        if event is None:
            return not_found("Event")
        if event.start_date <= self.clock():
            return Err(
                ErrorKind.EVENT_ALREADY_STARTED,
                "Cannot cancel registration after the event has started",
            )

        await self.registration_repo.delete(registration)
        logger.info(
            "Registration cancelled",
            event_id=str(event.id),
            user_id=str(actor.id),
            registration_id=str(registration_id),
        )
        return Ok(None)

    @unit_of_work
    async def list_my_registrations(
        self,
        actor: Actor,
        registration_filter: MyRegistrationFilter = MyRegistrationFilter.UPCOMING,
    ) -> Result[list[MyRegistrationRead]]:
        rows = await self.registration_repo.list_for_user(
            actor.id, registration_filter, self.clock()
        )
        return Ok(
            [
                MyRegistrationRead.model_validate(
                    {**registration.model_dump(), "event": EventSummary.model_validate(event)}
                )
                for registration, event in rows
            ]
        )

    @unit_of_work
    async def list_event_registrations(
        self, actor: Actor, event_id: UUID
    ) -> Result[EventRegistrationsRead]:
        """All active registrations of an event with a summary. Admin only."""
        if err := require_admin(actor):
            return err

        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            return not_found("Event")

        rows = await self.registration_repo.list_for_event_with_users(event.id)
        now = self.clock()
        count = len(rows)
        status = status_for_event(event, count, now)

        time_remaining = None
        if status == RegistrationWindowStatus.OPEN and event.registration_end_date is not None:
            remaining = event.registration_end_date - now
            time_remaining = TimeRemaining(
                days=remaining.days, hours=remaining.seconds // 3600
            )

        summary = RegistrationSummary(
            total_registrations=count,
            total_participants=sum(
                1 + len(registration.team_members) for registration, _user in rows
            ),
            status=status,
            time_remaining=time_remaining,
        )
        return Ok(
            EventRegistrationsRead(
                event=event_read(event, count, now),
                registrations=[registrant_read(registration, user) for registration, user in rows],
                summary=summary,
            )
        )


def registrant_read(registration: Registration, user: User) -> RegistrantRead:
    return RegistrantRead.model_validate(
        {
            **registration.model_dump(),
            "name": user.name,
            "email": user.email,
            "phone_number": user.phone_number,
            "building_name": user.building_name,
            "flat_number": user.flat_number,
        }
    )
