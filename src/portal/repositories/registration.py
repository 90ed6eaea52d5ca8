"""Repository for Registration entity."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col, select

from src.portal.models import Event, Registration, RegistrationStatus, User
from src.portal.repositories.base import BaseRepository
from src.portal.schemas.registration import MyRegistrationFilter


class RegistrationRepository(BaseRepository[Registration]):
    """Repository for Registration entity."""

    model = Registration

    async def get_active(self, event_id: UUID, user_id: UUID) -> Registration | None:
        """Get the user's non-cancelled registration for an event, if any."""
        result = await self.session.execute(
            select(Registration).where(
                Registration.event_id == event_id,
                Registration.user_id == user_id,
                Registration.registration_status == RegistrationStatus.REGISTERED.value,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        registration_filter: MyRegistrationFilter,
        now: datetime,
    ) -> list[tuple[Registration, Event]]:
        """A user's registrations joined with their events.

        UPCOMING: events not yet ended, soonest first.
        PAST: ended events, most recent first.
        ALL: everything, most recent registration first.
        """
        query = (
            select(Registration, Event)
            .join(Event, col(Registration.event_id) == col(Event.id))
            .where(Registration.user_id == user_id)
        )
        match registration_filter:
            case MyRegistrationFilter.UPCOMING:
                query = query.where(Event.end_date >= now).order_by(col(Event.start_date).asc())
            case MyRegistrationFilter.PAST:
                query = query.where(Event.end_date < now).order_by(col(Event.start_date).desc())
            case MyRegistrationFilter.ALL:
                query = query.order_by(col(Registration.registered_at).desc())
        result = await self.session.execute(query)
        return [(registration, event) for registration, event in result.all()]

    async def list_for_event_with_users(
        self, event_id: UUID
    ) -> list[tuple[Registration, User]]:
        """Active registrations of an event with their registrants, oldest first.

        Ties on ``registered_at`` are broken by id so exports are stable.
        """
        result = await self.session.execute(
            select(Registration, User)
            .join(User, col(Registration.user_id) == col(User.id))
            .where(
                Registration.event_id == event_id,
                Registration.registration_status == RegistrationStatus.REGISTERED.value,
            )
            .order_by(col(Registration.registered_at).asc(), col(Registration.id).asc())
        )
        return [(registration, user) for registration, user in result.all()]

    async def count_for_user(self, user_id: UUID) -> int:
        """Count all registrations (any status) held by a user."""
        result = await self.session.execute(
            select(func.count()).select_from(Registration).where(Registration.user_id == user_id)
        )
        return int(result.scalar_one())

    async def list_for_event(self, event_id: UUID) -> list[Registration]:
        """Every registration of an event, cancelled ones included."""
        result = await self.session.execute(
            select(Registration).where(Registration.event_id == event_id)
        )
        return list(result.scalars().all())

    async def active_by_event(
        self, user_id: UUID, event_ids: list[UUID]
    ) -> dict[UUID, Registration]:
        """The user's REGISTERED rows among ``event_ids``, keyed by event."""
        if not event_ids:
            return {}
        result = await self.session.execute(
            select(Registration).where(
                Registration.user_id == user_id,
                col(Registration.event_id).in_(event_ids),
                Registration.registration_status == RegistrationStatus.REGISTERED.value,
            )
        )
        return {registration.event_id: registration for registration in result.scalars().all()}
