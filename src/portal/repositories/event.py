"""Repository for Event entity."""

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import func, or_
from sqlmodel import col, select

from src.portal.models import Event, Registration, RegistrationStatus
from src.portal.repositories.base import BaseRepository
from src.portal.schemas.event import (
    EventBrowseFilters,
    EventBrowseScope,
    EventFilters,
    EventListState,
)


def _matches_search(search: str) -> Any:
    pattern = f"%{search}%"
    return or_(
        col(Event.title).ilike(pattern),
        col(Event.description).ilike(pattern),
        col(Event.venue).ilike(pattern),
    )


class EventRepository(BaseRepository[Event]):
    """Repository for Event entity."""

    model = Event

    async def get_for_update(self, event_id: UUID) -> Event | None:
        """Get an event and lock its row until the transaction ends.

        Every writer that depends on the event's registration count goes
        through this lock, so count-then-write sequences are serialized per
        event. SQLite has no row locks; there the engine opens every
        transaction with BEGIN IMMEDIATE instead.
        """
        result = await self.session.execute(
            select(Event).where(Event.id == event_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_published(self, event_id: UUID) -> Event | None:
        result = await self.session.execute(
            select(Event).where(Event.id == event_id, Event.published == True)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        filters: EventFilters,
        now: datetime,
        cursor: str | None,
        limit: int,
    ) -> tuple[list[Event], str | None, bool]:
        """List events for administration, newest start date first."""
        query = select(Event)
        if filters.search:
            query = query.where(_matches_search(filters.search))
        if filters.event_type:
            query = query.where(Event.event_type == filters.event_type.value)
        match filters.state:
            case EventListState.PUBLISHED:
                query = query.where(Event.published == True)  # noqa: E712
            case EventListState.DRAFT:
                query = query.where(Event.published == False)  # noqa: E712
            case EventListState.UPCOMING:
                query = query.where(Event.start_date > now)
            case EventListState.PAST:
                query = query.where(Event.end_date < now)
        return await self.paginate(query, cursor, limit, Event.start_date)

    async def list_for_resident(
        self,
        filters: EventBrowseFilters,
        user_id: UUID,
        now: datetime,
        cursor: str | None,
        limit: int,
    ) -> tuple[list[Event], str | None, bool]:
        """Published events for one resident.

        PAST runs most recent first; every other scope runs soonest first.
        REGISTERED keeps only events the resident holds an active place in.
        """
        query = select(Event).where(Event.published == True)  # noqa: E712
        match filters.scope:
            case EventBrowseScope.UPCOMING:
                query = query.where(Event.end_date >= now)
            case EventBrowseScope.PAST:
                query = query.where(Event.end_date < now)
            case EventBrowseScope.REGISTERED:
                query = query.where(
                    col(Event.id).in_(
                        select(Registration.event_id).where(
                            Registration.user_id == user_id,
                            Registration.registration_status
                            == RegistrationStatus.REGISTERED.value,
                        )
                    )
                )
        if filters.event_type:
            query = query.where(Event.event_type == filters.event_type.value)
        if filters.search:
            query = query.where(_matches_search(filters.search))
        return await self.paginate(
            query,
            cursor,
            limit,
            Event.start_date,
            descending=filters.scope == EventBrowseScope.PAST,
        )

    async def list_upcoming(self, now: datetime, limit: int) -> list[Event]:
        """Published events that have not ended yet, soonest first."""
        query = (
            select(Event)
            .where(Event.published == True, Event.end_date >= now)  # noqa: E712
            .order_by(col(Event.start_date).asc())
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_registered(self, event_id: UUID) -> int:
        """Count non-cancelled registrations for an event."""
        result = await self.session.execute(
            select(func.count())
            .select_from(Registration)
            .where(
                Registration.event_id == event_id,
                Registration.registration_status == RegistrationStatus.REGISTERED.value,
            )
        )
        return int(result.scalar_one())

    async def count_registered_many(self, event_ids: list[UUID]) -> dict[UUID, int]:
        """Registration counts for several events in one query."""
        if not event_ids:
            return {}
        result = await self.session.execute(
            select(Registration.event_id, func.count())
            .where(
                col(Registration.event_id).in_(event_ids),
                Registration.registration_status == RegistrationStatus.REGISTERED.value,
            )
            .group_by(col(Registration.event_id))
        )
        counts = {event_id: 0 for event_id in event_ids}
        counts.update({event_id: int(count) for event_id, count in result.all()})
        return counts
