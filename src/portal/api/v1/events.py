"""Resident-facing event endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.portal.api.dependencies import CurrentActor, EventServiceDep, RegistrationServiceDep
from src.portal.core.exceptions import unwrap
from src.portal.models import EventType
from src.portal.schemas.event import (
    BrowsedEventRead,
    EventBrowseFilters,
    EventBrowseScope,
    EventRead,
)
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.schemas.registration import RegistrationCreate, RegistrationRead

router = APIRouter(prefix="/events", tags=["events"])

_ERROR_RESPONSES: dict[int | str, dict[str, str]] = {
    401: {"description": "Missing or invalid actor headers"},
    404: {"description": "Event not found or not published"},
}


@router.get("", response_model=list[EventRead])
async def list_upcoming_events(
    _actor: CurrentActor,
    event_service: EventServiceDep,
    limit: Annotated[int | None, Query(ge=1, le=100, description="Maximum events")] = None,
) -> list[EventRead]:
    """Published events that have not ended yet, soonest first."""
    return unwrap(await event_service.list_upcoming_events(limit))


@router.get("/browse", response_model=PaginatedResponse[BrowsedEventRead])
async def browse_events(
    actor: CurrentActor,
    event_service: EventServiceDep,
    scope: Annotated[EventBrowseScope, Query()] = EventBrowseScope.UPCOMING,
    event_type: Annotated[EventType | None, Query()] = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    limit: Annotated[int | None, Query(ge=1, le=100, description="Items per page")] = None,
) -> PaginatedResponse[BrowsedEventRead]:
    """Published events with the caller's own registration flagged on each.

    PAST lists most recent first; the other scopes list soonest first.
    """
    filters = EventBrowseFilters(scope=scope, event_type=event_type, search=search)
    return unwrap(await event_service.browse_events(actor, filters, cursor, limit))


@router.get("/{event_id}", response_model=EventRead, responses=_ERROR_RESPONSES)
async def get_event(
    event_id: UUID,
    _actor: CurrentActor,
    event_service: EventServiceDep,
) -> EventRead:
    return unwrap(await event_service.get_published_event(event_id))


@router.post(
    "/{event_id}/registrations",
    response_model=RegistrationRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        **_ERROR_RESPONSES,
        409: {
            "description": (
                "Registration not open, already registered, or event at capacity "
                "(kind: not_open, already_registered, capacity_exceeded)"
            )
        },
        422: {"description": "Team details missing for a team event"},
    },
)
async def register_for_event(
    event_id: UUID,
    data: RegistrationCreate,
    actor: CurrentActor,
    registration_service: RegistrationServiceDep,
) -> RegistrationRead:
    """Register the calling resident for an event."""
    return unwrap(await registration_service.register(actor, event_id, data))
