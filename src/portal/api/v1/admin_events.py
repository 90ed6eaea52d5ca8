"""Admin event management endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.portal.api.dependencies import (
    CurrentActor,
    EventServiceDep,
    ExportServiceDep,
    RegistrationServiceDep,
)
from src.portal.core.exceptions import unwrap
from src.portal.models import EventType
from src.portal.schemas.event import (
    EventAnalytics,
    EventCancellation,
    EventCancelRequest,
    EventCreate,
    EventFilters,
    EventListState,
    EventRead,
    EventUpdate,
)
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.schemas.registration import EventRegistrationsRead

router = APIRouter(prefix="/admin/events", tags=["admin-events"])

CursorQuery = Annotated[str | None, Query(description="Pagination cursor")]
LimitQuery = Annotated[int | None, Query(ge=1, le=100, description="Items per page")]

_ADMIN = {403: {"description": "Admin access required"}}
_ADMIN_EVENT = {**_ADMIN, 404: {"description": "Event not found"}}


def csv_response(filename: str, content: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post(
    "",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
    responses={**_ADMIN, 422: {"description": "Dates out of order"}},
)
async def create_event(
    data: EventCreate, actor: CurrentActor, event_service: EventServiceDep
) -> EventRead:
    return unwrap(await event_service.create(actor, data))


@router.get("", response_model=PaginatedResponse[EventRead], responses=_ADMIN)
async def list_events(
    actor: CurrentActor,
    event_service: EventServiceDep,
    search: Annotated[str | None, Query(max_length=200)] = None,
    event_type: Annotated[EventType | None, Query()] = None,
    state: Annotated[EventListState | None, Query()] = None,
    cursor: CursorQuery = None,
    limit: LimitQuery = None,
) -> PaginatedResponse[EventRead]:
    """All events, drafts included, latest start date first."""
    filters = EventFilters(search=search, event_type=event_type, state=state)
    return unwrap(await event_service.list_events(actor, filters, cursor, limit))


@router.get("/{event_id}", response_model=EventRead, responses=_ADMIN_EVENT)
async def get_event(
    event_id: UUID, actor: CurrentActor, event_service: EventServiceDep
) -> EventRead:
    return unwrap(await event_service.get_event(actor, event_id))


@router.patch(
    "/{event_id}",
    response_model=EventRead,
    responses={
        **_ADMIN_EVENT,
        409: {"description": "Change would strand existing registrations"},
        422: {"description": "Dates out of order"},
    },
)
async def update_event(
    event_id: UUID,
    data: EventUpdate,
    actor: CurrentActor,
    event_service: EventServiceDep,
) -> EventRead:
    return unwrap(await event_service.update(actor, event_id, data))


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_ADMIN_EVENT, 409: {"description": "Event has registrations"}},
)
async def delete_event(
    event_id: UUID, actor: CurrentActor, event_service: EventServiceDep
) -> Response:
    unwrap(await event_service.delete(actor, event_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{event_id}/close-registration", response_model=EventRead, responses=_ADMIN_EVENT)
async def close_registration(
    event_id: UUID, actor: CurrentActor, event_service: EventServiceDep
) -> EventRead:
    """Close registration immediately. Safe to repeat."""
    return unwrap(await event_service.close_registration(actor, event_id))


@router.post(
    "/{event_id}/cancel",
    response_model=EventCancellation,
    responses={**_ADMIN_EVENT, 409: {"description": "Event already cancelled"}},
)
async def cancel_event(
    event_id: UUID,
    data: EventCancelRequest,
    actor: CurrentActor,
    event_service: EventServiceDep,
) -> EventCancellation:
    """Unpublish and mark the event cancelled; returns who must be notified."""
    return unwrap(await event_service.cancel_event(actor, event_id, data.reason))


@router.get("/{event_id}/analytics", response_model=EventAnalytics, responses=_ADMIN_EVENT)
async def event_analytics(
    event_id: UUID, actor: CurrentActor, event_service: EventServiceDep
) -> EventAnalytics:
    """Registration counts, participants and capacity utilization."""
    return unwrap(await event_service.event_analytics(actor, event_id))


@router.get(
    "/{event_id}/registrations",
    response_model=EventRegistrationsRead,
    responses=_ADMIN_EVENT,
)
async def list_event_registrations(
    event_id: UUID,
    actor: CurrentActor,
    registration_service: RegistrationServiceDep,
) -> EventRegistrationsRead:
    return unwrap(await registration_service.list_event_registrations(actor, event_id))


@router.get(
    "/{event_id}/registrations/export",
    response_class=Response,
    responses={**_ADMIN_EVENT, 200: {"content": {"text/csv": {}}}},
)
async def export_event_registrations(
    event_id: UUID,
    actor: CurrentActor,
    export_service: ExportServiceDep,
) -> Response:
    export = unwrap(await export_service.export_event_registrations(actor, event_id))
    return csv_response(export.filename, export.content)
