"""A resident's own registrations."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.portal.api.dependencies import CurrentActor, RegistrationServiceDep
from src.portal.core.exceptions import unwrap
from src.portal.schemas.registration import MyRegistrationFilter, MyRegistrationRead

router = APIRouter(prefix="/registrations", tags=["registrations"])


@router.get("/me", response_model=list[MyRegistrationRead])
async def list_my_registrations(
    actor: CurrentActor,
    registration_service: RegistrationServiceDep,
    filter: Annotated[
        MyRegistrationFilter, Query(description="UPCOMING, PAST or ALL")
    ] = MyRegistrationFilter.UPCOMING,
) -> list[MyRegistrationRead]:
    return unwrap(await registration_service.list_my_registrations(actor, filter))


@router.delete(
    "/{registration_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Registration not found or not yours"},
        409: {"description": "Event already started (kind: event_already_started)"},
    },
)
async def cancel_registration(
    registration_id: UUID,
    actor: CurrentActor,
    registration_service: RegistrationServiceDep,
) -> Response:
    unwrap(await registration_service.cancel(actor, registration_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
