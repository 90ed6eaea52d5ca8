"""Admin user management endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from src.portal.api.dependencies import AccountServiceDep, CurrentActor, ExportServiceDep
from src.portal.api.v1.admin_events import csv_response
from src.portal.core.exceptions import unwrap
from src.portal.models import UserRole, UserStatus
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.schemas.user import (
    PasswordResetRead,
    RoleChangeRequest,
    StatusChangeRequest,
    UserFilters,
    UserRead,
    UserStats,
)

router = APIRouter(prefix="/admin/users", tags=["admin-users"])

_ADMIN = {403: {"description": "Admin access required"}}
_ADMIN_USER = {**_ADMIN, 404: {"description": "User not found"}}


def get_user_filters(
    search: Annotated[str | None, Query(max_length=100)] = None,
    role: Annotated[UserRole | None, Query()] = None,
    user_status: Annotated[UserStatus | None, Query(alias="status")] = None,
    building_name: Annotated[str | None, Query(max_length=100)] = None,
) -> UserFilters:
    return UserFilters(search=search, role=role, status=user_status, building_name=building_name)


UserFiltersDep = Annotated[UserFilters, Depends(get_user_filters)]


@router.get("", response_model=PaginatedResponse[UserRead], responses=_ADMIN)
async def list_users(
    actor: CurrentActor,
    account_service: AccountServiceDep,
    filters: UserFiltersDep,
    cursor: Annotated[str | None, Query(description="Pagination cursor")] = None,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
) -> PaginatedResponse[UserRead]:
    return unwrap(await account_service.list_users(actor, filters, cursor, limit))


@router.get("/stats", response_model=UserStats, responses=_ADMIN)
async def user_stats(actor: CurrentActor, account_service: AccountServiceDep) -> UserStats:
    return unwrap(await account_service.user_stats(actor))


@router.get(
    "/export",
    response_class=Response,
    responses={**_ADMIN, 200: {"content": {"text/csv": {}}}},
)
async def export_users(
    actor: CurrentActor,
    export_service: ExportServiceDep,
    filters: UserFiltersDep,
) -> Response:
    export = unwrap(await export_service.export_users(actor, filters))
    return csv_response(export.filename, export.content)


@router.get("/{user_id}", response_model=UserRead, responses=_ADMIN_USER)
async def get_user(
    user_id: UUID, actor: CurrentActor, account_service: AccountServiceDep
) -> UserRead:
    return unwrap(await account_service.get_user(actor, user_id))


@router.patch(
    "/{user_id}/status",
    response_model=UserRead,
    responses={
        **_ADMIN_USER,
        403: {"description": "Admin access required, or self-suspension"},
        409: {"description": "Transition not allowed"},
    },
)
async def update_user_status(
    user_id: UUID,
    data: StatusChangeRequest,
    actor: CurrentActor,
    account_service: AccountServiceDep,
) -> UserRead:
    return unwrap(
        await account_service.update_user_status(
            actor, user_id, data.status, reason=data.reason, force=data.force
        )
    )


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    responses={
        **_ADMIN_USER,
        403: {"description": "Admin access required, or self-demotion"},
        409: {"description": "Role change not allowed for the user's status"},
    },
)
async def update_user_role(
    user_id: UUID,
    data: RoleChangeRequest,
    actor: CurrentActor,
    account_service: AccountServiceDep,
) -> UserRead:
    return unwrap(await account_service.update_user_role(actor, user_id, data.role))


@router.post("/{user_id}/reset-password", response_model=PasswordResetRead, responses=_ADMIN_USER)
async def reset_password(
    user_id: UUID, actor: CurrentActor, account_service: AccountServiceDep
) -> PasswordResetRead:
    """Issue a temporary password. It is shown only in this response."""
    return unwrap(await account_service.reset_password(actor, user_id))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_ADMIN_USER, 409: {"description": "User has registrations"}},
)
async def delete_user(
    user_id: UUID, actor: CurrentActor, account_service: AccountServiceDep
) -> Response:
    unwrap(await account_service.delete_user(actor, user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
