"""Audit log endpoints - admin only."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query

from src.portal.api.dependencies import AuditServiceDep, CurrentActor
from src.portal.core.exceptions import unwrap
from src.portal.models import AuditEntityType
from src.portal.schemas.audit import AuditLogListResponse

router = APIRouter(prefix="/audit", tags=["audit"])

CursorQuery = Annotated[str | None, Query(description="Pagination cursor")]
LimitQuery = Annotated[int | None, Query(ge=1, le=100, description="Items per page")]

_EXAMPLE_PAGE = {
    "items": [
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "actor_id": "550e8400-e29b-41d4-a716-446655440001",
            "action": "user.status_change",
            "entity_type": "user",
            "entity_id": "550e8400-e29b-41d4-a716-446655440002",
            "details": {
                "kind": "user.status_change",
                "previous_status": "PENDING",
                "new_status": "APPROVED",
                "reason": None,
                "forced": False,
            },
            "ip_address": "192.168.1.1",
            "request_id": "abc-123",
            "created_at": "2026-01-01T00:00:00",
        }
    ],
    "next_cursor": "abc123",
    "has_more": True,
}


@router.get(
    "/entity/{entity_type}/{entity_id}",
    response_model=AuditLogListResponse,
    responses={
        200: {
            "description": "Audit history for one entity",
            "content": {"application/json": {"example": _EXAMPLE_PAGE}},
        },
        403: {"description": "Admin access required"},
    },
)
async def get_entity_history(
    entity_type: AuditEntityType,
    entity_id: UUID,
    actor: CurrentActor,
    audit_service: AuditServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = None,
) -> AuditLogListResponse:
    """Audit history for a user or an event, newest first."""
    return unwrap(
        await audit_service.query_by_entity(actor, entity_type, entity_id, cursor, limit)
    )


@router.get(
    "/actor/{actor_id}",
    response_model=AuditLogListResponse,
    responses={403: {"description": "Admin access required"}},
)
async def get_actor_history(
    actor_id: UUID,
    actor: CurrentActor,
    audit_service: AuditServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = None,
) -> AuditLogListResponse:
    """Every audited action taken by one admin."""
    return unwrap(await audit_service.query_by_actor(actor, actor_id, cursor, limit))
