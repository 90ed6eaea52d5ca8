"""Audit logging service - the append-only trail of administrative mutations."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.actor import Actor
from src.portal.core.audit_context import get_audit_context
from src.portal.core.config import get_settings
from src.portal.core.logging import get_logger
from src.portal.core.result import Ok, Result
from src.portal.models import AuditAction, AuditEntityType, AuditLog
from src.portal.models.base import utc_now
from src.portal.repositories import AuditLogRepository
from src.portal.schemas.audit import AuditDetails, AuditLogListResponse, AuditLogRead
from src.portal.services.base import BaseService, Clock, require_admin, unit_of_work

logger = get_logger(__name__)


class AuditService(BaseService):
    """Records and queries audit entries.

    ``append`` only stages the entry in the caller's session: it commits or
    rolls back together with the mutation it describes, so a change is never
    persisted without its entry and vice versa.
    """

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(session, clock)
        self.audit_repo = AuditLogRepository(self.session)

    def append(
        self,
        actor_id: UUID,
        action: AuditAction,
        entity_type: AuditEntityType,
        entity_id: UUID,
        details: AuditDetails,
    ) -> AuditLog:
        """Stage one audit entry, stamped with the current request metadata.

        Args:
            actor_id: Who performed the action
            action: The action tag; must match ``details.kind``
            entity_type: Kind of entity affected
            entity_id: ID of the affected entity
            details: The per-action record

        Returns:
            The staged (unflushed) AuditLog
        """
        if details.kind != action.value:
            raise ValueError(f"Details of kind {details.kind!r} do not match action {action.value!r}")

        ctx = get_audit_context()
        entry = AuditLog(
            actor_id=actor_id,
            action=action.value,
            entity_type=entity_type.value,
            entity_id=entity_id,
            details=details.model_dump(mode="json"),
            ip_address=ctx.ip_address if ctx else None,
            request_id=ctx.request_id if ctx else None,
        )
        self.audit_repo.add(entry)

        logger.debug(
            "Audit log staged",
            action=entry.action,
            entity_type=entry.entity_type,
            entity_id=str(entity_id),
        )
        return entry

    @unit_of_work
    async def query_by_entity(
        self,
        actor: Actor,
        entity_type: AuditEntityType,
        entity_id: UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Result[AuditLogListResponse]:
        """History of one entity, newest first. Admin only."""
        if err := require_admin(actor):
            return err
        logs, next_cursor, has_more = await self.audit_repo.list_by_entity(
            entity_type=entity_type.value,
            entity_id=entity_id,
            cursor=cursor,
            limit=limit or get_settings().default_page_size,
        )
        return Ok(_to_page(logs, next_cursor, has_more))

    @unit_of_work
    async def query_by_actor(
        self,
        actor: Actor,
        actor_id: UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Result[AuditLogListResponse]:
        """Everything one actor has done, newest first. Admin only."""
        if err := require_admin(actor):
            return err
        logs, next_cursor, has_more = await self.audit_repo.list_by_actor(
            actor_id=actor_id,
            cursor=cursor,
            limit=limit or get_settings().default_page_size,
        )
        return Ok(_to_page(logs, next_cursor, has_more))


def _to_page(logs: list[AuditLog], next_cursor: str | None, has_more: bool) -> AuditLogListResponse:
    return AuditLogListResponse(
        items=[AuditLogRead.model_validate(log) for log in logs],
        next_cursor=next_cursor,
        has_more=has_more,
    )
