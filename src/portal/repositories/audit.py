"""Repository for AuditLog entity.

Append and read only. The model itself refuses updates and deletes.
"""

from uuid import UUID

from sqlmodel import select

from src.portal.models import AuditLog
from src.portal.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Repository for AuditLog entity."""

    model = AuditLog

    async def list_by_actor(
        self,
        actor_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[AuditLog], str | None, bool]:
        """List audit logs recorded for actions by a specific actor.

        Args:
            actor_id: Actor to filter by
            cursor: Pagination cursor
            limit: Maximum items to return

        Returns:
            Tuple of (logs, next_cursor, has_more)
        """
        query = select(AuditLog).where(AuditLog.actor_id == actor_id)
        return await self.paginate(query, cursor, limit, AuditLog.created_at)

    async def list_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
        cursor: str | None = None,
        limit: int = 50,
    ) -> tuple[list[AuditLog], str | None, bool]:
        """List audit logs for a specific entity.

        Args:
            entity_type: Type of entity (e.g., "user", "event")
            entity_id: ID of the entity
            cursor: Pagination cursor
            limit: Maximum items to return

        Returns:
            Tuple of (logs, next_cursor, has_more)
        """
        query = select(AuditLog).where(
            AuditLog.entity_type == entity_type,
            AuditLog.entity_id == entity_id,
        )
        return await self.paginate(query, cursor, limit, AuditLog.created_at)
