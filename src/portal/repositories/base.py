"""Base repository with common CRUD operations."""

from typing import Any
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from src.portal.schemas.pagination import decode_cursor, encode_cursor


class BaseRepository[ModelType: SQLModel]:
    """Base repository providing common database operations.

    Repositories handle data access only. Transaction control (commit)
    should be done in the service layer.
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Get a record by its primary key."""
        result = await self.session.execute(
            select(self.model).where(self.model.id == id)  # type: ignore[attr-defined]
        )
        return result.scalar_one_or_none()

    def add(self, entity: ModelType) -> None:
        """Add entity to session (no flush/commit)."""
        self.session.add(entity)

    async def delete(self, entity: ModelType) -> None:
        """Mark entity for deletion (no commit)."""
        await self.session.delete(entity)

    async def paginate(
        self,
        query: Any,
        cursor: str | None,
        limit: int,
        sort_field: Any,
        *,
        descending: bool = True,
    ) -> tuple[list[ModelType], str | None, bool]:
        """Run ``query`` one keyset page at a time.

        Rows are ordered by ``sort_field`` then ``id`` in the same direction,
        and a cursor resumes strictly after the ``(value, id)`` pair it holds.
        Rows sharing a sort value are neither skipped nor repeated. An
        unreadable cursor starts from the first page.

        Returns:
            Tuple of (items, next_cursor, has_more)
        """
        id_field = self.model.id  # type: ignore[attr-defined]

        if cursor:
            try:
                after_value, after_id = decode_cursor(cursor)
            except ValueError:
                pass
            else:
                if descending:
                    query = query.where(
                        or_(
                            sort_field < after_value,
                            and_(sort_field == after_value, id_field < after_id),
                        )
                    )
                else:
                    query = query.where(
                        or_(
                            sort_field > after_value,
                            and_(sort_field == after_value, id_field > after_id),
                        )
                    )

        if descending:
            query = query.order_by(sort_field.desc(), id_field.desc())
        else:
            query = query.order_by(sort_field.asc(), id_field.asc())

        # One extra row tells whether another page exists
        result = await self.session.execute(query.limit(limit + 1))
        items = list(result.scalars().all())

        has_more = len(items) > limit
        items = items[:limit]

        next_cursor = None
        if has_more:
            last = items[-1]
            next_cursor = encode_cursor(getattr(last, sort_field.key), last.id)  # type: ignore[attr-defined]

        return items, next_cursor, has_more
