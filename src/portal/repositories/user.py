"""Repository for User entity."""

from typing import Any

from sqlalchemy import func, or_
from sqlmodel import col, select

from src.portal.models import User, UserRole, UserStatus
from src.portal.repositories.base import BaseRepository
from src.portal.schemas.user import UserFilters


class UserRepository(BaseRepository[User]):
    """Repository for User entity."""

    model = User

    async def get_by_email(self, email: str) -> User | None:
        """Get user by email address."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str) -> bool:
        """Check if a user with the given email exists."""
        user = await self.get_by_email(email)
        return user is not None

    def _filtered_query(self, filters: UserFilters) -> Any:
        query = select(User)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(
                    col(User.name).ilike(pattern),
                    col(User.email).ilike(pattern),
                    col(User.phone_number).ilike(pattern),
                    col(User.flat_number).ilike(pattern),
                )
            )
        if filters.role:
            query = query.where(User.role == filters.role.value)
        if filters.status:
            query = query.where(User.status == filters.status.value)
        if filters.building_name:
            query = query.where(User.building_name == filters.building_name)
        return query

    async def list_paginated(
        self, filters: UserFilters, cursor: str | None, limit: int
    ) -> tuple[list[User], str | None, bool]:
        """List users newest first with cursor pagination."""
        return await self.paginate(self._filtered_query(filters), cursor, limit, User.created_at)

    async def list_all(self, filters: UserFilters) -> list[User]:
        """List every matching user, newest first (used by exports)."""
        query = self._filtered_query(filters).order_by(
            col(User.created_at).desc(), col(User.id).asc()
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_by_status(self) -> dict[str, int]:
        result = await self.session.execute(
            select(User.status, func.count()).group_by(col(User.status))
        )
        counts = {status.value: 0 for status in UserStatus}
        counts.update({status: int(count) for status, count in result.all()})
        return counts

    async def count_by_role(self) -> dict[str, int]:
        result = await self.session.execute(
            select(User.role, func.count()).group_by(col(User.role))
        )
        counts = {role.value: 0 for role in UserRole}
        counts.update({role: int(count) for role, count in result.all()})
        return counts
