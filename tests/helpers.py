"""Test helper functions for common data creation patterns."""

from datetime import datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from src.portal.core.actor import Actor
from src.portal.core.result import Err, ErrorKind, Ok, Result
from src.portal.models import User, UserRole


class FrozenClock:
    """Callable clock for services; time only moves when a test says so."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


def actor_for(user: User) -> Actor:
    """Build the acting identity for a stored user."""
    return Actor(id=user.id, role=UserRole(user.role))


def actor_headers(user: User) -> dict[str, str]:
    """Identity headers the upstream gateway would forward for ``user``."""
    return {"X-Actor-Id": str(user.id), "X-Actor-Role": user.role}


async def persist(session: AsyncSession, *entities: SQLModel) -> None:
    """Add and commit entities in order."""
    for entity in entities:
        session.add(entity)
        await session.flush()
    await session.commit()


def assert_ok[T](result: Result[T]) -> T:
    assert isinstance(result, Ok), f"expected Ok, got {result}"
    return result.value


def assert_err(result: Result, kind: ErrorKind) -> Err:
    assert isinstance(result, Err), f"expected {kind.value}, got {result}"
    assert result.kind == kind, f"expected {kind.value}, got {result}"
    return result


async def read(session: AsyncSession, statement: Any) -> list[Any]:
    """Run a SELECT and end the transaction so no lock is held."""
    session.expire_all()
    result = await session.execute(statement)
    rows = list(result.scalars().all())
    await session.commit()
    return rows


async def scalar(session: AsyncSession, statement: Any) -> Any:
    """Run a single-value SELECT and end the transaction."""
    session.expire_all()
    result = await session.execute(statement)
    value = result.scalar_one_or_none()
    await session.commit()
    return value
