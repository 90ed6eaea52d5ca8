"""Shared service plumbing: the transaction boundary and actor checks."""

import contextlib
from collections.abc import Awaitable, Callable
from datetime import datetime
from functools import wraps
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.actor import Actor
from src.portal.core.logging import get_logger
from src.portal.core.result import INTERNAL_ERROR, Err, Result, unauthorized
from src.portal.models.base import utc_now

logger = get_logger(__name__)

type Clock = Callable[[], datetime]


class BaseService:
    """Holds the request's session and the clock used for every time check."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        self.session = session
        self.clock = clock


def unit_of_work[**P, T](
    func: Callable[P, Awaitable[Result[T]]],
) -> Callable[P, Awaitable[Result[T]]]:
    """Run a service operation as one all-or-nothing transaction.

    ``Ok`` commits. ``Err`` rolls back whatever the operation staged. Any
    exception is logged, rolled back and reported as ``internal`` so storage
    details never cross the service boundary.
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        service: Any = args[0]
        session: AsyncSession = service.session
        try:
            result = await func(*args, **kwargs)
            if isinstance(result, Err):
                await session.rollback()
            else:
                await session.commit()
            return result
        except Exception:
            logger.exception("Service operation failed", operation=func.__qualname__)
            # Connection may already be unusable.
            with contextlib.suppress(Exception):
                await session.rollback()
            return INTERNAL_ERROR

    return wrapper


def require_admin(actor: Actor) -> Err | None:
    """Return an ``unauthorized`` error unless the actor is an admin."""
    if not actor.is_admin:
        return unauthorized()
    return None
