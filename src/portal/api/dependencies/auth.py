"""Acting identity dependencies.

Authentication happens upstream. The gateway forwards the authenticated
user's id and role in ``X-Actor-Id`` and ``X-Actor-Role``; this module only
parses them into an ``Actor``. Authorization decisions stay in the services.
"""

from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.portal.core.actor import Actor
from src.portal.core.logging import bind_actor_context
from src.portal.models import UserRole


async def get_current_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    if not x_actor_id or not x_actor_role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing actor identity headers",
        )

    try:
        actor_id = UUID(x_actor_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid actor id",
        ) from e

    try:
        role = UserRole(x_actor_role.upper())
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid actor role",
        ) from e

    bind_actor_context(actor_id, role.value)
    return Actor(id=actor_id, role=role)


CurrentActor = Annotated[Actor, Depends(get_current_actor)]
