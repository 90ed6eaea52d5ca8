"""User account lifecycle - sign-up, approval, suspension, roles.

Normal status transitions::

    PENDING   -> APPROVED   (stamps approved_by / approved_at)
    APPROVED  -> SUSPENDED
    SUSPENDED -> APPROVED   (approval stamp is kept)
    any       -> REJECTED

Anything else needs ``force=True``. Self-action guards run before every other
business rule, and every successful change stages one audit entry.
"""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.actor import Actor
from src.portal.core.config import get_settings
from src.portal.core.logging import get_logger
from src.portal.core.result import (
    Ok,
    Result,
    not_found,
    self_action_forbidden,
    state_conflict,
    validation_error,
)
from src.portal.core.security import generate_temporary_password, hash_password
from src.portal.models import (
    AuditAction,
    AuditEntityType,
    User,
    UserRole,
    UserStatus,
    UserType,
)
from src.portal.models.base import utc_now
from src.portal.repositories import RegistrationRepository, UserRepository
from src.portal.schemas.audit import (
    UserDeleteDetails,
    UserPasswordResetDetails,
    UserRoleChangeDetails,
    UserStatusChangeDetails,
)
from src.portal.schemas.pagination import PaginatedResponse
from src.portal.schemas.user import (
    PasswordResetRead,
    SignUpRequest,
    UserFilters,
    UserRead,
    UserStats,
)
from src.portal.services.audit_service import AuditService
from src.portal.services.base import BaseService, Clock, require_admin, unit_of_work

logger = get_logger(__name__)

NORMAL_TRANSITIONS: frozenset[tuple[UserStatus, UserStatus]] = frozenset(
    {
        (UserStatus.PENDING, UserStatus.APPROVED),
        (UserStatus.APPROVED, UserStatus.SUSPENDED),
        (UserStatus.SUSPENDED, UserStatus.APPROVED),
        (UserStatus.PENDING, UserStatus.REJECTED),
        (UserStatus.APPROVED, UserStatus.REJECTED),
        (UserStatus.SUSPENDED, UserStatus.REJECTED),
    }
)

_ROLE_FOR_USER_TYPE = {
    UserType.OWNER: UserRole.OWNER,
    UserType.TENANT: UserRole.TENANT,
}


def is_normal_transition(current: UserStatus, new: UserStatus) -> bool:
    return (current, new) in NORMAL_TRANSITIONS


class AccountService(BaseService):
    """Account state machine and admin user views."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(session, clock)
        self.user_repo = UserRepository(session)
        self.registration_repo = RegistrationRepository(session)
        self.audit = AuditService(session, clock)

    @unit_of_work
    async def sign_up(self, data: SignUpRequest) -> Result[UserRead]:
        """Create a PENDING account; the role follows the requested user type."""
        if await self.user_repo.exists_by_email(data.email):
            return validation_error("Email already registered")

        now = self.clock()
        user = User(
            name=data.name,
            email=data.email,
            phone_number=data.phone_number,
            hashed_password=hash_password(data.password),
            role=_ROLE_FOR_USER_TYPE.get(data.user_type, UserRole.PUBLIC).value,
            status=UserStatus.PENDING.value,
            user_type=data.user_type.value if data.user_type else None,
            building_name=data.building_name,
            flat_number=data.flat_number,
            floor_number=data.floor_number,
            created_at=now,
            updated_at=now,
        )
        self.user_repo.add(user)
        try:
            await self.session.flush()
        except IntegrityError:
            # Lost a race with a concurrent sign-up for the same email
            return validation_error("Email already registered")

        logger.info("User signed up", user_id=str(user.id), role=user.role)
        return Ok(UserRead.model_validate(user))

    @unit_of_work
    async def update_user_status(
        self,
        actor: Actor,
        user_id: UUID,
        new_status: UserStatus,
        reason: str | None = None,
        force: bool = False,
    ) -> Result[UserRead]:
        """Move an account to ``new_status``.

        Args:
            actor: The admin performing the change
            user_id: Target account
            new_status: Desired status
            reason: Optional note kept in the audit entry
            force: Permit a transition outside the normal lifecycle
        """
        if err := require_admin(actor):
            return err
        if user_id == actor.id and new_status == UserStatus.SUSPENDED:
            return self_action_forbidden("You cannot suspend your own account")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return not_found("User")

        current = UserStatus(user.status)
        if current == new_status:
            return state_conflict(f"User is already {new_status.value}")
        if user.role == UserRole.ADMIN.value and current == UserStatus.APPROVED:
            return state_conflict("Admins must stay approved; change the role first")
        if not force and not is_normal_transition(current, new_status):
            return state_conflict(
                f"Transition {current.value} -> {new_status.value} requires an explicit override"
            )

        now = self.clock()
        user.status = new_status.value
        if current == UserStatus.PENDING and new_status == UserStatus.APPROVED:
            user.approved_by = actor.id
            user.approved_at = now
        elif current == UserStatus.APPROVED and new_status == UserStatus.PENDING:
            # Reverting the approval clears its stamp
            user.approved_by = None
            user.approved_at = None
        user.updated_at = now

        self.audit.append(
            actor.id,
            AuditAction.USER_STATUS_CHANGE,
            AuditEntityType.USER,
            user.id,
            UserStatusChangeDetails(
                previous_status=current,
                new_status=new_status,
                reason=reason,
                forced=force and not is_normal_transition(current, new_status),
            ),
        )
        await self.session.flush()

        logger.info(
            "User status changed",
            user_id=str(user.id),
            previous_status=current.value,
            new_status=new_status.value,
        )
        return Ok(UserRead.model_validate(user))

    async def approve_user(self, actor: Actor, user_id: UUID) -> Result[UserRead]:
        return await self.update_user_status(actor, user_id, UserStatus.APPROVED)

    async def reject_user(
        self, actor: Actor, user_id: UUID, reason: str | None = None
    ) -> Result[UserRead]:
        return await self.update_user_status(actor, user_id, UserStatus.REJECTED, reason=reason)

    async def suspend_user(
        self, actor: Actor, user_id: UUID, reason: str | None = None
    ) -> Result[UserRead]:
        return await self.update_user_status(actor, user_id, UserStatus.SUSPENDED, reason=reason)

    async def reactivate_user(self, actor: Actor, user_id: UUID) -> Result[UserRead]:
        return await self.update_user_status(actor, user_id, UserStatus.APPROVED)

    @unit_of_work
    async def update_user_role(
        self, actor: Actor, user_id: UUID, new_role: UserRole
    ) -> Result[UserRead]:
        if err := require_admin(actor):
            return err
        if user_id == actor.id and new_role != UserRole.ADMIN:
            return self_action_forbidden("You cannot remove your own admin role")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return not_found("User")

        current = UserRole(user.role)
        if current == new_role:
            return state_conflict(f"User already has role {new_role.value}")
        if new_role == UserRole.ADMIN and user.status != UserStatus.APPROVED.value:
            return state_conflict("Only approved users can become admins")

        user.role = new_role.value
        user.updated_at = self.clock()

        self.audit.append(
            actor.id,
            AuditAction.USER_ROLE_CHANGE,
            AuditEntityType.USER,
            user.id,
            UserRoleChangeDetails(previous_role=current, new_role=new_role),
        )
        await self.session.flush()

        logger.info(
            "User role changed",
            user_id=str(user.id),
            previous_role=current.value,
            new_role=new_role.value,
        )
        return Ok(UserRead.model_validate(user))

    @unit_of_work
    async def reset_password(self, actor: Actor, user_id: UUID) -> Result[PasswordResetRead]:
        """Replace the user's password with a random temporary one.

        The plaintext is returned exactly once; only its hash is stored.
        """
        if err := require_admin(actor):
            return err

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return not_found("User")

        temporary_password = generate_temporary_password()
        user.hashed_password = hash_password(temporary_password)
        user.updated_at = self.clock()

        self.audit.append(
            actor.id,
            AuditAction.USER_PASSWORD_RESET,
            AuditEntityType.USER,
            user.id,
            UserPasswordResetDetails(email=user.email),
        )
        await self.session.flush()

        logger.info("User password reset", user_id=str(user.id))
        return Ok(PasswordResetRead(user_id=user.id, temporary_password=temporary_password))

    @unit_of_work
    async def delete_user(self, actor: Actor, user_id: UUID) -> Result[None]:
        """Remove an account that has never registered for anything."""
        if err := require_admin(actor):
            return err
        if user_id == actor.id:
            return self_action_forbidden("You cannot delete your own account")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return not_found("User")
        if await self.registration_repo.count_for_user(user.id) > 0:
            return state_conflict("Cannot delete a user with event registrations")

        self.audit.append(
            actor.id,
            AuditAction.USER_DELETE,
            AuditEntityType.USER,
            user.id,
            UserDeleteDetails(email=user.email, name=user.name),
        )
        await self.user_repo.delete(user)
        await self.session.flush()

        logger.info("User deleted", user_id=str(user_id))
        return Ok(None)

    @unit_of_work
    async def get_user(self, actor: Actor, user_id: UUID) -> Result[UserRead]:
        if err := require_admin(actor):
            return err
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            return not_found("User")
        return Ok(UserRead.model_validate(user))

    @unit_of_work
    async def list_users(
        self,
        actor: Actor,
        filters: UserFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> Result[PaginatedResponse[UserRead]]:
        if err := require_admin(actor):
            return err
        users, next_cursor, has_more = await self.user_repo.list_paginated(
            filters, cursor, limit or get_settings().default_page_size
        )
        return Ok(
            PaginatedResponse[UserRead](
                items=[UserRead.model_validate(user) for user in users],
                next_cursor=next_cursor,
                has_more=has_more,
            )
        )

    async def list_pending_users(
        self, actor: Actor, cursor: str | None = None, limit: int | None = None
    ) -> Result[PaginatedResponse[UserRead]]:
        return await self.list_users(actor, UserFilters(status=UserStatus.PENDING), cursor, limit)

    @unit_of_work
    async def user_stats(self, actor: Actor) -> Result[UserStats]:
        if err := require_admin(actor):
            return err
        by_status = await self.user_repo.count_by_status()
        by_role = await self.user_repo.count_by_role()
        return Ok(
            UserStats(
                total=sum(by_status.values()),
                pending=by_status[UserStatus.PENDING.value],
                approved=by_status[UserStatus.APPROVED.value],
                suspended=by_status[UserStatus.SUSPENDED.value],
                rejected=by_status[UserStatus.REJECTED.value],
                admins=by_role[UserRole.ADMIN.value],
                owners=by_role[UserRole.OWNER.value],
                tenants=by_role[UserRole.TENANT.value],
            )
        )
