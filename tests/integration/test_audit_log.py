"""Integration tests for the append-only audit log."""

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.audit_context import set_audit_context
from src.portal.core.result import ErrorKind
from src.portal.models import AuditAction, AuditEntityType, AuditLog, AuditLogImmutableError
from src.portal.schemas.audit import EventCancelDetails, UserStatusChangeDetails
from src.portal.services import AccountService, AuditService, EventService
from tests.factories import UserFactory
from tests.helpers import FrozenClock, actor_for, assert_err, assert_ok, persist, read

pytestmark = pytest.mark.integration


@pytest.fixture
async def applicant_id(db_session: AsyncSession):
    user = UserFactory.pending()
    await persist(db_session, user)
    return user.id


@pytest.fixture
def audit_service(service_session: AsyncSession, clock: FrozenClock) -> AuditService:
    return AuditService(service_session, clock)


class TestAppend:
    async def test_entry_stamped_with_request_metadata(
        self, service_session, admin, applicant_id, clock, fresh_session
    ):
        set_audit_context(ip_address="203.0.113.7", request_id="req-42")
        accounts = AccountService(service_session, clock)

        assert_ok(await accounts.approve_user(actor_for(admin), applicant_id))

        (entry,) = await read(fresh_session, select(AuditLog))
        assert entry.ip_address == "203.0.113.7"
        assert entry.request_id == "req-42"
        assert entry.entity_type == "user"
        assert entry.entity_id == applicant_id

    async def test_rejected_action_leaves_no_entry(
        self, service_session, admin, open_event, clock, fresh_session
    ):
        events = EventService(service_session, clock)
        assert_ok(await events.cancel_event(actor_for(admin), open_event.id))

        assert_err(
            await events.cancel_event(actor_for(admin), open_event.id), ErrorKind.STATE_CONFLICT
        )
        entries = await read(fresh_session, select(AuditLog))
        assert [entry.action for entry in entries] == ["event.cancel"]

    async def test_staged_entry_rolls_back_with_session(
        self, audit_service, service_session, admin, fresh_session
    ):
        audit_service.append(
            admin.id,
            AuditAction.USER_STATUS_CHANGE,
            AuditEntityType.USER,
            admin.id,
            UserStatusChangeDetails(previous_status="PENDING", new_status="APPROVED"),
        )
        await service_session.flush()
        await service_session.rollback()

        assert await read(fresh_session, select(AuditLog)) == []


class TestImmutability:
    async def _stored_entry(self, session: AsyncSession, admin) -> AuditLog:
        service = AuditService(session)
        entry = service.append(
            admin.id,
            AuditAction.EVENT_CANCEL,
            AuditEntityType.EVENT,
            admin.id,
            EventCancelDetails(reason="Rain", affected_count=0),
        )
        await session.commit()
        return entry

    async def test_update_refused(self, service_session, admin):
        entry = await self._stored_entry(service_session, admin)
        entry.ip_address = "198.51.100.1"
        with pytest.raises(AuditLogImmutableError):
            await service_session.flush()
        await service_session.rollback()

    async def test_delete_refused(self, service_session, admin):
        entry = await self._stored_entry(service_session, admin)
        await service_session.delete(entry)
        with pytest.raises(AuditLogImmutableError):
            await service_session.flush()
        await service_session.rollback()


class TestQueries:
    async def test_by_entity_and_actor(
        self, service_session, admin, applicant_id, open_event, clock, audit_service
    ):
        actor = actor_for(admin)
        accounts = AccountService(service_session, clock)
        events = EventService(service_session, clock)
        assert_ok(await accounts.approve_user(actor, applicant_id))
        assert_ok(await accounts.suspend_user(actor, applicant_id))
        assert_ok(await events.close_registration(actor, open_event.id))

        history = assert_ok(
            await audit_service.query_by_entity(actor, AuditEntityType.USER, applicant_id)
        )
        assert [entry.details.kind for entry in history.items] == [
            "user.status_change",
            "user.status_change",
        ]
        assert history.items[0].details.new_status == "SUSPENDED"

        by_actor = assert_ok(await audit_service.query_by_actor(actor, admin.id, limit=2))
        assert len(by_actor.items) == 2
        assert by_actor.has_more is True
        assert by_actor.items[0].action == "event.registration_close"

        rest = assert_ok(
            await audit_service.query_by_actor(actor, admin.id, cursor=by_actor.next_cursor)
        )
        assert len(rest.items) == 1
        assert rest.has_more is False

    async def test_admin_only(self, audit_service, resident):
        assert_err(
            await audit_service.query_by_actor(actor_for(resident), resident.id),
            ErrorKind.UNAUTHORIZED,
        )
