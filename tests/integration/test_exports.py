"""Integration tests for the CSV exports."""

import csv
import io

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.result import ErrorKind
from src.portal.models import UserStatus
from src.portal.schemas.user import UserFilters
from src.portal.services import ExportService
from tests.factories import EventFactory, RegistrationFactory, UserFactory, days_from_base
from tests.helpers import FrozenClock, actor_for, assert_err, assert_ok, persist

pytestmark = pytest.mark.integration


@pytest.fixture
def service(service_session: AsyncSession, clock: FrozenClock) -> ExportService:
    return ExportService(service_session, clock)


def parse(content: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(content)))


class TestRegistrationExport:
    async def test_team_event_export(self, service, db_session, admin):
        event = EventFactory.team(title="Cricket Cup 2026")
        alice = UserFactory.build(name="Alice", email="alice@example.com", phone_number=None)
        bob = UserFactory.build(name='Bob "The Bat"', email="bob@example.com")
        await persist(db_session, event, alice, bob)
        await persist(
            db_session,
            RegistrationFactory.build(
                event_id=event.id,
                user_id=bob.id,
                registered_at=days_from_base(-1),
                team_members=[{"name": "B1", "email": None, "phone": None}],
                additional_notes="Bring, bats",
            ),
            RegistrationFactory.build(
                event_id=event.id,
                user_id=alice.id,
                registered_at=days_from_base(-2),
                team_members=[
                    {"name": "A1", "email": None, "phone": None},
                    {"name": "A2", "email": None, "phone": None},
                ],
            ),
        )

        export = assert_ok(await service.export_event_registrations(actor_for(admin), event.id))

        assert export.filename == "Cricket_Cup_2026_registrations.csv"
        lines = export.content.split("\n")
        assert len(lines) == 3
        assert lines[0].startswith('"S.No","Name","Email"')
        assert lines[0].endswith('"Team Members","Notes"')
        rows = parse(export.content)
        assert [row[1] for row in rows[1:]] == ["Alice", 'Bob "The Bat"']
        assert rows[1][3] == ""
        assert rows[1][-2] == "A1; A2"
        assert rows[2][-1] == "Bring, bats"
        assert '"Bob ""The Bat"""' in export.content

    async def test_empty_export_is_header_only(self, service, admin, open_event):
        export = assert_ok(
            await service.export_event_registrations(actor_for(admin), open_event.id)
        )
        assert export.content.count("\n") == 0
        assert "Team Members" not in export.content

    async def test_admin_only(self, service, resident, open_event):
        assert_err(
            await service.export_event_registrations(actor_for(resident), open_event.id),
            ErrorKind.UNAUTHORIZED,
        )

    async def test_unknown_event(self, service, admin):
        assert_err(
            await service.export_event_registrations(actor_for(admin), EventFactory.build().id),
            ErrorKind.NOT_FOUND,
        )


class TestUserExport:
    async def test_filtered_user_export(self, service, db_session, admin, resident, clock):
        await persist(db_session, UserFactory.pending(name="Waiting", email="wait@example.com"))

        export = assert_ok(
            await service.export_users(actor_for(admin), UserFilters(status=UserStatus.PENDING))
        )

        assert export.filename == "users_export_2026-03-01.csv"
        rows = parse(export.content)
        assert rows[0][0:2] == ["Name", "Email"]
        assert [row[1] for row in rows[1:]] == ["wait@example.com"]
        assert rows[1][-1] == ""

    async def test_all_users(self, service, admin, resident):
        export = assert_ok(await service.export_users(actor_for(admin)))
        assert len(export.content.split("\n")) == 3
