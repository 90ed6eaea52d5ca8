"""CSV exports of event registrations and users.

Output is deterministic: a header row, one row per record, every field
double-quoted with embedded quotes doubled, rows joined by ``\\n`` and no
trailing newline. Line breaks inside a field are folded to a single space, so
an export of N records is always N + 1 lines. Exports only read.
"""

import csv
import io
import re
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.portal.core.actor import Actor
from src.portal.core.logging import get_logger
from src.portal.core.result import Ok, Result, not_found
from src.portal.models import Event, ParticipationType, Registration, User
from src.portal.models.base import utc_now
from src.portal.repositories import EventRepository, RegistrationRepository, UserRepository
from src.portal.schemas.export import CsvExport
from src.portal.schemas.user import UserFilters
from src.portal.services.base import BaseService, Clock, require_admin, unit_of_work

logger = get_logger(__name__)

REGISTRATION_COLUMNS = [
    "S.No",
    "Name",
    "Email",
    "Phone",
    "Building",
    "Flat",
    "Registered At",
    "Status",
]
TEAM_MEMBERS_COLUMN = "Team Members"
NOTES_COLUMN = "Notes"

USER_COLUMNS = [
    "Name",
    "Email",
    "Phone",
    "Role",
    "Status",
    "User Type",
    "Building",
    "Flat",
    "Floor",
    "Registered On",
    "Approved On",
]


_LINE_BREAKS = re.compile(r"[\r\n]+")


def _field(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, str):
        return _LINE_BREAKS.sub(" ", value)
    return value


def to_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """Render rows as fully quoted CSV. ``None`` becomes an empty field."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_field(value) for value in row])
    return buffer.getvalue().removesuffix("\n")


def _date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else ""


def _timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def safe_filename(title: str) -> str:
    """Replace anything outside [A-Za-z0-9] with ``_``."""
    return re.sub(r"[^a-zA-Z0-9]", "_", title)


def registration_rows(
    event: Event, rows: list[tuple[Registration, User]]
) -> tuple[list[str], list[list[Any]]]:
    is_team = event.participation_type == ParticipationType.TEAM.value
    header = [*REGISTRATION_COLUMNS]
    if is_team:
        header.append(TEAM_MEMBERS_COLUMN)
    header.append(NOTES_COLUMN)

    body = []
    for index, (registration, user) in enumerate(rows, start=1):
        row: list[Any] = [
            index,
            user.name,
            user.email,
            user.phone_number,
            user.building_name,
            user.flat_number,
            _timestamp(registration.registered_at),
            registration.registration_status,
        ]
        if is_team:
            row.append("; ".join(member.get("name", "") for member in registration.team_members))
        row.append(registration.additional_notes)
        body.append(row)
    return header, body


def user_rows(users: list[User]) -> list[list[Any]]:
    return [
        [
            user.name,
            user.email,
            user.phone_number,
            user.role,
            user.status,
            user.user_type,
            user.building_name,
            user.flat_number,
            user.floor_number,
            _date(user.created_at),
            _date(user.approved_at),
        ]
        for user in users
    ]


class ExportService(BaseService):
    """Admin CSV exports."""

    def __init__(self, session: AsyncSession, clock: Clock = utc_now):
        super().__init__(session, clock)
        self.event_repo = EventRepository(session)
        self.registration_repo = RegistrationRepository(session)
        self.user_repo = UserRepository(session)

    @unit_of_work
    async def export_event_registrations(self, actor: Actor, event_id: UUID) -> Result[CsvExport]:
        if err := require_admin(actor):
            return err
        event = await self.event_repo.get_by_id(event_id)
        if event is None:
            return not_found("Event")

        rows = await self.registration_repo.list_for_event_with_users(event.id)
        header, body = registration_rows(event, rows)
        logger.info("Registrations exported", event_id=str(event.id), row_count=len(body))
        return Ok(
            CsvExport(
                filename=f"{safe_filename(event.title)}_registrations.csv",
                content=to_csv(header, body),
            )
        )

    @unit_of_work
    async def export_users(
        self, actor: Actor, filters: UserFilters | None = None
    ) -> Result[CsvExport]:
        if err := require_admin(actor):
            return err
        users = await self.user_repo.list_all(filters or UserFilters())
        logger.info("Users exported", row_count=len(users))
        return Ok(
            CsvExport(
                filename=f"users_export_{_date(self.clock())}.csv",
                content=to_csv(USER_COLUMNS, user_rows(users)),
            )
        )
