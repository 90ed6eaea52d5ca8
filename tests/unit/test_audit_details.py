"""Unit tests for the per-action audit detail records."""

from typing import get_args
from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.portal.models import AuditAction, AuditEntityType, AuditLog
from src.portal.schemas.audit import (
    AuditDetails,
    AuditLogRead,
    EventCancelDetails,
    EventUpdateDetails,
    UserStatusChangeDetails,
    audit_details_adapter,
)
from src.portal.services.audit_service import AuditService

pytestmark = pytest.mark.unit


class TestDetailRecords:
    def test_every_action_has_exactly_one_record(self):
        union, _discriminator = get_args(AuditDetails)
        kinds = [model.model_fields["kind"].default for model in get_args(union)]
        assert sorted(kinds) == sorted(action.value for action in AuditAction)

    def test_round_trips_through_discriminator(self):
        details = UserStatusChangeDetails(previous_status="PENDING", new_status="APPROVED")
        parsed = audit_details_adapter.validate_python(details.model_dump(mode="json"))
        assert isinstance(parsed, UserStatusChangeDetails)
        assert parsed.model_dump() == details.model_dump()

    def test_unknown_keys_rejected(self):
        with pytest.raises(ValidationError):
            EventUpdateDetails(changed_fields=["title"], secret="x")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            audit_details_adapter.validate_python({"kind": "user.login"})

    def test_records_are_frozen(self):
        details = EventCancelDetails(reason=None, affected_count=2)
        with pytest.raises(ValidationError):
            details.affected_count = 3

    def test_read_model_parses_stored_json(self):
        log = AuditLog(
            id=uuid4(),
            actor_id=uuid4(),
            action=AuditAction.EVENT_CANCEL.value,
            entity_type=AuditEntityType.EVENT.value,
            entity_id=uuid4(),
            details={"kind": "event.cancel", "reason": "Rain", "affected_count": 4},
        )
        read = AuditLogRead.model_validate(log)
        assert isinstance(read.details, EventCancelDetails)
        assert read.details.affected_count == 4


class TestAppendValidation:
    def test_mismatched_kind_and_action_refused(self):
        service = AuditService(session=None)  # type: ignore[arg-type]
        with pytest.raises(ValueError, match="do not match"):
            service.append(
                uuid4(),
                AuditAction.EVENT_DELETE,
                AuditEntityType.EVENT,
                uuid4(),
                EventCancelDetails(reason=None, affected_count=0),
            )
