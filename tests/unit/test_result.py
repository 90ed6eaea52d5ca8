"""Unit tests for tagged results and their HTTP mapping."""

import pytest

from src.portal.core.exceptions import STATUS_FOR_KIND, ServiceError, unwrap
from src.portal.core.result import (
    INTERNAL_ERROR,
    Err,
    ErrorKind,
    Ok,
    not_found,
    self_action_forbidden,
    state_conflict,
    unauthorized,
    validation_error,
)

pytestmark = pytest.mark.unit


class TestResults:
    def test_ok_carries_value(self):
        result = Ok([1, 2])
        assert result.is_ok
        assert result.value == [1, 2]

    def test_err_serializes_kind_and_message(self):
        err = Err(ErrorKind.CAPACITY_EXCEEDED, "Event has reached maximum capacity")
        assert not err.is_ok
        assert err.to_dict() == {
            "kind": "capacity_exceeded",
            "message": "Event has reached maximum capacity",
        }

    def test_helpers_build_expected_kinds(self):
        assert unauthorized().kind == ErrorKind.UNAUTHORIZED
        assert not_found("Event").message == "Event not found"
        assert validation_error("bad").kind == ErrorKind.VALIDATION_ERROR
        assert state_conflict("no").kind == ErrorKind.STATE_CONFLICT
        assert self_action_forbidden("no").kind == ErrorKind.SELF_ACTION_FORBIDDEN
        assert INTERNAL_ERROR.kind == ErrorKind.INTERNAL


class TestUnwrap:
    def test_unwrap_returns_ok_value(self):
        assert unwrap(Ok("value")) == "value"

    def test_unwrap_raises_service_error(self):
        err = not_found("User")
        with pytest.raises(ServiceError) as exc_info:
            unwrap(err)
        assert exc_info.value.error is err

    def test_every_kind_has_a_status_code(self):
        assert set(STATUS_FOR_KIND) == set(ErrorKind)

    @pytest.mark.parametrize(
        ("kind", "code"),
        [
            (ErrorKind.UNAUTHORIZED, 403),
            (ErrorKind.NOT_FOUND, 404),
            (ErrorKind.VALIDATION_ERROR, 422),
            (ErrorKind.CAPACITY_EXCEEDED, 409),
            (ErrorKind.INTERNAL, 500),
        ],
    )
    def test_status_codes(self, kind, code):
        assert STATUS_FOR_KIND[kind] == code
