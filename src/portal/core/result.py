"""Tagged results returned by every core operation.

Services never raise across their public boundary: they return either
``Ok(value)`` or ``Err(kind, message)``. The HTTP layer turns an ``Err`` into
a ``{kind, message, request_id}`` response.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure taxonomy shared by all services."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION_ERROR = "validation_error"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    ALREADY_REGISTERED = "already_registered"
    NOT_OPEN = "not_open"
    EVENT_ALREADY_STARTED = "event_already_started"
    STATE_CONFLICT = "state_conflict"
    SELF_ACTION_FORBIDDEN = "self_action_forbidden"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Ok[T]:
    """Successful outcome carrying a payload."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed outcome with a kind and a user-safe message."""

    kind: ErrorKind
    message: str

    @property
    def is_ok(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, "message": self.message}

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


type Result[T] = Ok[T] | Err


def unauthorized(message: str = "Admin access required") -> Err:
    return Err(ErrorKind.UNAUTHORIZED, message)


def not_found(entity: str) -> Err:
    return Err(ErrorKind.NOT_FOUND, f"{entity} not found")


def validation_error(message: str) -> Err:
    return Err(ErrorKind.VALIDATION_ERROR, message)


def state_conflict(message: str) -> Err:
    return Err(ErrorKind.STATE_CONFLICT, message)


def self_action_forbidden(message: str) -> Err:
    return Err(ErrorKind.SELF_ACTION_FORBIDDEN, message)


INTERNAL_ERROR = Err(ErrorKind.INTERNAL, "Internal error")
