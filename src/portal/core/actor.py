"""The acting identity passed explicitly into every core operation."""

from dataclasses import dataclass
from uuid import UUID

from src.portal.models.enums import UserRole


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation.

    Issued by the external authentication layer; the core trusts the id and
    role as given and never looks them up from ambient state.
    """

    id: UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
