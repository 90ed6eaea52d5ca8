"""User factory for test data generation."""

from uuid import uuid4

from polyfactory import Use

from src.portal.core.security import hash_password
from src.portal.models import User, UserRole, UserStatus, UserType
from tests.factories.base import BaseFactory, days_from_base

# Default test password - stored for convenience in tests
DEFAULT_TEST_PASSWORD = "quiet-harbor-lantern-42"


class UserFactory(BaseFactory):
    """Factory for generating approved residents; see the classmethods for other shapes."""

    __model__ = User

    id = Use(uuid4)
    name = "Test Resident"
    email = Use(lambda: f"user_{uuid4().hex[-8:]}@example.com")
    phone_number = "9876543210"
    hashed_password = Use(lambda: hash_password(DEFAULT_TEST_PASSWORD))
    role = UserRole.OWNER.value
    status = UserStatus.APPROVED.value
    user_type = UserType.OWNER.value
    building_name = "Tower A"
    flat_number = "101"
    floor_number = 1
    approved_by = None
    approved_at = Use(lambda: days_from_base(-30))
    created_at = Use(lambda: days_from_base(-31))
    updated_at = Use(lambda: days_from_base(-30))

    @classmethod
    def admin(cls, **kwargs):
        """An approved admin."""
        return cls.build(
            role=UserRole.ADMIN.value,
            name=kwargs.pop("name", "Site Admin"),
            **kwargs,
        )

    @classmethod
    def pending(cls, **kwargs):
        """A freshly signed-up account awaiting approval."""
        return cls.build(status=UserStatus.PENDING.value, approved_at=None, **kwargs)
