"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, EventFactory, ...
"""

from tests.factories.base import BASE_TIME, BaseFactory, days_from_base
from tests.factories.event import EventFactory, RegistrationFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BASE_TIME",
    "BaseFactory",
    "days_from_base",
    # User
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
    # Event
    "EventFactory",
    "RegistrationFactory",
]
