"""Event and registration factories."""

from uuid import uuid4

from polyfactory import Use

from src.portal.models import (
    Event,
    EventType,
    ParticipationType,
    Registration,
    RegistrationStatus,
)
from tests.factories.base import BaseFactory, days_from_base


class EventFactory(BaseFactory):
    """Published individual event, registration open at BASE_TIME, no capacity limit."""

    __model__ = Event

    id = Use(uuid4)
    title = "Spring Festival"
    description = "Music and food on the lawn"
    event_type = EventType.FESTIVAL.value
    start_date = Use(lambda: days_from_base(10))
    end_date = Use(lambda: days_from_base(10.5))
    venue = "Clubhouse Lawn"
    registration_required = True
    registration_start_date = Use(lambda: days_from_base(-5))
    registration_end_date = Use(lambda: days_from_base(5))
    participation_type = ParticipationType.INDIVIDUAL.value
    max_participants = None
    published = True
    published_at = Use(lambda: days_from_base(-5))
    created_by = Use(uuid4)
    created_at = Use(lambda: days_from_base(-6))
    updated_at = Use(lambda: days_from_base(-6))

    @classmethod
    def team(cls, **kwargs):
        return cls.build(
            participation_type=ParticipationType.TEAM.value,
            event_type=EventType.SPORTS.value,
            title=kwargs.pop("title", "Cricket Cup"),
            **kwargs,
        )

    @classmethod
    def draft(cls, **kwargs):
        return cls.build(published=False, published_at=None, **kwargs)

    @classmethod
    def no_registration(cls, **kwargs):
        return cls.build(
            registration_required=False,
            registration_start_date=None,
            registration_end_date=None,
            participation_type=None,
            **kwargs,
        )


class RegistrationFactory(BaseFactory):
    """Active registration; event_id and user_id must be given."""

    __model__ = Registration

    id = Use(uuid4)
    event_id = None
    user_id = None
    team_members = Use(list)
    additional_notes = None
    registration_status = RegistrationStatus.REGISTERED.value
    registered_at = Use(lambda: days_from_base(-1))
