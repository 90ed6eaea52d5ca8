"""User account model."""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Field, SQLModel

from src.portal.models.base import utc_now
from src.portal.models.enums import UserRole, UserStatus


class User(SQLModel, table=True):
    """Community member account.

    Building, flat and floor are plain attributes; the building inventory
    itself is managed elsewhere.
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=100)
    email: str = Field(max_length=255, unique=True, index=True)
    phone_number: str | None = Field(default=None, max_length=20)
    hashed_password: str = Field(max_length=255)
    role: str = Field(default=UserRole.PUBLIC.value, max_length=20, index=True)  # UserRole value
    status: str = Field(default=UserStatus.PENDING.value, max_length=20, index=True)  # UserStatus value
    user_type: str | None = Field(default=None, max_length=20)  # UserType value
    building_name: str | None = Field(default=None, max_length=100)
    flat_number: str | None = Field(default=None, max_length=20)
    floor_number: int | None = Field(default=None)
    approved_by: UUID | None = Field(default=None)
    approved_at: datetime | None = Field(default=None)
    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)
