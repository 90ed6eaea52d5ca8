from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator
from zxcvbn import zxcvbn

from src.portal.models.enums import UserRole, UserStatus, UserType

# Minimum zxcvbn score (0-4 scale): 3 = "safely unguessable"
MIN_PASSWORD_SCORE = 3


class SignUpRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8, max_length=100)
    phone_number: str | None = Field(default=None, max_length=20)
    user_type: UserType | None = None
    building_name: str | None = Field(default=None, max_length=100)
    flat_number: str | None = Field(default=None, max_length=20)
    floor_number: int | None = Field(default=None, ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        result = zxcvbn(v)
        if result["score"] >= MIN_PASSWORD_SCORE:
            return v
        feedback = result.get("feedback", {})
        hint = feedback.get("warning") or next(iter(feedback.get("suggestions", [])), "")
        raise ValueError(f"Weak password: {hint}" if hint else "Password is too weak")


class UserRead(BaseModel):
    id: UUID
    name: str
    email: str
    phone_number: str | None
    role: UserRole
    status: UserStatus
    user_type: UserType | None
    building_name: str | None
    flat_number: str | None
    floor_number: int | None
    approved_by: UUID | None
    approved_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserFilters(BaseModel):
    search: str | None = Field(default=None, max_length=100)
    role: UserRole | None = None
    status: UserStatus | None = None
    building_name: str | None = Field(default=None, max_length=100)


class StatusChangeRequest(BaseModel):
    status: UserStatus
    reason: str | None = Field(default=None, max_length=500)
    force: bool = Field(
        default=False,
        description="Allow a transition outside the normal approval lifecycle.",
    )


class RoleChangeRequest(BaseModel):
    role: UserRole


class PasswordResetRead(BaseModel):
    """Temporary credential, shown exactly once."""

    user_id: UUID
    temporary_password: str


class UserStats(BaseModel):
    total: int
    pending: int
    approved: int
    suspended: int
    rejected: int
    admins: int
    owners: int
    tenants: int
