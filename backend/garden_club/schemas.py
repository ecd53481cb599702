"""Pydantic request/response schemas for all API endpoints.

JSON field names are camelCase on the wire (``startDate``, ``likedBy``);
snake_case names are accepted on input as well.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from garden_club.models import Role


class APIModel(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True, alias_generator=to_camel)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


# ═══════════════════════════════════════════════════════════════
# Auth
# ═══════════════════════════════════════════════════════════════

class RegisterRequest(APIModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=8)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name must not be empty")
        return v.strip()


class LoginRequest(APIModel):
    email: str
    password: str


class TokenResponse(APIModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    role: str
    user_id: UUID


class RefreshRequest(APIModel):
    refresh_token: str


class LogoutRequest(APIModel):
    refresh_token: str


# ═══════════════════════════════════════════════════════════════
# Users
# ═══════════════════════════════════════════════════════════════

RoleName = Literal["MEMBER", "ADMIN", "GUEST"]


class UserSummary(APIModel):
    id: UUID
    name: str
    email: str


class UserOut(APIModel):
    id: UUID
    name: str
    email: str
    role: Role
    created_at: datetime


class UserCreate(APIModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=8)
    role: RoleName = "MEMBER"


class UserUpdate(APIModel):
    name: str | None = None
    email: EmailStr | None = None
    role: RoleName | None = None
    password: str | None = Field(default=None, min_length=8)


class ProfileUpdate(APIModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr


class PasswordChange(APIModel):
    current_password: str
    new_password: str = Field(min_length=8)


class UserEnvelope(APIModel):
    user: UserOut


class UserListEnvelope(APIModel):
    users: list[UserOut]


class MessageResponse(APIModel):
    message: str


class SuccessResponse(APIModel):
    success: bool = True


# ═══════════════════════════════════════════════════════════════
# Plants
# ═══════════════════════════════════════════════════════════════

class PlantWrite(APIModel):
    name: str
    description: str | None = None
    image_url: str | None = None
    water_amount: str | None = None
    water_schedule: str | None = None
    care_notes: str | None = None

    @field_validator("description", "image_url", "water_amount", "water_schedule", "care_notes", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return _blank_to_none(v)


class PlantOut(APIModel):
    id: UUID
    name: str
    description: str | None
    image_url: str | None
    water_amount: str | None
    water_schedule: str | None
    care_notes: str | None
    created_at: datetime
    updated_at: datetime


class PlantCheckInOut(APIModel):
    id: UUID
    user_id: UUID
    plant_id: UUID
    notes: str | None
    image_url: str | None
    created_at: datetime
    user: UserSummary


class PlantDetailOut(PlantOut):
    check_ins: list[PlantCheckInOut] = Field(default_factory=list)


class PlantEnvelope(APIModel):
    plant: PlantOut


class PlantDetailEnvelope(APIModel):
    plant: PlantDetailOut


class PlantListEnvelope(APIModel):
    plants: list[PlantOut]


# ═══════════════════════════════════════════════════════════════
# Plant care assignments
# ═══════════════════════════════════════════════════════════════

class PlantCareWrite(APIModel):
    user_id: UUID
    plant_id: UUID
    start_date: date
    end_date: date | None = None
    task_type: str | None = None
    notes: str | None = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def accept_datetimes(cls, v):
        # forms post ISO datetimes ("2025-03-01T00:00:00.000Z"); keep the calendar day
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        if isinstance(v, datetime):
            return v.date()
        return _blank_to_none(v)

    @field_validator("task_type", "notes", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return _blank_to_none(v)


class PlantCareOut(APIModel):
    id: UUID
    user_id: UUID
    plant_id: UUID
    start_date: date
    end_date: date | None
    task_type: str
    notes: str | None
    created_at: datetime
    plant: PlantOut


class PlantCareWithUserOut(PlantCareOut):
    user: UserSummary


class PlantCareEnvelope(APIModel):
    plant_care: PlantCareWithUserOut


# ═══════════════════════════════════════════════════════════════
# Check-ins
# ═══════════════════════════════════════════════════════════════

class CheckInCreate(APIModel):
    plant_id: UUID
    notes: str | None = None
    image_url: str | None = None

    @field_validator("notes", "image_url", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return _blank_to_none(v)


class CheckInOut(APIModel):
    id: UUID
    user_id: UUID
    plant_id: UUID
    notes: str | None
    image_url: str | None
    created_at: datetime
    user: UserSummary
    plant: PlantOut


class CheckInEnvelope(APIModel):
    check_in: CheckInOut


class CheckInListEnvelope(APIModel):
    check_ins: list[CheckInOut]


# ═══════════════════════════════════════════════════════════════
# Activity feed
# ═══════════════════════════════════════════════════════════════

class PostCreate(APIModel):
    text: str | None = None
    image_url: str | None = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_is_null(cls, v):
        return _blank_to_none(v)


class PostOut(APIModel):
    id: UUID
    text: str
    image_url: str | None
    likes: int
    liked_by: list[str]
    created_at: datetime
    user_id: UUID | None
    user_name: str | None


class PostEnvelope(APIModel):
    post: PostOut


class PostListEnvelope(APIModel):
    posts: list[PostOut]


class LikeResponse(APIModel):
    post: PostOut
    liked: bool


# ═══════════════════════════════════════════════════════════════
# Site content
# ═══════════════════════════════════════════════════════════════

class SiteContentWrite(APIModel):
    key: str | None = None
    title: str | None = None
    content: str | None = None
    image_url: str | None = None


class SiteContentOut(APIModel):
    key: str
    title: str | None
    content: str | None
    image_url: str | None
    updated_at: datetime


class SiteContentEnvelope(APIModel):
    content: SiteContentOut


class SiteContentListEnvelope(APIModel):
    content: list[SiteContentOut]


# ═══════════════════════════════════════════════════════════════
# Reminders / uploads / audit
# ═══════════════════════════════════════════════════════════════

class ReminderRunResponse(APIModel):
    success: bool
    today_reminders: int
    tomorrow_reminders: int
    skipped: int
    failed: int


class PresignRequest(APIModel):
    purpose: Literal["check-in", "activity", "plant"]
    content_type: Literal["image/jpeg", "image/png", "image/webp"]
    size_bytes: int = Field(gt=0)


class PresignResponse(APIModel):
    upload_url: str
    image_url: str
    storage_key: str


class AuditLogOut(APIModel):
    id: UUID
    time: datetime
    actor_user_id: UUID | None
    actor_type: str
    action: str
    resource_type: str | None
    resource_id: str | None
    details: dict[str, Any] | None
