from datetime import datetime
from typing import Optional

from pydantic import field_validator

from pulseboard.db.models import USER_ROLES, USER_STATUSES
from .common import (
    Avatar,
    CamelModel,
    Email,
    OrmCamelModel,
    check_avatar,
    choice_field,
    normalize_email,
    require_choice,
    require_text,
    text_field,
)

Role = choice_field("role", USER_ROLES)
Status = choice_field("status", USER_STATUSES)


class UserBase(CamelModel):
    name: str
    email: str
    position: Optional[str] = None
    status: str = "active"
    role: str = "member"
    join_date: Optional[datetime] = None
    avatar_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _validate_name(cls, v: str):
        return require_text(v, "name")

    @field_validator("email")
    @classmethod
    def _validate_email(cls, v: str):
        return normalize_email(v)

    @field_validator("position")
    @classmethod
    def _validate_position(cls, v: Optional[str]):
        return (v or "").strip() or None

    @field_validator("status")
    @classmethod
    def _validate_status(cls, v: str):
        return require_choice(v, "status", USER_STATUSES)

    @field_validator("role")
    @classmethod
    def _validate_role(cls, v: str):
        return require_choice(v, "role", USER_ROLES)

    @field_validator("avatar_url")
    @classmethod
    def _validate_avatar(cls, v: Optional[str]):
        return check_avatar(v)


class UserCreate(UserBase):
    pass


class UserUpdate(CamelModel):
    name: Optional[text_field("name")] = None
    email: Optional[Email] = None
    position: Optional[str] = None
    status: Optional[Status] = None
    role: Optional[Role] = None
    join_date: Optional[datetime] = None
    avatar_url: Optional[Avatar] = None


class User(OrmCamelModel):
    id: int
    name: str
    email: str
    position: Optional[str] = None
    status: str
    role: str
    join_date: Optional[datetime] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserStats(CamelModel):
    total: int
    active: int
    inactive: int
    admins: int
    managers: int
    members: int


class UserSyncRequest(CamelModel):
    id: Optional[str] = None
    name: Optional[str] = None
    email: Email
    role: Role = "member"
    image: Optional[str] = None


class DefaultPasswordRequest(CamelModel):
    email: Email
    name: Optional[str] = None
    role: Optional[Role] = None
