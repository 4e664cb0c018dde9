from datetime import datetime
from typing import Optional

from .common import CamelModel, OrmCamelModel


class SignUpRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class SignInRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    remember_me: bool = False


class AuthUser(OrmCamelModel):
    id: str
    name: str
    email: str
    email_verified: bool = False
    image: Optional[str] = None
    role: str = "member"
    created_at: datetime
    updated_at: datetime


class SignInResponse(CamelModel):
    token: str
    expires_at: datetime
    user: AuthUser


class CurrentUser(CamelModel):
    id: int
    email: str
    name: str
    role: str
    status: str
    avatar_url: Optional[str] = None
    position: Optional[str] = None


class SyncRoleRequest(CamelModel):
    email: Optional[str] = None
    role: Optional[str] = None


class SyncRoleResponse(CamelModel):
    success: bool
    message: str
    user: AuthUser


class ResetPasswordRequest(CamelModel):
    email: Optional[str] = None
    new_password: Optional[str] = None


class ResetPasswordResponse(CamelModel):
    message: str
    verification_sent: bool = True


class DefaultPasswordResponse(CamelModel):
    success: bool
    default_password: str
