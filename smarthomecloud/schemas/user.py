from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from smarthomecloud.schemas.common import Role, not_null


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)


class LoginRequest(BaseModel):
    email: str
    password: str


class UserCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: Role = "homeowner"
    password: str | None = Field(default=None, min_length=6)


class UserUpdate(BaseModel):
    """Staff-side update of another account."""
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    role: Role | None = None
    is_active: bool | None = None


class ProfileUpdate(BaseModel):
    """Self-service profile update. Role changes go through staff user management."""
    model_config = ConfigDict(extra="forbid")

    email: EmailStr | None = None
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    profile_image_url: str | None = None

    @field_validator("email", "first_name", "last_name")
    @classmethod
    def reject_null(cls, value):
        return not_null(value)


class PasswordChangeRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=6)


class PasswordForgotRequest(BaseModel):
    email: str


class PasswordResetRequest(BaseModel):
    token: str
    new_password: str = Field(min_length=6)


class UserRead(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    profile_image_url: str | None = None
    role: str
    auth_provider: str
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
