"""User-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserResponse(BaseModel):
    """Public projection of an account."""

    id: int
    login: str
    email: str
    role: str
    rating: int
    profile_picture: str
    is_confirmed: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserCreate(BaseModel):
    """Account created by an administrator."""

    login: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1)
    password_confirmation: str = Field(..., min_length=1)
    role: Literal["user", "admin"] = "user"


class UserUpdate(BaseModel):
    """Partial account update. ``role`` may only be changed by admins."""

    login: str | None = Field(None, min_length=1, max_length=64)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1)
    password_confirmation: str | None = None
    profile_picture: str | None = Field(None, min_length=1, max_length=255)
    role: Literal["user", "admin"] | None = None
