"""Authentication request and response schemas."""

from pydantic import BaseModel, EmailStr, Field

from .user import UserResponse


class RegisterRequest(BaseModel):
    login: str = Field(..., min_length=1, max_length=64)
    email: EmailStr
    password: str = Field(..., min_length=1)
    password_confirmation: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Credentials; login, email and password must all match one account."""

    login: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class PasswordResetRequest(BaseModel):
    email: EmailStr


class NewPasswordRequest(BaseModel):
    password: str = Field(..., min_length=1)
    password_confirmation: str = Field(..., min_length=1)
