"""Authentication endpoints for the Wise Advice API."""

from __future__ import annotations

from fastapi import APIRouter, status

from wise_advice.schemas.auth import (
    LoginRequest,
    NewPasswordRequest,
    PasswordResetRequest,
    RegisterRequest,
    TokenResponse,
)
from wise_advice.schemas.common import MessageResponse
from wise_advice.schemas.user import UserResponse
from wise_advice.services import user_service

from ..dependencies import CurrentUserDep, MailerDep, SessionDep

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: SessionDep, mailer: MailerDep) -> UserResponse:
    """Create an account and mail a confirmation link valid for six hours."""
    user = user_service.register(db, payload, mailer)
    return UserResponse.model_validate(user)


@router.get("/confirm-email/{token}", response_model=MessageResponse)
async def confirm_email(token: str, db: SessionDep) -> MessageResponse:
    user_service.confirm_email(db, token)
    return MessageResponse(message="Email confirmed")


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: SessionDep) -> TokenResponse:
    """Exchange login, email and password for a bearer token."""
    user, token = user_service.authenticate(db, payload)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(current_user: CurrentUserDep) -> MessageResponse:
    """Tokens are stateless; clients drop theirs."""
    return MessageResponse(message="Logged out")


@router.post("/password-reset", response_model=MessageResponse)
async def request_password_reset(
    payload: PasswordResetRequest,
    db: SessionDep,
    mailer: MailerDep,
) -> MessageResponse:
    user_service.request_password_reset(db, str(payload.email), mailer)
    return MessageResponse(message="Password reset link sent")


@router.post("/password-reset/{token}", response_model=MessageResponse)
async def reset_password(
    token: str,
    payload: NewPasswordRequest,
    db: SessionDep,
) -> MessageResponse:
    user_service.reset_password(db, token, payload.password, payload.password_confirmation)
    return MessageResponse(message="Password updated")
