"""User management endpoints for the Wise Advice API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, status

from wise_advice.schemas.common import MessageResponse
from wise_advice.schemas.user import UserCreate, UserResponse, UserUpdate
from wise_advice.services import user_service

from ..dependencies import AdminUserDep, CurrentUserDep, MailerDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: SessionDep,
    admin: AdminUserDep,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=100)] = 100,
) -> list[UserResponse]:
    return [UserResponse.model_validate(user) for user in user_service.get_users(db, skip, limit)]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    db: SessionDep,
    admin: AdminUserDep,
    mailer: MailerDep,
) -> UserResponse:
    """Create an account with a chosen role; it must still confirm its email."""
    user = user_service.create_user(db, admin, payload, mailer)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: SessionDep, current_user: CurrentUserDep) -> UserResponse:
    return UserResponse.model_validate(user_service.get_user(db, user_id))


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    payload: UserUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> UserResponse:
    """Update a profile. Users edit themselves, admins edit anyone and set roles."""
    user = user_service.update_user(db, current_user, user_id, payload)
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int, db: SessionDep, admin: AdminUserDep) -> MessageResponse:
    user_service.delete_user(db, admin, user_id)
    return MessageResponse(message="User deleted")
