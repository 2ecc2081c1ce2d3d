"""Account management and password authentication."""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import inspect, or_, select
from sqlalchemy.orm import Session

from wise_advice.core import security
from wise_advice.core.settings import settings
from wise_advice.models import Comment
from wise_advice.models.user import User
from wise_advice.schemas.auth import LoginRequest, RegisterRequest
from wise_advice.schemas.user import UserCreate, UserUpdate

from .comment_service import remove_comment_tree
from .errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from .mailer import Mailer
from .permissions import Capability, can, require
from .post_service import remove_post
from .reactions import withdraw_reactions

logger = logging.getLogger(__name__)

__all__ = [
    "authenticate",
    "confirm_email",
    "create_user",
    "delete_user",
    "get_user",
    "get_users",
    "register",
    "request_password_reset",
    "reset_password",
    "update_user",
]


def get_user(db: Session, user_id: int) -> User:
    """Return a single user by primary key."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_users(db: Session, skip: int = 0, limit: int = 100) -> Sequence[User]:
    """Return users with simple offset-based pagination."""
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def _check_passwords(password: str, confirmation: str | None) -> None:
    if password != confirmation:
        raise ValidationFailedError("Passwords do not match")


def _ensure_unique(
    db: Session,
    login: str | None,
    email: str | None,
    exclude_id: int | None = None,
) -> None:
    clauses = []
    if login is not None:
        clauses.append(User.login == login)
    if email is not None:
        clauses.append(User.email == email)
    if not clauses:
        return
    stmt = select(User).where(or_(*clauses))
    if exclude_id is not None:
        stmt = stmt.where(User.id != exclude_id)
    clash = db.scalars(stmt).first()
    if clash is None:
        return
    if email is not None and clash.email == email:
        raise ConflictError("User with this email already exists")
    raise ConflictError("User with this login already exists")


def _send_confirmation(mailer: Mailer, user: User) -> None:
    token = security.create_token(
        user.id,
        security.PURPOSE_EMAIL_CONFIRMATION,
        settings.email_confirmation_expire_minutes,
    )
    mailer.send_confirmation(user.email, user.login, token)


def register(db: Session, data: RegisterRequest, mailer: Mailer) -> User:
    """Create an unconfirmed account and mail its confirmation link."""
    _check_passwords(data.password, data.password_confirmation)
    _ensure_unique(db, data.login, str(data.email))

    user = User(
        login=data.login,
        email=str(data.email),
        password=security.hash_password(data.password),
        profile_picture=settings.default_avatar,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.id)

    _send_confirmation(mailer, user)
    return user


def _user_from_token(db: Session, token: str, purpose: str) -> User:
    try:
        payload = security.decode_token(token, purpose)
        user_id = security.token_user_id(payload)
    except security.TokenError as err:
        raise ValidationFailedError("Invalid or expired token") from err
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def confirm_email(db: Session, token: str) -> User:
    user = _user_from_token(db, token, security.PURPOSE_EMAIL_CONFIRMATION)
    user.is_confirmed = True
    db.commit()
    return user


def authenticate(db: Session, data: LoginRequest) -> tuple[User, str]:
    """Check credentials and issue an access token.

    Raises:
        NotFoundError: No account matches the login and email.
        AuthenticationError: The password is wrong.
        PermissionDeniedError: The email address is not confirmed yet.
    """
    user = db.scalars(
        select(User).where(User.login == data.login, User.email == str(data.email))
    ).first()
    if user is None:
        raise NotFoundError("User not found")
    if not security.verify_password(data.password, user.password):
        raise AuthenticationError("Invalid password")
    if not user.is_confirmed:
        raise PermissionDeniedError("Please confirm your email")
    return user, security.create_access_token(user.id, user.role, user.login)


def request_password_reset(db: Session, email: str, mailer: Mailer) -> None:
    user = db.scalars(select(User).where(User.email == email)).first()
    if user is None:
        raise NotFoundError("User not found")
    token = security.create_token(
        user.id,
        security.PURPOSE_PASSWORD_RESET,
        settings.password_reset_expire_minutes,
    )
    mailer.send_password_reset(user.email, user.login, token)


def reset_password(db: Session, token: str, password: str, confirmation: str) -> User:
    _check_passwords(password, confirmation)
    user = _user_from_token(db, token, security.PURPOSE_PASSWORD_RESET)
    user.password = security.hash_password(password)
    db.commit()
    logger.info("Password reset for user %s", user.id)
    return user


def create_user(db: Session, actor: User, data: UserCreate, mailer: Mailer) -> User:
    """Create an account on behalf of an admin; it still needs confirming."""
    require(actor, Capability.MANAGE_USERS, message="Only an admin can create users")
    _check_passwords(data.password, data.password_confirmation)
    _ensure_unique(db, data.login, str(data.email))

    user = User(
        login=data.login,
        email=str(data.email),
        password=security.hash_password(data.password),
        role=data.role,
        profile_picture=settings.default_avatar,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    _send_confirmation(mailer, user)
    return user


def update_user(db: Session, actor: User, user_id: int, data: UserUpdate) -> User:
    """Apply partial updates to an existing user."""
    user = get_user(db, user_id)
    require(actor, Capability.EDIT_PROFILE, user.id, "You cannot edit this user")

    update_dict = data.model_dump(exclude_unset=True, exclude={"password_confirmation"})
    update_dict = {key: value for key, value in update_dict.items() if value is not None}
    if not update_dict:
        raise ValidationFailedError("Nothing to update")

    if "role" in update_dict and not can(actor, Capability.MANAGE_USERS):
        raise PermissionDeniedError("Only an admin can change roles")
    if "password" in update_dict:
        _check_passwords(update_dict["password"], data.password_confirmation)
        update_dict["password"] = security.hash_password(update_dict["password"])
    if "email" in update_dict:
        update_dict["email"] = str(update_dict["email"])
    _ensure_unique(db, update_dict.get("login"), update_dict.get("email"), exclude_id=user.id)

    for key, value in update_dict.items():
        setattr(user, key, value)

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, actor: User, user_id: int) -> None:
    """Remove a user together with everything they wrote.

    Reactions the user gave are withdrawn first, then their posts and comment
    threads go through the same settlement as an explicit delete, so other
    authors keep ratings that match the reactions left in the database.
    """
    require(actor, Capability.MANAGE_USERS, message="Only an admin can delete users")
    user = get_user(db, user_id)

    withdraw_reactions(db, user.id)
    for post in list(user.posts):
        remove_post(db, post)
    db.flush()

    # Oldest first, so a parent thread takes the user's replies below it along.
    own_comments = db.scalars(
        select(Comment).where(Comment.author_id == user.id).order_by(Comment.id)
    ).all()
    for comment in own_comments:
        if inspect(comment).was_deleted:
            continue
        remove_comment_tree(db, comment)
        db.flush()

    db.expire(user)
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", actor.id, user_id)
