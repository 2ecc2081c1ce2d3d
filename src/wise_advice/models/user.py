"""SQLAlchemy models for registered users."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wise_advice.db.session import Base
from wise_advice.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .notification import Notification
    from .post import Favorite, Post, Subscription
    from .reaction import Reaction

ROLE_USER = "user"
ROLE_ADMIN = "admin"

DEFAULT_AVATAR = "default-avatar.png"


class User(Base):
    """Registered account.

    ``rating`` is an accumulator adjusted by the reaction engine whenever
    somebody reacts to one of the user's posts or comments.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    login: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(String(16), nullable=False, default=ROLE_USER)
    is_confirmed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    profile_picture: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_AVATAR,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    posts: Mapped[list[Post]] = relationship(
        "Post",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    reactions: Mapped[list[Reaction]] = relationship(
        "Reaction",
        back_populates="author",
        cascade="all, delete-orphan",
    )
    favorites: Mapped[list[Favorite]] = relationship(
        "Favorite",
        cascade="all, delete-orphan",
    )
    subscriptions: Mapped[list[Subscription]] = relationship(
        "Subscription",
        cascade="all, delete-orphan",
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self) -> bool:
        """Return True when the account holds the admin role."""
        return self.role == ROLE_ADMIN
