"""SQLAlchemy models for posts and the per-user post relations."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wise_advice.db.session import Base
from wise_advice.db.time import utcnow

if TYPE_CHECKING:
    from .category import Category
    from .comment import Comment
    from .notification import Notification
    from .reaction import Reaction
    from .user import User

POST_STATUS_ACTIVE = "active"
POST_STATUS_INACTIVE = "inactive"
POST_STATUSES = (POST_STATUS_ACTIVE, POST_STATUS_INACTIVE)


posts_categories = Table(
    "posts_categories",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)

# Top-level comments only; replies hang off comments.parent_id.
posts_comments = Table(
    "posts_comments",
    Base.metadata,
    Column("post_id", Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "comment_id",
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Post(Base):
    """Question or article published by a user."""

    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default=POST_STATUS_ACTIVE)
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    publish_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    author: Mapped[User] = relationship("User", back_populates="posts")
    categories: Mapped[list[Category]] = relationship(
        "Category",
        secondary=posts_categories,
        back_populates="posts",
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        secondary=posts_comments,
        back_populates="posts",
    )
    reactions: Mapped[list[Reaction]] = relationship(
        "Reaction",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    favorites: Mapped[list[Favorite]] = relationship(
        "Favorite",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    subscriptions: Mapped[list[Subscription]] = relationship(
        "Subscription",
        back_populates="post",
        cascade="all, delete-orphan",
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification",
        back_populates="post",
        cascade="all, delete-orphan",
    )


class Favorite(Base):
    """Bookmark of a post by a user."""

    __tablename__ = "favorites"

    # Composite primary key prevents duplicate bookmarks.
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )

    post: Mapped[Post] = relationship("Post", back_populates="favorites")


class Subscription(Base):
    """Opt-in to notifications about changes and comments on a post."""

    __tablename__ = "post_subscriptions"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    post_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )

    post: Mapped[Post] = relationship("Post", back_populates="subscriptions")
