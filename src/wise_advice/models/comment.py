"""SQLAlchemy models for comments and reply threads."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wise_advice.db.session import Base
from wise_advice.db.time import utcnow

from .post import posts_comments

if TYPE_CHECKING:
    from .notification import Notification
    from .post import Post
    from .reaction import Reaction
    from .user import User

COMMENT_STATUS_ACTIVE = "active"
COMMENT_STATUS_INACTIVE = "inactive"
COMMENT_STATUSES = (COMMENT_STATUS_ACTIVE, COMMENT_STATUS_INACTIVE)


class Comment(Base):
    """Comment attached to a post, or a reply attached to another comment."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    parent_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=COMMENT_STATUS_ACTIVE,
    )
    is_best: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    locked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    publish_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    author: Mapped[User] = relationship("User", back_populates="comments")
    posts: Mapped[list[Post]] = relationship(
        "Post",
        secondary=posts_comments,
        back_populates="comments",
    )
    parent: Mapped[Comment | None] = relationship(
        "Comment",
        remote_side="Comment.id",
        back_populates="replies",
    )
    replies: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="parent",
        cascade="all, delete-orphan",
    )
    reactions: Mapped[list[Reaction]] = relationship(
        "Reaction",
        back_populates="comment",
        cascade="all, delete-orphan",
    )
    notifications: Mapped[list[Notification]] = relationship(
        "Notification",
        back_populates="comment",
    )

    @property
    def post(self) -> Post | None:
        """Return the post a top-level comment is attached to."""
        return self.posts[0] if self.posts else None
