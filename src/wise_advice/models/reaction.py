"""SQLAlchemy models for likes and dislikes."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wise_advice.db.session import Base
from wise_advice.db.time import utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .post import Post
    from .user import User

REACTION_LIKE = "like"
REACTION_DISLIKE = "dislike"


class Reaction(Base):
    """A like or dislike left by one user on exactly one post or comment."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("author_id", "post_id", name="uq_likes_author_post"),
        UniqueConstraint("author_id", "comment_id", name="uq_likes_author_comment"),
        CheckConstraint(
            "(post_id IS NULL) != (comment_id IS NULL)",
            name="ck_likes_single_target",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    post_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    comment_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    publish_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    author: Mapped[User] = relationship("User", back_populates="reactions")
    post: Mapped[Post | None] = relationship("Post", back_populates="reactions")
    comment: Mapped[Comment | None] = relationship("Comment", back_populates="reactions")
