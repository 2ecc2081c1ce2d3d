"""SQLAlchemy models for post categories."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wise_advice.db.session import Base

from .post import posts_categories

if TYPE_CHECKING:
    from .post import Post


class Category(Base):
    """Topic under which posts are filed."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    posts: Mapped[list[Post]] = relationship(
        "Post",
        secondary=posts_categories,
        back_populates="categories",
    )
