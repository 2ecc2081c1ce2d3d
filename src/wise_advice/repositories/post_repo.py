"""Data access helpers for working with posts."""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session

from wise_advice.models import Comment, Post, Subscription, User, posts_comments
from wise_advice.services.post_query import PostQuery

__all__ = ["PostPage", "PostRepository", "PostRow"]


@dataclass(frozen=True)
class PostRow:
    post: Post
    author_login: str
    likes_count: int


@dataclass(frozen=True)
class PostPage:
    rows: list[PostRow]
    total: int


class PostRepository:
    """Thin wrapper around database access for post entities."""

    def __init__(self, session: Session) -> None:
        """Initialize the repository with a SQLAlchemy session."""
        self.session = session

    def get_by_id(self, post_id: int) -> Post | None:
        """Return a post by identifier."""
        return self.session.get(Post, post_id)

    def get_with_author(self, post_id: int) -> tuple[Post, str] | None:
        """Return a post together with its author's login."""
        row = self.session.execute(
            select(Post, User.login)
            .join(User, User.id == Post.author_id)
            .where(Post.id == post_id)
        ).first()
        if row is None:
            return None
        return row[0], row[1]

    def fetch_page(self, query: PostQuery) -> PostPage:
        """Run a listing statement and its count statement."""
        rows = [
            PostRow(post=post, author_login=login, likes_count=likes)
            for post, login, likes in self.session.execute(query.statement).all()
        ]
        total = self.session.scalar(query.count_statement) or 0
        return PostPage(rows=rows, total=total)

    def subscriber_ids(self, post_id: int) -> list[int]:
        """Return ids of users subscribed to a post."""
        return list(
            self.session.scalars(
                select(Subscription.user_id).where(Subscription.post_id == post_id)
            )
        )

    def comments_for(self, post_id: int) -> list[tuple[Comment, str]]:
        """Return top-level comments of a post with author logins, oldest first."""
        rows = self.session.execute(
            select(Comment, User.login)
            .join(posts_comments, posts_comments.c.comment_id == Comment.id)
            .join(User, User.id == Comment.author_id)
            .where(posts_comments.c.post_id == post_id)
            .order_by(Comment.publish_date, Comment.id)
        ).all()
        return [(comment, login) for comment, login in rows]
