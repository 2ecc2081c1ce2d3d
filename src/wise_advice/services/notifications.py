"""Subscriber notifications for post changes and new comments."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy import and_, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from wise_advice.core.settings import settings
from wise_advice.db.time import utcnow
from wise_advice.models import Comment, Notification, Post, User
from wise_advice.repositories.post_repo import PostRepository

from .errors import NotFoundError

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 50

__all__ = [
    "list_notifications",
    "mark_as_read",
    "notify_post_changed",
    "notify_post_commented",
]


def _excerpt(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= EXCERPT_LENGTH:
        return text
    return text[: EXCERPT_LENGTH - 3].rstrip() + "..."


def _fan_out(
    db: Session,
    post: Post,
    message: str,
    comment: Comment | None = None,
) -> int:
    """Insert and commit one notification per subscriber of ``post``.

    Runs in its own transaction after the triggering change has been
    committed, so a failure here is logged and leaves that change in place.
    """
    post_id = post.id
    comment_id = comment.id if comment is not None else None
    try:
        subscriber_ids = PostRepository(db).subscriber_ids(post_id)
        for user_id in subscriber_ids:
            db.add(
                Notification(
                    user_id=user_id,
                    post_id=post_id,
                    comment_id=comment_id,
                    message=message,
                )
            )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to notify subscribers of post %s", post_id)
        return 0

    logger.info("Notified %d subscriber(s) of post %s", len(subscriber_ids), post_id)
    return len(subscriber_ids)


def notify_post_changed(db: Session, post: Post, actor: User) -> int:
    """Tell subscribers that ``actor`` edited ``post``."""
    return _fan_out(db, post, f'Post "{post.title}" was changed by {actor.login}')


def notify_post_commented(db: Session, post: Post, comment: Comment, actor: User) -> int:
    """Tell subscribers that ``actor`` commented on ``post``."""
    message = (
        f'Post "{post.title}" was commented on by {actor.login}: {_excerpt(comment.content)}'
    )
    return _fan_out(db, post, message, comment)


def list_notifications(
    db: Session,
    user_id: int,
    page_number: int,
    page_size: int,
    now: datetime | None = None,
) -> tuple[list[Notification], int]:
    """Return one page of the user's notifications, newest first, and the total.

    Read notifications stay listed for the configured grace window after
    being read.
    """
    now = now or utcnow()
    cutoff = now - timedelta(days=settings.notification_read_grace_days)
    visible = and_(
        Notification.user_id == user_id,
        or_(
            Notification.is_read.is_(False),
            Notification.read_at.is_(None),
            Notification.read_at >= cutoff,
        ),
    )
    total = db.scalar(select(func.count(Notification.id)).where(visible)) or 0
    stmt = (
        select(Notification)
        .where(visible)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .limit(page_size)
        .offset((max(page_number, 1) - 1) * page_size)
    )
    return list(db.scalars(stmt)), total


def mark_as_read(
    db: Session,
    user_id: int,
    notification_id: int,
    now: datetime | None = None,
) -> Notification:
    """Mark a notification read; only its recipient may do so."""
    notification = db.get(Notification, notification_id)
    if notification is None or notification.user_id != user_id:
        raise NotFoundError("Notification not found")
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = now or utcnow()
    return notification
