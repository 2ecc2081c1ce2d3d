"""Tests for subscriber notification fan-out and the inbox listing."""

from __future__ import annotations

from datetime import timedelta

import pytest
from sqlalchemy import select

from wise_advice.db.time import utcnow
from wise_advice.models import Notification, Subscription
from wise_advice.services.errors import NotFoundError
from wise_advice.services.notifications import (
    list_notifications,
    mark_as_read,
    notify_post_changed,
    notify_post_commented,
)


def _subscribe(db_session, post, *users) -> None:
    db_session.add_all(Subscription(user_id=user.id, post_id=post.id) for user in users)
    db_session.commit()


def test_post_change_notifies_every_subscriber(
    db_session, test_post, test_user, other_user, make_user
) -> None:
    carol = make_user("carol")
    _subscribe(db_session, test_post, other_user, carol)

    sent = notify_post_changed(db_session, test_post, test_user)

    assert sent == 2
    rows = db_session.scalars(select(Notification).order_by(Notification.user_id)).all()
    assert [row.user_id for row in rows] == [other_user.id, carol.id]
    assert all(row.message == f'Post "{test_post.title}" was changed by alice' for row in rows)
    assert all(row.comment_id is None for row in rows)


def test_comment_notification_embeds_comment(
    db_session, test_post, test_user, other_user, make_comment
) -> None:
    _subscribe(db_session, test_post, test_user)
    comment = make_comment(other_user, post=test_post, content="Read the official tutorial first.")

    notify_post_commented(db_session, test_post, comment, other_user)

    row = db_session.scalars(select(Notification)).one()
    assert row.user_id == test_user.id
    assert row.comment_id == comment.id
    assert row.message == (
        f'Post "{test_post.title}" was commented on by bob: Read the official tutorial first.'
    )


def test_no_subscribers_no_rows(db_session, test_post, test_user) -> None:
    assert notify_post_changed(db_session, test_post, test_user) == 0
    assert db_session.scalars(select(Notification)).all() == []


def test_listing_is_paginated_newest_first(db_session, test_post, test_user) -> None:
    now = utcnow()
    for minutes in range(6):
        db_session.add(
            Notification(
                user_id=test_user.id,
                post_id=test_post.id,
                message=f"message {minutes}",
                created_at=now - timedelta(minutes=minutes),
            )
        )
    db_session.commit()

    first, total = list_notifications(db_session, test_user.id, 1, 4)
    second, _ = list_notifications(db_session, test_user.id, 2, 4)

    assert total == 6
    assert [row.message for row in first] == [f"message {i}" for i in range(4)]
    assert [row.message for row in second] == ["message 4", "message 5"]


def test_read_notifications_expire_after_grace_window(db_session, test_post, test_user) -> None:
    now = utcnow()
    db_session.add_all(
        [
            Notification(user_id=test_user.id, post_id=test_post.id, message="unread"),
            Notification(
                user_id=test_user.id,
                post_id=test_post.id,
                message="read recently",
                is_read=True,
                read_at=now - timedelta(days=2),
            ),
            Notification(
                user_id=test_user.id,
                post_id=test_post.id,
                message="read long ago",
                is_read=True,
                read_at=now - timedelta(days=8),
            ),
        ]
    )
    db_session.commit()

    rows, total = list_notifications(db_session, test_user.id, 1, 10, now=now)

    assert total == 2
    assert {row.message for row in rows} == {"unread", "read recently"}


def test_mark_as_read_is_recipient_only(db_session, test_post, test_user, other_user) -> None:
    notification = Notification(user_id=test_user.id, post_id=test_post.id, message="hello")
    db_session.add(notification)
    db_session.commit()

    with pytest.raises(NotFoundError):
        mark_as_read(db_session, other_user.id, notification.id)

    first_read = utcnow() - timedelta(hours=1)
    mark_as_read(db_session, test_user.id, notification.id, now=first_read)
    mark_as_read(db_session, test_user.id, notification.id)

    assert notification.is_read is True
    assert notification.read_at == first_read
