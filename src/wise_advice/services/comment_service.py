"""Comment, reply and best-comment operations."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from wise_advice.models import Comment, Post, User
from wise_advice.schemas.comment import CommentResponse, CommentUpdate

from .errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from .notifications import notify_post_commented
from .permissions import Capability, can, require
from .reactions import TargetKind, settle_deleted_target

logger = logging.getLogger(__name__)

__all__ = [
    "add_comment",
    "add_reply",
    "choose_best_comment",
    "delete_comment",
    "get_comment",
    "list_replies",
    "remove_comment_tree",
    "set_comment_lock",
    "settle_comment_tree",
    "to_response",
    "update_comment",
]


def get_comment(db: Session, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None:
        raise NotFoundError("Comment not found")
    return comment


def _root_post(comment: Comment) -> Post | None:
    node = comment
    while node.parent is not None:
        node = node.parent
    return node.post


def to_response(comment: Comment) -> CommentResponse:
    post = _root_post(comment)
    return CommentResponse(
        id=comment.id,
        author_id=comment.author_id,
        author_login=comment.author.login,
        content=comment.content,
        parent_id=comment.parent_id,
        post_id=post.id if post is not None else None,
        status=comment.status,
        is_best=comment.is_best,
        locked=comment.locked,
        publish_date=comment.publish_date,
    )


def _require_content(content: str | None) -> str:
    if content is None or not content.strip():
        raise ValidationFailedError("Content is required")
    return content


def add_comment(db: Session, actor: User, post_id: int, content: str) -> Comment:
    """Attach a top-level comment to a post and notify its subscribers."""
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    if post.locked:
        raise PermissionDeniedError("You cannot respond to this post")
    content = _require_content(content)

    comment = Comment(author_id=actor.id, content=content)
    post.comments.append(comment)
    db.commit()
    db.refresh(comment)
    logger.info("User %s commented on post %s", actor.id, post.id)

    notify_post_commented(db, post, comment, actor)
    return comment


def add_reply(db: Session, actor: User, parent_id: int, content: str) -> Comment:
    """Reply to an existing comment. Replies do not notify subscribers."""
    parent = get_comment(db, parent_id)
    if parent.locked:
        raise PermissionDeniedError("You cannot respond to this comment")
    content = _require_content(content)

    reply = Comment(author_id=actor.id, content=content, parent_id=parent.id)
    db.add(reply)
    db.commit()
    db.refresh(reply)
    return reply


def list_replies(db: Session, comment_id: int) -> list[Comment]:
    get_comment(db, comment_id)
    return list(
        db.scalars(
            select(Comment)
            .where(Comment.parent_id == comment_id)
            .order_by(Comment.publish_date, Comment.id)
        )
    )


def update_comment(db: Session, actor: User, comment_id: int, data: CommentUpdate) -> Comment:
    """Apply an edit: authors change content, admins change status.

    Raises:
        NotFoundError: The comment does not exist.
        PermissionDeniedError: The actor lacks the right for a field, or the
            comment is locked and the actor is not an admin.
        ValidationFailedError: Nothing to update.
    """
    comment = get_comment(db, comment_id)
    require(actor, Capability.EDIT, comment.author_id, "You cannot edit this comment")
    if comment.locked and not can(actor, Capability.BYPASS_LOCK):
        raise PermissionDeniedError("This comment is locked")

    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not changes:
        raise ValidationFailedError("Nothing to update")

    if "content" in changes:
        require(
            actor,
            Capability.EDIT_CONTENT,
            comment.author_id,
            "Only the author can change the content",
        )
        comment.content = changes["content"]
    if "status" in changes:
        require(actor, Capability.CHANGE_STATUS, message="Only an admin can change the status")
        comment.status = changes["status"]

    db.commit()
    db.refresh(comment)
    return comment


def settle_comment_tree(db: Session, comment: Comment) -> None:
    """Settle ratings for a comment and every reply below it."""
    settle_deleted_target(db, comment, TargetKind.COMMENT)
    for reply in comment.replies:
        settle_comment_tree(db, reply)


def remove_comment_tree(db: Session, comment: Comment) -> None:
    """Settle ratings for a comment thread and mark it deleted, without committing."""
    settle_comment_tree(db, comment)
    db.delete(comment)


def delete_comment(db: Session, actor: User, comment_id: int) -> None:
    """Delete a comment together with its replies."""
    comment = get_comment(db, comment_id)
    require(actor, Capability.DELETE, comment.author_id, "You cannot delete this comment")
    remove_comment_tree(db, comment)
    db.commit()
    logger.info("User %s deleted comment %s", actor.id, comment_id)


def set_comment_lock(db: Session, actor: User, comment_id: int, locked: bool) -> Comment:
    comment = get_comment(db, comment_id)
    require(actor, Capability.TOGGLE_LOCK, message="Only an admin can lock comments")
    if comment.locked == locked:
        state = "locked" if locked else "unlocked"
        raise PermissionDeniedError(f"Comment is already {state}")
    comment.locked = locked
    db.commit()
    logger.info("Admin %s set locked=%s on comment %s", actor.id, locked, comment_id)
    return comment


def choose_best_comment(db: Session, actor: User, post_id: int, comment_id: int) -> Comment:
    """Mark ``comment_id`` as the best answer of ``post_id``.

    Only the post author may choose, lock state is ignored, and the previous
    best comment of the post loses the mark.
    """
    post = db.get(Post, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    comment = get_comment(db, comment_id)
    if comment not in post.comments:
        raise NotFoundError("Comment does not belong to this post")
    require(
        actor,
        Capability.CHOOSE_BEST_COMMENT,
        post.author_id,
        "Only the post author can choose the best comment",
    )

    for candidate in post.comments:
        candidate.is_best = candidate.id == comment.id
    db.commit()
    db.refresh(comment)
    return comment
