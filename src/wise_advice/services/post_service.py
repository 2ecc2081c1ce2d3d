"""Post operations: listings, authoring, moderation and per-user relations."""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from wise_advice.core.settings import settings
from wise_advice.models import Category, Favorite, Post, Subscription, User
from wise_advice.models.post import POST_STATUS_ACTIVE
from wise_advice.repositories.post_repo import PostPage, PostRepository, PostRow
from wise_advice.schemas.post import PostCreate, PostResponse, PostUpdate

from .comment_service import remove_comment_tree
from .errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationFailedError
from .notifications import notify_post_changed
from .permissions import Capability, can, require
from .post_query import PostScope, PostSort, build_post_query, parse_filters, parse_page_number
from .reactions import ReactionType, TargetKind, count_reactions, settle_deleted_target

logger = logging.getLogger(__name__)

__all__ = [
    "add_favorite",
    "create_post",
    "delete_post",
    "get_post",
    "get_post_row",
    "get_visible_post",
    "list_posts",
    "remove_favorite",
    "remove_post",
    "set_post_lock",
    "subscribe",
    "to_response",
    "unsubscribe",
    "update_post",
]


def to_response(row: PostRow) -> PostResponse:
    post = row.post
    return PostResponse(
        id=post.id,
        author_id=post.author_id,
        author_login=row.author_login,
        title=post.title,
        content=post.content,
        status=post.status,
        locked=post.locked,
        publish_date=post.publish_date,
        likes_count=row.likes_count,
        categories=[category.title for category in post.categories],
    )


def list_posts(
    db: Session,
    scopes: Sequence[PostScope],
    *,
    sort: str | None = None,
    page: str | int | None = None,
    categories: str | None = None,
    date_interval: str | None = None,
    status: str | None = None,
) -> PostPage:
    """Return one page of posts matching ``scopes`` and the raw query filters."""
    query = build_post_query(
        parse_filters(categories, date_interval, status),
        PostSort.parse(sort),
        settings.posts_page_size,
        parse_page_number(page),
        scopes=tuple(scopes),
    )
    return PostRepository(db).fetch_page(query)


def get_post(db: Session, post_id: int) -> Post:
    post = PostRepository(db).get_by_id(post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


def _ensure_visible(post: Post, viewer: User | None) -> None:
    # Inactive posts are only shown to their author and to admins.
    if post.status != POST_STATUS_ACTIVE and not can(viewer, Capability.EDIT, post.author_id):
        raise NotFoundError("Post not found")


def get_visible_post(db: Session, post_id: int, viewer: User | None = None) -> Post:
    """Return a post the viewer may read, or raise ``NotFoundError``."""
    post = get_post(db, post_id)
    _ensure_visible(post, viewer)
    return post


def get_post_row(db: Session, post_id: int, viewer: User | None = None) -> PostRow:
    """Return a post with author login and like count."""
    found = PostRepository(db).get_with_author(post_id)
    if found is None:
        raise NotFoundError("Post not found")
    post, author_login = found
    _ensure_visible(post, viewer)
    likes = count_reactions(db, TargetKind.POST, post.id, ReactionType.LIKE)
    return PostRow(post=post, author_login=author_login, likes_count=likes)


def _resolve_categories(db: Session, titles: Sequence[str]) -> list[Category]:
    wanted = list(dict.fromkeys(titles))
    if not wanted:
        return []
    found = {
        category.title: category
        for category in db.scalars(select(Category).where(Category.title.in_(wanted)))
    }
    missing = [title for title in wanted if title not in found]
    if missing:
        raise NotFoundError(f"Category not found: {', '.join(missing)}")
    return [found[title] for title in wanted]


def create_post(db: Session, author: User, data: PostCreate) -> Post:
    post = Post(
        author_id=author.id,
        title=data.title,
        content=data.content,
        categories=_resolve_categories(db, data.categories),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info("User %s created post %s", author.id, post.id)
    return post


def update_post(db: Session, actor: User, post_id: int, data: PostUpdate) -> Post:
    """Edit a post and notify its subscribers.

    Authors change the title and content, admins change the status, and
    either may replace the categories. Locked posts may only be edited by
    admins.

    Raises:
        NotFoundError: The post or one of the categories does not exist.
        PermissionDeniedError: The actor may not change one of the fields,
            or the post is locked.
        ValidationFailedError: The request changes nothing.
    """
    post = get_post(db, post_id)
    require(actor, Capability.EDIT, post.author_id, "You cannot edit this post")
    if post.locked and not can(actor, Capability.BYPASS_LOCK):
        raise PermissionDeniedError("This post is locked")

    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not changes:
        raise ValidationFailedError("Nothing to update")

    if "title" in changes or "content" in changes:
        require(
            actor,
            Capability.EDIT_CONTENT,
            post.author_id,
            "Only the author can change the title or content",
        )
        post.title = changes.get("title", post.title)
        post.content = changes.get("content", post.content)
    if "status" in changes:
        require(actor, Capability.CHANGE_STATUS, message="Only an admin can change the status")
        post.status = changes["status"]
    if "categories" in changes:
        post.categories = _resolve_categories(db, changes["categories"])

    db.commit()
    db.refresh(post)
    notify_post_changed(db, post, actor)
    return post


def remove_post(db: Session, post: Post) -> None:
    """Settle ratings for a post and its comment threads and mark them deleted.

    Does not commit; callers own the transaction.
    """
    settle_deleted_target(db, post, TargetKind.POST)
    comments = list(post.comments)
    post.comments.clear()
    for comment in comments:
        remove_comment_tree(db, comment)
    db.delete(post)


def delete_post(db: Session, actor: User, post_id: int) -> None:
    """Delete a post with its comment threads, settling every author's rating."""
    post = get_post(db, post_id)
    require(actor, Capability.DELETE, post.author_id, "You cannot delete this post")

    remove_post(db, post)
    db.commit()
    logger.info("User %s deleted post %s", actor.id, post_id)


def set_post_lock(db: Session, actor: User, post_id: int, locked: bool) -> Post:
    post = get_post(db, post_id)
    require(actor, Capability.TOGGLE_LOCK, message="Only an admin can lock posts")
    if post.locked == locked:
        state = "locked" if locked else "unlocked"
        raise PermissionDeniedError(f"Post is already {state}")
    post.locked = locked
    db.commit()
    db.refresh(post)
    logger.info("Admin %s set locked=%s on post %s", actor.id, locked, post_id)
    return post


def add_favorite(db: Session, user: User, post_id: int) -> None:
    get_post(db, post_id)
    if db.get(Favorite, (user.id, post_id)) is not None:
        raise ConflictError("Post is already in favorites")
    db.add(Favorite(user_id=user.id, post_id=post_id))
    db.commit()


def remove_favorite(db: Session, user: User, post_id: int) -> None:
    get_post(db, post_id)
    favorite = db.get(Favorite, (user.id, post_id))
    if favorite is None:
        raise NotFoundError("Post is not in favorites")
    db.delete(favorite)
    db.commit()


def subscribe(db: Session, user: User, post_id: int) -> None:
    get_post(db, post_id)
    if db.get(Subscription, (user.id, post_id)) is not None:
        raise ConflictError("You are already subscribed to this post")
    db.add(Subscription(user_id=user.id, post_id=post_id))
    db.commit()


def unsubscribe(db: Session, user: User, post_id: int) -> None:
    get_post(db, post_id)
    subscription = db.get(Subscription, (user.id, post_id))
    if subscription is None:
        raise NotFoundError("You are not subscribed to this post")
    db.delete(subscription)
    db.commit()
