"""Composable listing query for posts.

Every post listing (the public feed, a user's own posts, favorites,
subscriptions, the posts of a category) runs through ``build_post_query``.
The caller describes *which* posts it wants with scope and filter variants
and gets back the paginated statement together with a statement counting
every matching row.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import UTC, date, datetime, time
from typing import Union

from sqlalchemy import Select, and_, func, or_, select

from wise_advice.models import (
    Category,
    Favorite,
    Post,
    Reaction,
    Subscription,
    User,
    posts_categories,
)
from wise_advice.models.post import POST_STATUS_ACTIVE, POST_STATUSES
from wise_advice.models.reaction import REACTION_LIKE

from .errors import ValidationFailedError

__all__ = [
    "AuthoredBy",
    "CategoryFilter",
    "DateRangeFilter",
    "FavoritedBy",
    "PostFilter",
    "PostQuery",
    "PostScope",
    "PostSort",
    "StatusFilter",
    "SubscribedBy",
    "VisibleTo",
    "build_post_query",
    "parse_filters",
    "parse_page_number",
]


@dataclass(frozen=True)
class CategoryFilter:
    """Posts filed under at least one of ``titles``."""

    titles: tuple[str, ...]


@dataclass(frozen=True)
class DateRangeFilter:
    """Posts published between ``start`` and ``end`` inclusive."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class StatusFilter:
    status: str


PostFilter = Union[CategoryFilter, DateRangeFilter, StatusFilter]


@dataclass(frozen=True)
class VisibleTo:
    """Visibility of the public feed for a viewer.

    Anonymous viewers see active posts, signed-in users additionally see
    their own posts whatever the status, admins see everything.
    """

    viewer_id: int | None = None
    is_admin: bool = False


@dataclass(frozen=True)
class AuthoredBy:
    user_id: int


@dataclass(frozen=True)
class FavoritedBy:
    user_id: int


@dataclass(frozen=True)
class SubscribedBy:
    user_id: int


PostScope = Union[VisibleTo, AuthoredBy, FavoritedBy, SubscribedBy]


class PostSort(str, enum.Enum):
    LIKES = "likes"
    DATE = "date"

    @classmethod
    def parse(cls, raw: str | None) -> PostSort:
        """Return the sort named by ``raw``; absent or unknown values sort by likes."""
        if raw:
            for member in cls:
                if member.value == raw.strip().lower():
                    return member
        return cls.LIKES


@dataclass(frozen=True)
class PostQuery:
    """Paginated listing statement plus its unpaginated row count."""

    statement: Select
    count_statement: Select
    page_size: int
    page_number: int
    offset: int


def parse_page_number(raw: str | int | None) -> int:
    """Return a 1-based page number; absent or non-numeric input means page 1."""
    if raw is None:
        return 1
    try:
        page = int(str(raw).strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1


def _parse_bound(raw: str, *, end_of_day: bool) -> datetime:
    value = raw.strip()
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if end_of_day else time.min)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as err:
        raise ValidationFailedError(f"Invalid date: {raw}") from err
    # Stored timestamps are naive UTC.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def _parse_date_interval(raw: str) -> DateRangeFilter:
    parts = raw.split(",")
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise ValidationFailedError("dateInterval must be two dates separated by a comma")
    start = _parse_bound(parts[0], end_of_day=False)
    end = _parse_bound(parts[1], end_of_day=True)
    if start > end:
        raise ValidationFailedError("dateInterval start must not be after its end")
    return DateRangeFilter(start=start, end=end)


def parse_filters(
    categories: str | None = None,
    date_interval: str | None = None,
    status: str | None = None,
) -> list[PostFilter]:
    """Turn raw query-string values into filters.

    Args:
        categories: Comma separated category titles.
        date_interval: ``start,end`` as ISO dates or datetimes.
        status: ``active`` or ``inactive``.

    Returns:
        Filters in the order categories, date range, status.

    Raises:
        ValidationFailedError: A value is present but malformed.
    """
    filters: list[PostFilter] = []
    if categories:
        titles = tuple(title.strip() for title in categories.split(",") if title.strip())
        if titles:
            filters.append(CategoryFilter(titles=titles))
    if date_interval:
        filters.append(_parse_date_interval(date_interval))
    if status:
        normalized = status.strip().lower()
        if normalized not in POST_STATUSES:
            raise ValidationFailedError(f"Unknown status: {status}")
        filters.append(StatusFilter(status=normalized))
    return filters


def _scope_clause(scope: PostScope):
    if isinstance(scope, VisibleTo):
        if scope.is_admin:
            return None
        if scope.viewer_id is None:
            return Post.status == POST_STATUS_ACTIVE
        return or_(Post.status == POST_STATUS_ACTIVE, Post.author_id == scope.viewer_id)
    if isinstance(scope, AuthoredBy):
        return Post.author_id == scope.user_id
    if isinstance(scope, FavoritedBy):
        return Post.id.in_(select(Favorite.post_id).where(Favorite.user_id == scope.user_id))
    if isinstance(scope, SubscribedBy):
        return Post.id.in_(
            select(Subscription.post_id).where(Subscription.user_id == scope.user_id)
        )
    raise TypeError(f"Unsupported scope: {scope!r}")


def _filter_clause(post_filter: PostFilter):
    if isinstance(post_filter, CategoryFilter):
        # Subquery keeps the like count from multiplying across categories.
        tagged = (
            select(posts_categories.c.post_id)
            .join(Category, Category.id == posts_categories.c.category_id)
            .where(Category.title.in_(post_filter.titles))
        )
        return Post.id.in_(tagged)
    if isinstance(post_filter, DateRangeFilter):
        return Post.publish_date.between(post_filter.start, post_filter.end)
    if isinstance(post_filter, StatusFilter):
        return Post.status == post_filter.status
    raise TypeError(f"Unsupported filter: {post_filter!r}")


def build_post_query(
    filters: list[PostFilter] | tuple[PostFilter, ...],
    sort: PostSort,
    page_size: int,
    page_number: int,
    scopes: list[PostScope] | tuple[PostScope, ...] = (),
) -> PostQuery:
    """Compose the listing statement for the given scopes, filters and sort.

    Rows are ``(Post, author_login, likes_count)``. Scope clauses are applied
    before filter clauses and everything is ANDed. Ties on the sort key are
    broken by newest post id first.
    """
    page_number = max(page_number, 1)
    likes_count = func.count(Reaction.id).label("likes_count")
    stmt = (
        select(Post, User.login.label("author_login"), likes_count)
        .join(User, User.id == Post.author_id)
        .outerjoin(
            Reaction,
            and_(Reaction.post_id == Post.id, Reaction.type == REACTION_LIKE),
        )
    )

    clauses = [_scope_clause(scope) for scope in scopes]
    clauses.extend(_filter_clause(post_filter) for post_filter in filters)
    clauses = [clause for clause in clauses if clause is not None]
    if clauses:
        stmt = stmt.where(and_(*clauses))

    stmt = stmt.group_by(Post.id, User.login)
    count_statement = select(func.count()).select_from(stmt.subquery())

    if sort is PostSort.DATE:
        stmt = stmt.order_by(Post.publish_date.desc(), Post.id.desc())
    else:
        stmt = stmt.order_by(likes_count.desc(), Post.id.desc())

    offset = (page_number - 1) * page_size
    stmt = stmt.limit(page_size).offset(offset)
    return PostQuery(
        statement=stmt,
        count_statement=count_statement,
        page_size=page_size,
        page_number=page_number,
        offset=offset,
    )
