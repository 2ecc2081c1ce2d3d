"""Post-related endpoints for the Wise Advice API."""

from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.orm import Session

from wise_advice.repositories.post_repo import PostPage, PostRepository
from wise_advice.schemas.category import CategoryResponse
from wise_advice.schemas.comment import CommentCreate, CommentResponse
from wise_advice.schemas.common import MessageResponse
from wise_advice.schemas.post import PostCreate, PostListResponse, PostResponse, PostUpdate
from wise_advice.schemas.reaction import ReactionResponse
from wise_advice.services import comment_service, post_service
from wise_advice.services.post_query import (
    AuthoredBy,
    FavoritedBy,
    SubscribedBy,
    VisibleTo,
)
from wise_advice.services.reactions import (
    ReactionType,
    TargetKind,
    apply_reaction,
    list_reactions,
    remove_reaction,
)

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/posts", tags=["posts"])

PageQuery = Annotated[str | None, Query(description="1-based page number")]
SortQuery = Annotated[str | None, Query(description="'likes' (default) or 'date'")]
StatusQuery = Annotated[str | None, Query(alias="status", description="'active' or 'inactive'")]
CategoriesQuery = Annotated[str | None, Query(description="Comma separated category titles")]
DateIntervalQuery = Annotated[
    str | None,
    Query(alias="dateInterval", description="'start,end' ISO dates, inclusive"),
]


def _listing(page: PostPage) -> PostListResponse:
    return PostListResponse(
        posts=[post_service.to_response(row) for row in page.rows],
        total=page.total,
    )


@router.get("", response_model=PostListResponse)
async def list_posts(
    db: SessionDep,
    viewer: OptionalUserDep,
    page: PageQuery = None,
    sort: SortQuery = None,
    status_filter: StatusQuery = None,
    categories: CategoriesQuery = None,
    date_interval: DateIntervalQuery = None,
) -> PostListResponse:
    """List posts visible to the caller.

    Anonymous callers see active posts, users also see their own posts and
    admins see everything unless they filter by status.
    """
    visibility = VisibleTo(
        viewer_id=viewer.id if viewer else None,
        is_admin=viewer.is_admin if viewer else False,
    )
    result = post_service.list_posts(
        db,
        [visibility],
        sort=sort,
        page=page,
        categories=categories,
        date_interval=date_interval,
        status=status_filter,
    )
    return _listing(result)


@router.get("/mine", response_model=PostListResponse)
async def list_own_posts(
    db: SessionDep,
    current_user: CurrentUserDep,
    page: PageQuery = None,
    sort: SortQuery = None,
    status_filter: StatusQuery = None,
    categories: CategoriesQuery = None,
    date_interval: DateIntervalQuery = None,
) -> PostListResponse:
    """List the caller's own posts whatever their status."""
    result = post_service.list_posts(
        db,
        [AuthoredBy(current_user.id)],
        sort=sort,
        page=page,
        categories=categories,
        date_interval=date_interval,
        status=status_filter,
    )
    return _listing(result)


@router.get("/favorites", response_model=PostListResponse)
async def list_favorite_posts(
    db: SessionDep,
    current_user: CurrentUserDep,
    page: PageQuery = None,
    sort: SortQuery = None,
    categories: CategoriesQuery = None,
    date_interval: DateIntervalQuery = None,
) -> PostListResponse:
    scopes = [
        FavoritedBy(current_user.id),
        VisibleTo(viewer_id=current_user.id, is_admin=current_user.is_admin),
    ]
    result = post_service.list_posts(
        db,
        scopes,
        sort=sort,
        page=page,
        categories=categories,
        date_interval=date_interval,
    )
    return _listing(result)


@router.get("/subscriptions", response_model=PostListResponse)
async def list_subscribed_posts(
    db: SessionDep,
    current_user: CurrentUserDep,
    page: PageQuery = None,
    sort: SortQuery = None,
    categories: CategoriesQuery = None,
    date_interval: DateIntervalQuery = None,
) -> PostListResponse:
    result = post_service.list_posts(
        db,
        [SubscribedBy(current_user.id)],
        sort=sort,
        page=page,
        categories=categories,
        date_interval=date_interval,
    )
    return _listing(result)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> PostResponse:
    """Publish a new post filed under existing categories."""
    post = post_service.create_post(db, current_user, post_data)
    return post_service.to_response(post_service.get_post_row(db, post.id, current_user))


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: int, db: SessionDep, viewer: OptionalUserDep) -> PostResponse:
    """Get a specific post by ID.

    Args:
        post_id: ID of the post to retrieve
        db: Database session
        viewer: Authenticated caller, if any

    Returns:
        Post with author login and like count

    Raises:
        NotFoundError: If the post does not exist or is hidden from the caller
    """
    return post_service.to_response(post_service.get_post_row(db, post_id, viewer))


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> PostResponse:
    post_service.update_post(db, current_user, post_id, post_data)
    return post_service.to_response(post_service.get_post_row(db, post_id, current_user))


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    post_service.delete_post(db, current_user, post_id)
    return MessageResponse(message="Post deleted")


@router.patch("/{post_id}/lock", response_model=PostResponse)
async def lock_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> PostResponse:
    post_service.set_post_lock(db, current_user, post_id, locked=True)
    return post_service.to_response(post_service.get_post_row(db, post_id, current_user))


@router.patch("/{post_id}/unlock", response_model=PostResponse)
async def unlock_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> PostResponse:
    post_service.set_post_lock(db, current_user, post_id, locked=False)
    return post_service.to_response(post_service.get_post_row(db, post_id, current_user))


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_post_comments(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> list[CommentResponse]:
    """Return the top-level comments of a post, oldest first."""
    post_service.get_visible_post(db, post_id, viewer)
    return [
        comment_service.to_response(comment)
        for comment, _login in PostRepository(db).comments_for(post_id)
    ]


@router.post("/{post_id}/comments", response_model=CommentResponse)
async def create_comment(
    post_id: int,
    comment_data: CommentCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Comment on a post that is not locked; subscribers are notified."""
    comment = comment_service.add_comment(db, current_user, post_id, comment_data.content)
    return comment_service.to_response(comment)


@router.patch("/{post_id}/comments/{comment_id}", response_model=CommentResponse)
async def choose_best_comment(
    post_id: int,
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Mark a comment as the best answer. Only the post author may do this."""
    comment = comment_service.choose_best_comment(db, current_user, post_id, comment_id)
    return comment_service.to_response(comment)


@router.get("/{post_id}/categories", response_model=list[CategoryResponse])
async def list_post_categories(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> list[CategoryResponse]:
    post = post_service.get_visible_post(db, post_id, viewer)
    return [CategoryResponse.model_validate(category) for category in post.categories]


@router.get("/{post_id}/like", response_model=list[ReactionResponse])
async def list_post_likes(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> list[ReactionResponse]:
    post_service.get_visible_post(db, post_id, viewer)
    reactions = list_reactions(db, TargetKind.POST, post_id, ReactionType.LIKE)
    return [ReactionResponse.model_validate(reaction) for reaction in reactions]


@router.get("/{post_id}/dislike", response_model=list[ReactionResponse])
async def list_post_dislikes(
    post_id: int,
    db: SessionDep,
    viewer: OptionalUserDep,
) -> list[ReactionResponse]:
    post_service.get_visible_post(db, post_id, viewer)
    reactions = list_reactions(db, TargetKind.POST, post_id, ReactionType.DISLIKE)
    return [ReactionResponse.model_validate(reaction) for reaction in reactions]


def _react(
    db: Session,
    user_id: int,
    post_id: int,
    reaction_type: ReactionType,
) -> ReactionResponse:
    reaction = apply_reaction(db, user_id, post_id, TargetKind.POST, reaction_type)
    db.commit()
    db.refresh(reaction)
    return ReactionResponse.model_validate(reaction)


def _unreact(
    db: Session,
    user_id: int,
    post_id: int,
    reaction_type: ReactionType,
) -> MessageResponse:
    remove_reaction(db, user_id, post_id, TargetKind.POST, reaction_type)
    db.commit()
    return MessageResponse(message=f"{reaction_type.value.capitalize()} removed")


@router.post("/{post_id}/like", response_model=ReactionResponse)
async def like_post(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> ReactionResponse:
    """Like a post, replacing the caller's dislike if there is one."""
    return _react(db, current_user.id, post_id, ReactionType.LIKE)


@router.post("/{post_id}/dislike", response_model=ReactionResponse)
async def dislike_post(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> ReactionResponse:
    return _react(db, current_user.id, post_id, ReactionType.DISLIKE)


@router.delete("/{post_id}/like", response_model=MessageResponse)
async def remove_post_like(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    return _unreact(db, current_user.id, post_id, ReactionType.LIKE)


@router.delete("/{post_id}/dislike", response_model=MessageResponse)
async def remove_post_dislike(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    return _unreact(db, current_user.id, post_id, ReactionType.DISLIKE)


@router.post("/{post_id}/favorites", response_model=MessageResponse)
async def add_favorite(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    post_service.add_favorite(db, current_user, post_id)
    return MessageResponse(message="Post added to favorites")


@router.delete("/{post_id}/favorites", response_model=MessageResponse)
async def remove_favorite(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    post_service.remove_favorite(db, current_user, post_id)
    return MessageResponse(message="Post removed from favorites")


@router.post("/{post_id}/subscribe", response_model=MessageResponse)
async def subscribe(post_id: int, db: SessionDep, current_user: CurrentUserDep) -> MessageResponse:
    """Receive notifications when the post changes or gets a new comment."""
    post_service.subscribe(db, current_user, post_id)
    return MessageResponse(message="Subscribed to post")


@router.delete("/{post_id}/subscribe", response_model=MessageResponse)
async def unsubscribe(
    post_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    post_service.unsubscribe(db, current_user, post_id)
    return MessageResponse(message="Unsubscribed from post")
