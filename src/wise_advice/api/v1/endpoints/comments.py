"""Comment-related endpoints for the Wise Advice API."""

from fastapi import APIRouter
from sqlalchemy.orm import Session

from wise_advice.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from wise_advice.schemas.common import MessageResponse
from wise_advice.schemas.reaction import ReactionResponse
from wise_advice.services import comment_service
from wise_advice.services.reactions import (
    ReactionType,
    TargetKind,
    apply_reaction,
    list_reactions,
    remove_reaction,
)

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{comment_id}", response_model=CommentResponse)
async def get_comment(comment_id: int, db: SessionDep) -> CommentResponse:
    return comment_service.to_response(comment_service.get_comment(db, comment_id))


@router.patch("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: int,
    comment_data: CommentUpdate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    """Edit a comment. Authors change content, admins change status."""
    comment = comment_service.update_comment(db, current_user, comment_id, comment_data)
    return comment_service.to_response(comment)


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    """Delete a comment and every reply below it."""
    comment_service.delete_comment(db, current_user, comment_id)
    return MessageResponse(message="Comment deleted")


@router.patch("/{comment_id}/lock", response_model=CommentResponse)
async def lock_comment(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    comment = comment_service.set_comment_lock(db, current_user, comment_id, locked=True)
    return comment_service.to_response(comment)


@router.patch("/{comment_id}/unlock", response_model=CommentResponse)
async def unlock_comment(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    comment = comment_service.set_comment_lock(db, current_user, comment_id, locked=False)
    return comment_service.to_response(comment)


@router.get("/{comment_id}/comments", response_model=list[CommentResponse])
async def list_replies(comment_id: int, db: SessionDep) -> list[CommentResponse]:
    return [
        comment_service.to_response(reply)
        for reply in comment_service.list_replies(db, comment_id)
    ]


@router.post("/{comment_id}/comments", response_model=CommentResponse)
async def create_reply(
    comment_id: int,
    comment_data: CommentCreate,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> CommentResponse:
    reply = comment_service.add_reply(db, current_user, comment_id, comment_data.content)
    return comment_service.to_response(reply)


@router.get("/{comment_id}/like", response_model=list[ReactionResponse])
async def list_comment_likes(comment_id: int, db: SessionDep) -> list[ReactionResponse]:
    reactions = list_reactions(db, TargetKind.COMMENT, comment_id, ReactionType.LIKE)
    return [ReactionResponse.model_validate(reaction) for reaction in reactions]


@router.get("/{comment_id}/dislike", response_model=list[ReactionResponse])
async def list_comment_dislikes(comment_id: int, db: SessionDep) -> list[ReactionResponse]:
    reactions = list_reactions(db, TargetKind.COMMENT, comment_id, ReactionType.DISLIKE)
    return [ReactionResponse.model_validate(reaction) for reaction in reactions]


def _react(
    db: Session,
    user_id: int,
    comment_id: int,
    reaction_type: ReactionType,
) -> ReactionResponse:
    reaction = apply_reaction(db, user_id, comment_id, TargetKind.COMMENT, reaction_type)
    db.commit()
    db.refresh(reaction)
    return ReactionResponse.model_validate(reaction)


def _unreact(
    db: Session,
    user_id: int,
    comment_id: int,
    reaction_type: ReactionType,
) -> MessageResponse:
    remove_reaction(db, user_id, comment_id, TargetKind.COMMENT, reaction_type)
    db.commit()
    return MessageResponse(message=f"{reaction_type.value.capitalize()} removed")


@router.post("/{comment_id}/like", response_model=ReactionResponse)
async def like_comment(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> ReactionResponse:
    return _react(db, current_user.id, comment_id, ReactionType.LIKE)


@router.post("/{comment_id}/dislike", response_model=ReactionResponse)
async def dislike_comment(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> ReactionResponse:
    return _react(db, current_user.id, comment_id, ReactionType.DISLIKE)


@router.delete("/{comment_id}/like", response_model=MessageResponse)
async def remove_comment_like(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    return _unreact(db, current_user.id, comment_id, ReactionType.LIKE)


@router.delete("/{comment_id}/dislike", response_model=MessageResponse)
async def remove_comment_dislike(
    comment_id: int,
    db: SessionDep,
    current_user: CurrentUserDep,
) -> MessageResponse:
    return _unreact(db, current_user.id, comment_id, ReactionType.DISLIKE)
