"""Like/dislike bookkeeping and author rating maintenance.

A user holds at most one reaction per post or comment. Every reaction change
moves the target author's ``rating`` by a relative delta: a like is worth +1,
a dislike -1, and removing either applies the opposite amount. Switching from
a dislike to a like therefore nets +2. When a post or comment is deleted its
remaining reactions disappear with it, so ``settle_deleted_target`` applies
the compensating delta in one step before the row goes away.
"""

from __future__ import annotations

import enum
import logging

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import InstrumentedAttribute

from wise_advice.models import Comment, Post, Reaction, User

from .errors import DuplicateReactionError, NotFoundError, PermissionDeniedError

logger = logging.getLogger(__name__)

__all__ = [
    "ReactionType",
    "TargetKind",
    "adjust_rating",
    "apply_reaction",
    "count_reactions",
    "list_reactions",
    "load_target",
    "remove_reaction",
    "settle_deleted_target",
    "withdraw_reactions",
]


class TargetKind(str, enum.Enum):
    POST = "post"
    COMMENT = "comment"

    @property
    def model(self) -> type[Post] | type[Comment]:
        return Post if self is TargetKind.POST else Comment

    @property
    def column(self) -> InstrumentedAttribute[int | None]:
        """Column of ``likes`` pointing at this kind of target."""
        return Reaction.post_id if self is TargetKind.POST else Reaction.comment_id


class ReactionType(str, enum.Enum):
    LIKE = "like"
    DISLIKE = "dislike"

    @property
    def delta(self) -> int:
        """Rating change applied to the target author when this reaction is added."""
        return 1 if self is ReactionType.LIKE else -1

    @property
    def opposite(self) -> ReactionType:
        return ReactionType.DISLIKE if self is ReactionType.LIKE else ReactionType.LIKE


def load_target(db: Session, kind: TargetKind, target_id: int) -> Post | Comment:
    """Return the post or comment ``target_id`` or raise ``NotFoundError``."""
    target = db.get(kind.model, target_id)
    if target is None:
        raise NotFoundError(f"{kind.value.capitalize()} not found")
    return target


def adjust_rating(db: Session, user_id: int, delta: int) -> None:
    """Add ``delta`` to the stored rating of ``user_id``."""
    if delta == 0:
        return
    db.execute(
        update(User)
        .where(User.id == user_id)
        .values(rating=User.rating + delta)
    )
    logger.debug("Adjusted rating of user %s by %+d", user_id, delta)


def _held_reaction(
    db: Session,
    actor_id: int,
    kind: TargetKind,
    target_id: int,
    reaction_type: ReactionType | None = None,
) -> Reaction | None:
    stmt = select(Reaction).where(
        Reaction.author_id == actor_id,
        kind.column == target_id,
    )
    if reaction_type is not None:
        stmt = stmt.where(Reaction.type == reaction_type.value)
    return db.scalars(stmt).first()


def _ensure_unlocked(target: Post | Comment, kind: TargetKind) -> None:
    if target.locked:
        raise PermissionDeniedError(f"You cannot respond to this {kind.value}")


def apply_reaction(
    db: Session,
    actor_id: int,
    target_id: int,
    kind: TargetKind,
    desired: ReactionType,
) -> Reaction:
    """Give ``desired`` to the target on behalf of ``actor_id``.

    An opposite reaction held by the actor is replaced. Repeating the same
    reaction raises ``DuplicateReactionError`` without writing anything.

    Raises:
        NotFoundError: The target does not exist.
        PermissionDeniedError: The target is locked.
        DuplicateReactionError: The actor already holds ``desired``.
    """
    target = load_target(db, kind, target_id)
    _ensure_unlocked(target, kind)

    existing = _held_reaction(db, actor_id, kind, target_id)
    if existing is not None and existing.type == desired.value:
        raise DuplicateReactionError(f"You have already {desired.value}d this {kind.value}")

    if existing is not None:
        db.delete(existing)
        db.flush()
        adjust_rating(db, target.author_id, -desired.opposite.delta)

    reaction = Reaction(author_id=actor_id, type=desired.value)
    setattr(reaction, kind.column.key, target_id)
    db.add(reaction)
    try:
        db.flush()
    except IntegrityError as err:
        # A concurrent request inserted the row between our check and insert.
        db.rollback()
        raise DuplicateReactionError(
            f"You have already {desired.value}d this {kind.value}"
        ) from err

    adjust_rating(db, target.author_id, desired.delta)
    logger.info(
        "User %s %sd %s %s (replaced=%s)",
        actor_id,
        desired.value,
        kind.value,
        target_id,
        existing is not None,
    )
    return reaction


def remove_reaction(
    db: Session,
    actor_id: int,
    target_id: int,
    kind: TargetKind,
    reaction_type: ReactionType,
) -> None:
    """Withdraw the actor's ``reaction_type`` from the target.

    Raises:
        NotFoundError: The target does not exist.
        PermissionDeniedError: The target is locked or the actor holds no such reaction.
    """
    target = load_target(db, kind, target_id)
    _ensure_unlocked(target, kind)

    existing = _held_reaction(db, actor_id, kind, target_id, reaction_type)
    if existing is None:
        raise PermissionDeniedError(
            f"You cannot remove {reaction_type.value} from this {kind.value}"
        )

    db.delete(existing)
    db.flush()
    adjust_rating(db, target.author_id, -reaction_type.delta)
    logger.info(
        "User %s removed %s from %s %s", actor_id, reaction_type.value, kind.value, target_id
    )


def count_reactions(
    db: Session,
    kind: TargetKind,
    target_id: int,
    reaction_type: ReactionType,
) -> int:
    stmt = select(func.count(Reaction.id)).where(
        kind.column == target_id,
        Reaction.type == reaction_type.value,
    )
    return db.scalar(stmt) or 0


def settle_deleted_target(db: Session, target: Post | Comment, kind: TargetKind) -> int:
    """Compensate the author's rating for reactions lost with ``target``.

    Returns:
        The delta applied, ``dislikes - likes``.
    """
    likes = count_reactions(db, kind, target.id, ReactionType.LIKE)
    dislikes = count_reactions(db, kind, target.id, ReactionType.DISLIKE)
    delta = dislikes - likes
    adjust_rating(db, target.author_id, delta)
    return delta


def list_reactions(
    db: Session,
    kind: TargetKind,
    target_id: int,
    reaction_type: ReactionType,
) -> list[Reaction]:
    """Return reactions of one type on an existing target, oldest first."""
    load_target(db, kind, target_id)
    stmt = (
        select(Reaction)
        .where(kind.column == target_id, Reaction.type == reaction_type.value)
        .order_by(Reaction.id)
    )
    return list(db.scalars(stmt))


def withdraw_reactions(db: Session, actor_id: int) -> int:
    """Delete every reaction ``actor_id`` gave and reverse its rating delta.

    Runs before an account is removed so the authors it reacted to keep a
    rating that matches the reactions still stored.
    """
    reactions = list(db.scalars(select(Reaction).where(Reaction.author_id == actor_id)))
    for reaction in reactions:
        target = reaction.post if reaction.post_id is not None else reaction.comment
        if target is not None and target.author_id != actor_id:
            adjust_rating(db, target.author_id, -ReactionType(reaction.type).delta)
        db.delete(reaction)
    db.flush()
    return len(reactions)
