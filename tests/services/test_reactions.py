"""Tests for like/dislike bookkeeping and author ratings."""

from __future__ import annotations

import pytest
from sqlalchemy import select

from wise_advice.models import Reaction
from wise_advice.services.errors import (
    DuplicateReactionError,
    NotFoundError,
    PermissionDeniedError,
)
from wise_advice.services.reactions import (
    ReactionType,
    TargetKind,
    adjust_rating,
    apply_reaction,
    list_reactions,
    remove_reaction,
    settle_deleted_target,
    withdraw_reactions,
)


def _rating(db_session, user) -> int:
    db_session.refresh(user)
    return user.rating


def _reactions(db_session, post_id: int) -> list[Reaction]:
    return list(db_session.scalars(select(Reaction).where(Reaction.post_id == post_id)))


def test_like_increments_author_rating(db_session, test_post, test_user, other_user) -> None:
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)

    assert _rating(db_session, test_user) == 1
    rows = _reactions(db_session, test_post.id)
    assert [(row.author_id, row.type) for row in rows] == [(other_user.id, "like")]


def test_dislike_decrements_author_rating(db_session, test_post, test_user, other_user) -> None:
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)

    assert _rating(db_session, test_user) == -1


def test_same_reaction_twice_is_rejected(db_session, test_post, test_user, other_user) -> None:
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)

    with pytest.raises(DuplicateReactionError) as excinfo:
        apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)

    assert excinfo.value.status_code == 403
    assert len(_reactions(db_session, test_post.id)) == 1
    assert _rating(db_session, test_user) == 1


def test_like_replaces_dislike_with_net_plus_two(
    db_session, test_post, test_user, other_user
) -> None:
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)
    before = _rating(db_session, test_user)

    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)

    assert _rating(db_session, test_user) - before == 2
    rows = _reactions(db_session, test_post.id)
    assert len(rows) == 1
    assert rows[0].type == "like"


def test_dislike_replaces_like_with_net_minus_two(
    db_session, test_post, test_user, other_user
) -> None:
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)
    before = _rating(db_session, test_user)

    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)

    assert _rating(db_session, test_user) - before == -2
    assert [row.type for row in _reactions(db_session, test_post.id)] == ["dislike"]


def test_remove_like_and_dislike_apply_opposite_delta(
    db_session, test_post, test_user, other_user, make_user
) -> None:
    carol = make_user("carol")
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)
    apply_reaction(db_session, carol.id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)
    assert _rating(db_session, test_user) == 0

    remove_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)
    assert _rating(db_session, test_user) == -1

    remove_reaction(db_session, carol.id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)
    assert _rating(db_session, test_user) == 0
    assert _reactions(db_session, test_post.id) == []


def test_remove_reaction_not_held(db_session, test_post, other_user) -> None:
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)

    with pytest.raises(PermissionDeniedError):
        remove_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)


def test_locked_target_rejects_reactions(db_session, make_post, test_user, other_user) -> None:
    post = make_post(test_user, locked=True)

    with pytest.raises(PermissionDeniedError):
        apply_reaction(db_session, other_user.id, post.id, TargetKind.POST, ReactionType.LIKE)
    with pytest.raises(PermissionDeniedError):
        remove_reaction(db_session, other_user.id, post.id, TargetKind.POST, ReactionType.LIKE)
    assert _rating(db_session, test_user) == 0


def test_missing_target(db_session, other_user) -> None:
    with pytest.raises(NotFoundError):
        apply_reaction(db_session, other_user.id, 9999, TargetKind.POST, ReactionType.LIKE)
    with pytest.raises(NotFoundError):
        list_reactions(db_session, TargetKind.COMMENT, 9999, ReactionType.LIKE)


def test_comment_reactions_rate_comment_author(
    db_session, test_post, test_user, other_user, make_comment
) -> None:
    comment = make_comment(other_user, post=test_post)

    apply_reaction(db_session, test_user.id, comment.id, TargetKind.COMMENT, ReactionType.LIKE)

    assert _rating(db_session, other_user) == 1
    assert _rating(db_session, test_user) == 0
    likes = list_reactions(db_session, TargetKind.COMMENT, comment.id, ReactionType.LIKE)
    assert [like.comment_id for like in likes] == [comment.id]
    assert likes[0].post_id is None


def test_settle_deleted_target_compensates_remaining_reactions(
    db_session, test_post, test_user, make_user
) -> None:
    voters = [make_user(f"voter{i}") for i in range(4)]
    for voter in voters[:3]:
        apply_reaction(db_session, voter.id, test_post.id, TargetKind.POST, ReactionType.LIKE)
    apply_reaction(db_session, voters[3].id, test_post.id, TargetKind.POST, ReactionType.DISLIKE)
    assert _rating(db_session, test_user) == 2

    delta = settle_deleted_target(db_session, test_post, TargetKind.POST)

    assert delta == -2
    assert _rating(db_session, test_user) == 0


def test_adjust_rating_is_relative(db_session, test_user) -> None:
    adjust_rating(db_session, test_user.id, 5)
    adjust_rating(db_session, test_user.id, -2)
    adjust_rating(db_session, test_user.id, 0)

    assert _rating(db_session, test_user) == 3


def test_withdraw_reverses_every_reaction_given(
    db_session, test_post, test_user, other_user, make_comment
) -> None:
    comment = make_comment(test_user, post=test_post)
    apply_reaction(db_session, other_user.id, test_post.id, TargetKind.POST, ReactionType.LIKE)
    apply_reaction(db_session, other_user.id, comment.id, TargetKind.COMMENT, ReactionType.LIKE)
    db_session.commit()
    assert _rating(db_session, test_user) == 2

    withdrawn = withdraw_reactions(db_session, other_user.id)
    db_session.commit()

    assert withdrawn == 2
    assert _rating(db_session, test_user) == 0
    assert list_reactions(db_session, TargetKind.POST, test_post.id, ReactionType.LIKE) == []
