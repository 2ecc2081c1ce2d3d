"""Ownership and role checks shared by every mutating operation."""

from __future__ import annotations

import enum

from wise_advice.models import User

from .errors import PermissionDeniedError

__all__ = ["Capability", "can", "require"]


class Capability(enum.Enum):
    """Things an actor may try to do to a post, comment, category or account."""

    EDIT = "edit"
    EDIT_CONTENT = "edit_content"
    CHANGE_STATUS = "change_status"
    TOGGLE_LOCK = "toggle_lock"
    DELETE = "delete"
    CHOOSE_BEST_COMMENT = "choose_best_comment"
    BYPASS_LOCK = "bypass_lock"
    MANAGE_USERS = "manage_users"
    MANAGE_CATEGORIES = "manage_categories"
    EDIT_PROFILE = "edit_profile"


_OWNER_OR_ADMIN = frozenset({Capability.EDIT, Capability.DELETE, Capability.EDIT_PROFILE})
_OWNER_ONLY = frozenset({Capability.EDIT_CONTENT, Capability.CHOOSE_BEST_COMMENT})


def can(actor: User | None, capability: Capability, owner_id: int | None = None) -> bool:
    """Return True when ``actor`` holds ``capability`` over an entity owned by ``owner_id``.

    Anonymous actors hold no capabilities. Choosing the best comment is
    reserved to the post author; admins do not bypass that check.
    """
    if actor is None:
        return False
    is_owner = owner_id is not None and actor.id == owner_id
    if capability in _OWNER_ONLY:
        return is_owner
    if capability in _OWNER_OR_ADMIN:
        return is_owner or actor.is_admin
    # Remaining capabilities are admin only.
    return actor.is_admin


def require(
    actor: User | None,
    capability: Capability,
    owner_id: int | None = None,
    message: str | None = None,
) -> None:
    """Raise ``PermissionDeniedError`` unless ``actor`` holds ``capability``."""
    if not can(actor, capability, owner_id):
        raise PermissionDeniedError(message or "You do not have permission to do this")
