"""Category management."""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from wise_advice.models import Category, User
from wise_advice.schemas.category import CategoryCreate, CategoryUpdate

from .errors import ConflictError, NotFoundError, ValidationFailedError
from .permissions import Capability, require

logger = logging.getLogger(__name__)


def list_categories(db: Session) -> list[Category]:
    return list(db.scalars(select(Category).order_by(Category.title)))


def get_category(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


def _ensure_title_free(db: Session, title: str, exclude_id: int | None = None) -> None:
    stmt = select(Category.id).where(Category.title == title)
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if db.scalar(stmt) is not None:
        raise ConflictError("Category with this title already exists")


def create_category(db: Session, actor: User, data: CategoryCreate) -> Category:
    require(actor, Capability.MANAGE_CATEGORIES, message="Only an admin can manage categories")
    _ensure_title_free(db, data.title)
    category = Category(title=data.title, description=data.description)
    db.add(category)
    db.commit()
    db.refresh(category)
    logger.info("Admin %s created category %r", actor.id, category.title)
    return category


def update_category(
    db: Session,
    actor: User,
    category_id: int,
    data: CategoryUpdate,
) -> Category:
    require(actor, Capability.MANAGE_CATEGORIES, message="Only an admin can manage categories")
    category = get_category(db, category_id)
    changes = {
        key: value
        for key, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not changes:
        raise ValidationFailedError("Nothing to update")
    if "title" in changes:
        _ensure_title_free(db, changes["title"], exclude_id=category.id)

    for key, value in changes.items():
        setattr(category, key, value)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, actor: User, category_id: int) -> None:
    """Delete a category; posts filed under it lose the tag but survive."""
    require(actor, Capability.MANAGE_CATEGORIES, message="Only an admin can manage categories")
    category = get_category(db, category_id)
    db.delete(category)
    db.commit()
    logger.info("Admin %s deleted category %s", actor.id, category_id)
