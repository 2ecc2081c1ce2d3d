"""Post-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _split_categories(value: object) -> object:
    # Clients send either a JSON list or a comma separated string.
    if isinstance(value, str):
        return [title.strip() for title in value.split(",") if title.strip()]
    return value


class PostCreate(BaseModel):
    """Schema for creating a new post."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    categories: list[str] = Field(default_factory=list, description="Category titles")

    @field_validator("categories", mode="before")
    @classmethod
    def _normalize_categories(cls, value: object) -> object:
        return _split_categories(value)


class PostUpdate(BaseModel):
    """Partial post update.

    Authors may change ``title`` and ``content``, admins may change ``status``,
    either may replace ``categories``.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    status: Literal["active", "inactive"] | None = None
    categories: list[str] | None = None

    @field_validator("categories", mode="before")
    @classmethod
    def _normalize_categories(cls, value: object) -> object:
        return _split_categories(value)


class PostResponse(BaseModel):
    """Schema for post information returned by the API."""

    id: int
    author_id: int
    author_login: str
    title: str
    content: str
    status: str
    locked: bool
    publish_date: datetime
    likes_count: int = 0
    categories: list[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    total: int
