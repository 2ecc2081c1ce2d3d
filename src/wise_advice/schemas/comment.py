"""Comment-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1)


class CommentUpdate(BaseModel):
    """Authors may change ``content``, admins may change ``status``."""

    content: str | None = Field(None, min_length=1)
    status: Literal["active", "inactive"] | None = None


class CommentResponse(BaseModel):
    id: int
    author_id: int
    author_login: str
    content: str
    parent_id: int | None
    post_id: int | None = None
    status: str
    is_best: bool
    locked: bool
    publish_date: datetime

    model_config = ConfigDict(from_attributes=True)
