"""Like/dislike Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ReactionResponse(BaseModel):
    id: int
    author_id: int
    post_id: int | None
    comment_id: int | None
    type: str
    publish_date: datetime

    model_config = ConfigDict(from_attributes=True)
