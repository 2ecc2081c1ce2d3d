"""Category-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CategoryCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=64)
    description: str | None = None


class CategoryUpdate(BaseModel):
    title: str | None = Field(None, min_length=1, max_length=64)
    description: str | None = None


class CategoryResponse(BaseModel):
    id: int
    title: str
    description: str | None

    model_config = ConfigDict(from_attributes=True)
