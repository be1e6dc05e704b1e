"""Category schemas. Categories are seeded and read-only through the API."""

from datetime import datetime

from pydantic import BaseModel, Field, ConfigDict


class CategoryBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None


class CategoryResponse(CategoryBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime


class CategoryListResponse(BaseModel):
    success: bool = True
    categories: list[CategoryResponse]
