from datetime import datetime
from pydantic import BaseModel, Field
from app.models.category import CategoryType
from app.schemas.base import PartialUpdate


class CategoryCreate(BaseModel):
    """Schema for creating a category, optionally under a parent of the same book"""

    book_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    note: str | None = None
    category_type: CategoryType = CategoryType.EXPENSE
    parent_category_id: int | None = Field(None, gt=0)


class CategoryUpdate(PartialUpdate):
    """Schema for updating a category; set parent_category_id to null to detach"""

    non_nullable = ("name", "category_type")

    name: str | None = Field(None, min_length=1, max_length=255)
    note: str | None = None
    category_type: CategoryType | None = None
    parent_category_id: int | None = Field(None, gt=0)


class CategoryResponse(BaseModel):
    """Schema for category response"""

    id: int
    book_id: int
    name: str
    note: str | None
    category_type: CategoryType
    parent_category_id: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
