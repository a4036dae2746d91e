from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field
from app.models.role import TeamRole
from app.schemas.base import PartialUpdate

WeekStart = Literal["monday", "sunday", "saturday"]


class BookCreate(BaseModel):
    """Schema for creating a new book"""

    team_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    note: str | None = None
    currency_symbol: str = Field(default="$", min_length=1, max_length=8)
    week_start: WeekStart = "monday"


class BookUpdate(PartialUpdate):
    """Schema for updating book settings; team_id cannot change"""

    non_nullable = ("name", "currency_symbol", "week_start")

    name: str | None = Field(None, min_length=1, max_length=255)
    note: str | None = None
    currency_symbol: str | None = Field(None, min_length=1, max_length=8)
    week_start: WeekStart | None = None


class BookResponse(BaseModel):
    """Schema for book response"""

    id: int
    team_id: int
    name: str
    note: str | None
    currency_symbol: str
    week_start: str
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None

    model_config = {"from_attributes": True}


class BookUserResponse(BaseModel):
    """User with access to a book through the book's team"""

    id: int
    username: str
    role: TeamRole
    active: bool
