import datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Optional
from app.schemas.base import PartialUpdate


class TransactionCreate(BaseModel):
    """Schema for creating a new transaction"""

    account_id: int = Field(..., gt=0)
    category_id: Optional[int] = Field(None, gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    note: Optional[str] = Field(None, max_length=1000)
    amount: Decimal = Field(..., max_digits=15, decimal_places=2)
    date: datetime.date
    exercised: bool = False


class TransactionUpdate(PartialUpdate):
    """Schema for updating a transaction; account_id cannot change"""

    non_nullable = ("description", "amount", "date", "exercised")

    category_id: Optional[int] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    note: Optional[str] = Field(None, max_length=1000)
    amount: Optional[Decimal] = Field(None, max_digits=15, decimal_places=2)
    date: Optional[datetime.date] = None
    exercised: Optional[bool] = None


class TransactionResponse(BaseModel):
    """Schema for transaction response"""

    model_config = {"from_attributes": True}

    id: int
    account_id: int
    category_id: Optional[int]
    description: str
    note: Optional[str]
    amount: float
    date: datetime.date
    exercised: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime


class TransactionListResponse(BaseModel):
    """Schema for list of transactions"""

    transactions: list[TransactionResponse]
    total: int
