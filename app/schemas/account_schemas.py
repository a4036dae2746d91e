from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field
from app.models.account import AccountType
from app.schemas.base import PartialUpdate


class AccountCreate(BaseModel):
    """Schema for creating a new account"""

    book_id: int = Field(..., gt=0)
    name: str = Field(..., min_length=1, max_length=255)
    note: str | None = None
    account_type: AccountType = AccountType.DEBIT
    starting_amount: Decimal = Field(default=Decimal("0.00"), max_digits=15, decimal_places=2)


class AccountUpdate(PartialUpdate):
    """Schema for updating an account; book_id cannot change"""

    non_nullable = ("name", "account_type", "starting_amount")

    name: str | None = Field(None, min_length=1, max_length=255)
    note: str | None = None
    account_type: AccountType | None = None
    starting_amount: Decimal | None = Field(None, max_digits=15, decimal_places=2)


class AccountResponse(BaseModel):
    """Schema for account response"""

    id: int
    book_id: int
    name: str
    note: str | None
    account_type: AccountType
    starting_amount: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AccountListResponse(BaseModel):
    """Schema for list of accounts"""

    accounts: list[AccountResponse]
    total: int


class AccountBalanceResponse(BaseModel):
    """Account balance up to a date, from transactions only"""

    account_id: int
    up_to_date: date
    exercised_balance: float
    projected_balance: float
