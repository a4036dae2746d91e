from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.services.account_service import AccountService
from app.schemas.account_schemas import (
    AccountCreate,
    AccountUpdate,
    AccountResponse,
    AccountListResponse,
    AccountBalanceResponse,
)

router = APIRouter()


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    data: AccountCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Create a new account in a book (ADMIN or COLLABORATOR)"""
    service = AccountService(db)
    return service.create_account(data, user)


@router.get("", response_model=AccountListResponse)
def list_accounts(
    book_id: int = Query(..., description="Book whose accounts to list"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get all accounts of a book"""
    service = AccountService(db)
    accounts = service.get_book_accounts(book_id, user)
    return AccountListResponse(accounts=accounts, total=len(accounts))


@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Get specific account details"""
    service = AccountService(db)
    return service.get_account(account_id, user)


@router.get("/{account_id}/balance", response_model=AccountBalanceResponse)
def get_account_balance(
    account_id: int,
    up_to_date: Optional[date] = Query(
        None, description="Include transactions dated up to this day (default today)"
    ),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Exercised and projected balance of an account"""
    service = AccountService(db)
    return service.get_balance(account_id, user, up_to_date=up_to_date)


@router.put("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    data: AccountUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update account details"""
    service = AccountService(db)
    return service.update_account(account_id, data, user)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete account and all associated transactions"""
    service = AccountService(db)
    service.delete_account(account_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
